"""
BookInstance handlers. A copy has no dependents, so its guarded delete
always proceeds once confirmed.
"""

from typing import Any, Mapping, Optional

from ..core.errors import NotFound
from ..display import bookinstance_view
from ..models.book import Book
from ..models.bookinstance import BookInstance, BookStatus
from ..services.aggregate import fetch_aggregate
from ..services.deletion import guarded_delete
from ..services.forms import BOOKINSTANCE_FORM
from .responses import Catalog, Redirect, Render, Response, form_errors


def _form(title: str, book_list, bookinstance=None, selected_book: Optional[str] = None, errors=None) -> Render:
    context = {
        "title": title,
        "book_list": book_list,
        "selected_book": selected_book,
        "status_choices": BookStatus.values(),
        "bookinstance": bookinstance,
    }
    if errors is not None:
        context["errors"] = errors
    return Render("bookinstance_form", context)


async def _rejected_form(catalog: Catalog, title: str, result, bookinstance_id: Optional[str] = None) -> Render:
    books = await catalog.store.find_many(Book, sort="title")
    values = result.sanitized
    # Unsaved copy, so the echo has the same keys as a stored one
    echo = BookInstance(
        id=bookinstance_id,
        book_id=values["book"],
        imprint=values["imprint"],
        status=values["status"],
        due_back=values["due_back"],
    )
    return _form(
        title, books,
        bookinstance=bookinstance_view(echo, catalog.url_prefix),
        selected_book=values["book"],
        errors=form_errors(result),
    )


async def bookinstance_list(catalog: Catalog) -> Response:
    instances = await catalog.store.find_many(BookInstance)
    return Render("bookinstance_list", {
        "title": "Book Instance List",
        "bookinstance_list": [bookinstance_view(i, catalog.url_prefix) for i in instances],
    })


async def bookinstance_detail(catalog: Catalog, bookinstance_id: str) -> Response:
    instance = await catalog.store.find_by_id(BookInstance, bookinstance_id)
    if instance is None:
        raise NotFound("BookInstance", bookinstance_id)
    book_title = instance.book.title if instance.book else "Unknown book"
    return Render("bookinstance_detail", {
        "title": f"Copy: {book_title}",
        "bookinstance": bookinstance_view(instance, catalog.url_prefix),
    })


async def bookinstance_create_get(catalog: Catalog) -> Response:
    books = await catalog.store.find_many(Book, sort="title")
    return _form("Create New BookInstance", books)


async def bookinstance_create_post(catalog: Catalog, form: Mapping[str, Any]) -> Response:
    result, candidate = BOOKINSTANCE_FORM.process(form)
    if candidate is None:
        return await _rejected_form(catalog, "Create New BookInstance", result)
    bookinstance_id = await catalog.store.insert(BookInstance, candidate.model_dump())
    return Redirect(catalog.url("bookinstance", bookinstance_id))


async def bookinstance_delete_get(catalog: Catalog, bookinstance_id: str) -> Response:
    outcome = await guarded_delete(catalog.store, BookInstance, bookinstance_id, timeout=catalog.lookup_timeout)
    if outcome.not_found:
        return Redirect(catalog.listing("bookinstance"))
    return Render("bookinstance_delete", {
        "title": "Delete BookInstance",
        "bookinstance": bookinstance_view(outcome.entity, catalog.url_prefix),
    })


async def bookinstance_delete_post(catalog: Catalog, bookinstance_id: str) -> Response:
    await guarded_delete(catalog.store, BookInstance, bookinstance_id, confirm=True, timeout=catalog.lookup_timeout)
    return Redirect(catalog.listing("bookinstance"))


async def bookinstance_update_get(catalog: Catalog, bookinstance_id: str) -> Response:
    aggregate = await fetch_aggregate(
        catalog.store, BookInstance, bookinstance_id,
        extras={"book_list": catalog.store.find_many(Book, sort="title")},
        timeout=catalog.lookup_timeout,
    )
    if not aggregate.found:
        return Redirect(catalog.listing("bookinstance"))
    instance = aggregate.primary
    return _form(
        "Update BookInstance", aggregate.extras["book_list"],
        bookinstance=bookinstance_view(instance, catalog.url_prefix),
        selected_book=instance.book_id,
    )


async def bookinstance_update_post(catalog: Catalog, bookinstance_id: str, form: Mapping[str, Any]) -> Response:
    result, candidate = BOOKINSTANCE_FORM.process(form)
    if candidate is None:
        return await _rejected_form(catalog, "Update BookInstance", result, bookinstance_id)
    updated = await catalog.store.update_by_id(BookInstance, bookinstance_id, candidate.model_dump())
    if updated is None:
        raise NotFound("BookInstance", bookinstance_id)
    return Redirect(catalog.url("bookinstance", bookinstance_id))
