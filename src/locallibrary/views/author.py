"""
Author handlers: list, detail, create, delete and update.
"""

from typing import Any, Mapping, Optional

from ..core.errors import NotFound
from ..display import author_view
from ..models.author import Author
from ..models.book import Book
from ..services.aggregate import Dependent, fetch_required
from ..services.deletion import guarded_delete
from ..services.forms import AUTHOR_FORM
from .responses import Catalog, Redirect, Render, Response, form_errors


def _form(title: str, author=None, errors=None) -> Render:
    context = {"title": title, "author": author}
    if errors is not None:
        context["errors"] = errors
    return Render("author_form", context)


def _echo(catalog: Catalog, result, author_id: Optional[str] = None) -> dict:
    """Rejected form values, shaped like the update form of a stored author."""
    return author_view(Author(id=author_id, **result.sanitized), catalog.url_prefix)


def _delete_page(catalog: Catalog, outcome) -> Render:
    return Render("author_delete", {
        "title": "Delete Author",
        "author": author_view(outcome.entity, catalog.url_prefix),
        "author_books": outcome.dependents["books"],
    })


async def author_list(catalog: Catalog) -> Response:
    authors = await catalog.store.find_many(Author, sort="family_name")
    return Render("author_list", {
        "title": "Author List",
        "author_list": [author_view(a, catalog.url_prefix) for a in authors],
    })


async def author_detail(catalog: Catalog, author_id: str) -> Response:
    aggregate = await fetch_required(
        catalog.store, Author, author_id,
        dependents=[Dependent("author_books", Book, "author", sort="title")],
        timeout=catalog.lookup_timeout,
    )
    return Render("author_detail", {
        "title": "Author Detail",
        "author": author_view(aggregate.primary, catalog.url_prefix),
        "author_books": aggregate.dependents["author_books"],
    })


async def author_create_get(catalog: Catalog) -> Response:
    return _form("Create New Author")


async def author_create_post(catalog: Catalog, form: Mapping[str, Any]) -> Response:
    result, candidate = AUTHOR_FORM.process(form)
    if candidate is None:
        return _form("Create New Author", author=_echo(catalog, result), errors=form_errors(result))
    author_id = await catalog.store.insert(Author, candidate.model_dump())
    return Redirect(catalog.url("author", author_id))


async def author_delete_get(catalog: Catalog, author_id: str) -> Response:
    outcome = await guarded_delete(catalog.store, Author, author_id, timeout=catalog.lookup_timeout)
    if outcome.not_found:
        return Redirect(catalog.listing("author"))
    return _delete_page(catalog, outcome)


async def author_delete_post(catalog: Catalog, author_id: str) -> Response:
    outcome = await guarded_delete(catalog.store, Author, author_id, confirm=True, timeout=catalog.lookup_timeout)
    if outcome.blocked:
        return _delete_page(catalog, outcome)
    return Redirect(catalog.listing("author"))


async def author_update_get(catalog: Catalog, author_id: str) -> Response:
    author = await catalog.store.find_by_id(Author, author_id)
    if author is None:
        return Redirect(catalog.listing("author"))
    return _form("Update Author", author=author_view(author, catalog.url_prefix))


async def author_update_post(catalog: Catalog, author_id: str, form: Mapping[str, Any]) -> Response:
    result, candidate = AUTHOR_FORM.process(form)
    if candidate is None:
        return _form("Update Author", author=_echo(catalog, result, author_id), errors=form_errors(result))
    updated = await catalog.store.update_by_id(Author, author_id, candidate.model_dump())
    if updated is None:
        raise NotFound("Author", author_id)
    return Redirect(catalog.url("author", author_id))
