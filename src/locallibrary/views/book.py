"""
Book handlers. The create and update forms need every author and genre,
fetched in the same concurrent join as the book itself where there is one.
"""

from typing import Any, Dict, Iterable, List, Mapping, Optional

from ..core.errors import NotFound
from ..display import author_view, bookinstance_view
from ..models.author import Author
from ..models.book import Book
from ..models.bookinstance import BookInstance
from ..models.genre import Genre
from ..services.aggregate import Dependent, fetch_aggregate, fetch_required, gather_lookups
from ..services.deletion import guarded_delete
from ..services.forms import BOOK_FORM
from .responses import Catalog, Redirect, Render, Response, form_errors


def genre_choices(genres: Iterable[Genre], selected: Iterable[str]) -> List[Dict[str, Any]]:
    """Genre checkboxes for the book form, with the selected ones checked."""
    selected = set(selected)
    return [{"id": g.id, "name": g.name, "checked": g.id in selected} for g in genres]


def _book_values(book: Book) -> Dict[str, Any]:
    return {
        "id": book.id,
        "title": book.title,
        "author": book.author_id,
        "summary": book.summary,
        "isbn": book.isbn,
        "genre": book.genre_ids,
    }


def _form_lookups(catalog: Catalog) -> Dict[str, Any]:
    return {
        "authors": catalog.store.find_many(Author, sort="family_name"),
        "genres": catalog.store.find_many(Genre, sort="name"),
    }


def _form(catalog: Catalog, title: str, authors, genres, book=None, errors=None) -> Render:
    selected = book["genre"] if book else []
    context = {
        "title": title,
        "authors": [author_view(a, catalog.url_prefix) for a in authors],
        "genres": genre_choices(genres, selected),
        "book": book,
    }
    if errors is not None:
        context["errors"] = errors
    return Render("book_form", context)


async def _rejected_form(catalog: Catalog, title: str, result, book_id: Optional[str] = None) -> Render:
    lookups = await gather_lookups(_form_lookups(catalog), timeout=catalog.lookup_timeout)
    book = {"id": book_id, **result.sanitized}
    return _form(catalog, title, lookups["authors"], lookups["genres"], book=book, errors=form_errors(result))


def _delete_page(catalog: Catalog, outcome) -> Render:
    return Render("book_delete", {
        "title": "Delete Book",
        "book": outcome.entity,
        "bookinstances": [bookinstance_view(i, catalog.url_prefix) for i in outcome.dependents["bookinstances"]],
    })


async def book_list(catalog: Catalog) -> Response:
    books = await catalog.store.find_many(Book, sort="title")
    return Render("book_list", {"title": "Book List", "book_list": books})


async def book_detail(catalog: Catalog, book_id: str) -> Response:
    aggregate = await fetch_required(
        catalog.store, Book, book_id,
        dependents=[Dependent("book_instances", BookInstance, "book")],
        timeout=catalog.lookup_timeout,
    )
    book = aggregate.primary
    return Render("book_detail", {
        "title": book.title,
        "book": book,
        "author": author_view(book.author, catalog.url_prefix) if book.author else None,
        "book_instances": [bookinstance_view(i, catalog.url_prefix) for i in aggregate.dependents["book_instances"]],
    })


async def book_create_get(catalog: Catalog) -> Response:
    lookups = await gather_lookups(_form_lookups(catalog), timeout=catalog.lookup_timeout)
    return _form(catalog, "Create New Book", lookups["authors"], lookups["genres"])


async def book_create_post(catalog: Catalog, form: Mapping[str, Any]) -> Response:
    result, candidate = BOOK_FORM.process(form)
    if candidate is None:
        return await _rejected_form(catalog, "Create New Book", result)
    book_id = await catalog.store.insert(Book, candidate.model_dump())
    return Redirect(catalog.url("book", book_id))


async def book_delete_get(catalog: Catalog, book_id: str) -> Response:
    outcome = await guarded_delete(catalog.store, Book, book_id, timeout=catalog.lookup_timeout)
    if outcome.not_found:
        return Redirect(catalog.listing("book"))
    return _delete_page(catalog, outcome)


async def book_delete_post(catalog: Catalog, book_id: str) -> Response:
    outcome = await guarded_delete(catalog.store, Book, book_id, confirm=True, timeout=catalog.lookup_timeout)
    if outcome.blocked:
        return _delete_page(catalog, outcome)
    return Redirect(catalog.listing("book"))


async def book_update_get(catalog: Catalog, book_id: str) -> Response:
    aggregate = await fetch_aggregate(
        catalog.store, Book, book_id,
        extras=_form_lookups(catalog),
        timeout=catalog.lookup_timeout,
    )
    if not aggregate.found:
        return Redirect(catalog.listing("book"))
    return _form(
        catalog, "Update Book",
        aggregate.extras["authors"], aggregate.extras["genres"],
        book=_book_values(aggregate.primary),
    )


async def book_update_post(catalog: Catalog, book_id: str, form: Mapping[str, Any]) -> Response:
    result, candidate = BOOK_FORM.process(form)
    if candidate is None:
        return await _rejected_form(catalog, "Update Book", result, book_id)
    updated = await catalog.store.update_by_id(Book, book_id, candidate.model_dump())
    if updated is None:
        raise NotFound("Book", book_id)
    return Redirect(catalog.url("book", book_id))
