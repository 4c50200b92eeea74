"""
Genre handlers. Creating a genre whose name already exists redirects to
the existing one instead of inserting a duplicate.
"""

import logging
from typing import Any, Mapping

from ..core.errors import NotFound
from ..models.book import Book
from ..models.genre import Genre
from ..services.aggregate import Dependent, fetch_required
from ..services.deletion import guarded_delete
from ..services.forms import GENRE_FORM, GENRE_UPDATE_FORM
from .responses import Catalog, Redirect, Render, Response, form_errors

logger = logging.getLogger(__name__)


def _form(title: str, genre=None, errors=None) -> Render:
    context = {"title": title, "genre": genre}
    if errors is not None:
        context["errors"] = errors
    return Render("genre_form", context)


def _delete_page(outcome) -> Render:
    return Render("genre_delete", {
        "title": "Delete Genre",
        "genre": outcome.entity,
        "genre_books": outcome.dependents["books"],
    })


async def genre_list(catalog: Catalog) -> Response:
    genres = await catalog.store.find_many(Genre, sort="name")
    return Render("genre_list", {"title": "Genre List", "genre_list": genres})


async def genre_detail(catalog: Catalog, genre_id: str) -> Response:
    aggregate = await fetch_required(
        catalog.store, Genre, genre_id,
        dependents=[Dependent("genre_books", Book, "genre", sort="title")],
        timeout=catalog.lookup_timeout,
    )
    return Render("genre_detail", {
        "title": "Genre Detail",
        "genre": aggregate.primary,
        "genre_books": aggregate.dependents["genre_books"],
    })


async def genre_create_get(catalog: Catalog) -> Response:
    return _form("Create New Genre")


async def genre_create_post(catalog: Catalog, form: Mapping[str, Any]) -> Response:
    result, candidate = GENRE_FORM.process(form)
    if candidate is None:
        return _form("Create New Genre", genre=result.sanitized, errors=form_errors(result))

    existing = await catalog.store.find_one(Genre, name=candidate.name)
    if existing is not None:
        logger.info(f"Genre '{candidate.name}' already exists as {existing.id}, not creating a duplicate.")
        return Redirect(catalog.url("genre", existing.id))

    genre_id = await catalog.store.insert(Genre, candidate.model_dump())
    return Redirect(catalog.url("genre", genre_id))


async def genre_delete_get(catalog: Catalog, genre_id: str) -> Response:
    outcome = await guarded_delete(catalog.store, Genre, genre_id, timeout=catalog.lookup_timeout)
    if outcome.not_found:
        return Redirect(catalog.listing("genre"))
    return _delete_page(outcome)


async def genre_delete_post(catalog: Catalog, genre_id: str) -> Response:
    outcome = await guarded_delete(catalog.store, Genre, genre_id, confirm=True, timeout=catalog.lookup_timeout)
    if outcome.blocked:
        return _delete_page(outcome)
    return Redirect(catalog.listing("genre"))


async def genre_update_get(catalog: Catalog, genre_id: str) -> Response:
    genre = await catalog.store.find_by_id(Genre, genre_id)
    if genre is None:
        return Redirect(catalog.listing("genre"))
    return _form("Update Genre", genre=genre)


async def genre_update_post(catalog: Catalog, genre_id: str, form: Mapping[str, Any]) -> Response:
    result, candidate = GENRE_UPDATE_FORM.process(form)
    if candidate is None:
        return _form("Update Genre", genre=result.sanitized, errors=form_errors(result))
    updated = await catalog.store.update_by_id(Genre, genre_id, candidate.model_dump())
    if updated is None:
        raise NotFound("Genre", genre_id)
    return Redirect(catalog.url("genre", genre_id))
