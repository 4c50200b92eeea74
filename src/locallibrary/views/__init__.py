"""
Catalog request handlers.

Each entity module (``author``, ``genre``, ``book``, ``bookinstance``) plus
``catalog`` for the home page exposes the coroutines a router mounts, one
per route. Handlers take a ``Catalog`` and return a ``Render`` or a
``Redirect``; wrap them in ``dispatch`` to turn catalog errors into error
pages.
"""

from . import author, book, bookinstance, catalog, genre
from .responses import Catalog, Redirect, Render, Response, dispatch

__all__ = [
    "Catalog",
    "Redirect",
    "Render",
    "Response",
    "dispatch",
    "author",
    "book",
    "bookinstance",
    "catalog",
    "genre",
]
