"""
Catalog home page: entity counts gathered in one concurrent join.
"""

from ..models.author import Author
from ..models.book import Book
from ..models.bookinstance import BookInstance, BookStatus
from ..models.genre import Genre
from ..services.aggregate import gather_lookups
from .responses import Catalog, Render, Response


async def index(catalog: Catalog) -> Response:
    store = catalog.store
    counts = await gather_lookups({
        "book_count": store.count(Book),
        "book_instance_count": store.count(BookInstance),
        "book_instance_available_count": store.count(BookInstance, status=BookStatus.AVAILABLE.value),
        "author_count": store.count(Author),
        "genre_count": store.count(Genre),
    }, timeout=catalog.lookup_timeout)
    return Render("index", {"title": "Local Library Home", "data": counts})
