# tests/views/test_dispatch.py
from locallibrary.core.config import Settings
from locallibrary.core.errors import StoreError
from locallibrary.models.bookinstance import BookInstance
from locallibrary.views import Catalog, Redirect, Render, dispatch
from locallibrary.views.book import book_detail
from locallibrary.views.catalog import index
from locallibrary.views.genre import genre_create_post


def test_dispatch_passes_responses_through(catalog, run):
    response = run(dispatch(genre_create_post, catalog, {"name": "Poetry"}))

    assert isinstance(response, Redirect)

def test_dispatch_not_found_is_404(catalog, run):
    response = run(dispatch(book_detail, catalog, "missing"))

    assert response == Render("error", {"message": "Book not found", "status": 404}, status=404)

def test_dispatch_store_error_is_500(catalog, run):
    async def broken(catalog):
        raise StoreError("database is down")

    response = run(dispatch(broken, catalog))

    assert response.view == "error"
    assert response.status == 500

def test_index_counts(catalog, store, run, bookinstance_id, book_id):
    run(store.insert(BookInstance, {"book": book_id, "imprint": "Second"}))

    response = run(index(catalog))

    assert response.view == "index"
    assert response.context["data"] == {
        "book_count": 1,
        "book_instance_count": 2,
        "book_instance_available_count": 1,
        "author_count": 1,
        "genre_count": 1,
    }

def test_catalog_from_settings(store):
    settings = Settings(CATALOG_URL_PREFIX="/library", LOOKUP_TIMEOUT_SECONDS=2.5)
    catalog = Catalog.from_settings(store, settings)

    assert catalog.lookup_timeout == 2.5
    assert catalog.url("book", "x") == "/library/book/x"
    assert catalog.listing("author") == "/library/authors"

def test_handler_modules_are_reachable_from_the_package(catalog, run, genre_id):
    """Test a router can mount handlers straight from the views package."""
    from locallibrary import views

    response = run(dispatch(views.genre.genre_list, catalog))

    assert [g.id for g in response.context["genre_list"]] == [genre_id]
    assert callable(views.catalog.index)
