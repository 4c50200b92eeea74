# tests/conftest.py
import asyncio
import datetime
import os
import sys

import pytest

# Add the src directory to the Python path to allow imports
project_root = os.path.abspath(os.path.join(os.path.dirname(__file__), '..'))
src_path = os.path.join(project_root, 'src')
if src_path not in sys.path:
    sys.path.insert(0, src_path)

from locallibrary.crud import EntityStore
from locallibrary.db.session import make_engine, make_session_factory, create_tables
from locallibrary.models.author import Author
from locallibrary.models.book import Book
from locallibrary.models.bookinstance import BookInstance
from locallibrary.models.genre import Genre
from locallibrary.views import Catalog

# --- Test Database Setup ---
# Store calls run on worker threads, each with its own connection, so the
# database lives in a temporary file rather than in memory.

@pytest.fixture(scope="function")
def db_engine(tmp_path):
    engine = make_engine(f"sqlite:///{tmp_path / 'catalog.db'}")
    create_tables(engine)
    yield engine
    engine.dispose()

@pytest.fixture(scope="function")
def db_session_factory(db_engine):
    """Returns a SQLAlchemy session factory."""
    return make_session_factory(db_engine)

@pytest.fixture(scope="function")
def db_session(db_session_factory):
    """A plain session for checking what the store persisted."""
    session = db_session_factory()
    try:
        yield session
    finally:
        session.close()

@pytest.fixture
def store(db_session_factory):
    return EntityStore(db_session_factory)

@pytest.fixture
def catalog(store):
    return Catalog(store=store)

@pytest.fixture
def run():
    """Drives a coroutine to completion from a plain test."""
    return asyncio.run

# --- Helper Fixtures ---

@pytest.fixture
def author_id(store, run):
    return run(store.insert(Author, {
        "first_name": "Patrick",
        "family_name": "Rothfuss",
        "date_of_birth": datetime.date(1973, 6, 6),
    }))

@pytest.fixture
def genre_id(store, run):
    return run(store.insert(Genre, {"name": "Fantasy"}))

@pytest.fixture
def book_id(store, run, author_id, genre_id):
    return run(store.insert(Book, {
        "title": "The Name of the Wind",
        "author": author_id,
        "summary": "A young man grows to be the most notorious magician.",
        "isbn": "9781473211896",
        "genre": [genre_id],
    }))

@pytest.fixture
def bookinstance_id(store, run, book_id):
    return run(store.insert(BookInstance, {
        "book": book_id,
        "imprint": "Gollancz, 2011",
        "status": "Available",
    }))
