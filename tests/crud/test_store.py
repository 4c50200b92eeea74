# tests/crud/test_store.py
import datetime

import pytest
from sqlalchemy.exc import OperationalError

from locallibrary.core.errors import StoreError
from locallibrary.crud import EntityStore
from locallibrary.models.author import Author
from locallibrary.models.book import Book
from locallibrary.models.bookinstance import BookInstance
from locallibrary.models.genre import Genre


def test_insert_assigns_unique_id(store, run):
    """Test insert returns a fresh identifier for each entity."""
    first = run(store.insert(Genre, {"name": "Poetry"}))
    second = run(store.insert(Genre, {"name": "Drama"}))

    assert first and second
    assert first != second

def test_find_by_id_found(store, run, author_id):
    author = run(store.find_by_id(Author, author_id))

    assert author is not None
    assert author.family_name == "Rothfuss"
    assert author.date_of_birth == datetime.date(1973, 6, 6)
    assert author.date_of_death is None

def test_find_by_id_absent_returns_none(store, run):
    """Test a missing id is an explicit None, not an error."""
    assert run(store.find_by_id(Author, "doesnotexist")) is None

def test_book_is_returned_with_references_loaded(store, run, book_id, author_id, genre_id):
    """Test a book can be read after its session closed, author and genres included."""
    book = run(store.find_by_id(Book, book_id))

    assert book.author.id == author_id
    assert [g.id for g in book.genres] == [genre_id]
    assert book.genre_ids == [genre_id]

def test_bookinstance_is_returned_with_book_and_author(store, run, bookinstance_id, book_id):
    instance = run(store.find_by_id(BookInstance, bookinstance_id))

    assert instance.book.id == book_id
    assert instance.book.author.family_name == "Rothfuss"
    assert instance.status == "Available"
    assert instance.due_back is not None  # Defaults to creation time

def test_book_with_unknown_author_has_no_author(store, run):
    """Test references are not checked on write: a dangling author id is stored."""
    book_id = run(store.insert(Book, {"title": "Orphan", "author": "missing", "summary": "s", "isbn": "1"}))
    book = run(store.find_by_id(Book, book_id))

    assert book.author_id == "missing"
    assert book.author is None

def test_find_many_sorted(store, run):
    for name in ["Mystery", "Biography", "Fantasy"]:
        run(store.insert(Genre, {"name": name}))

    genres = run(store.find_many(Genre, sort="name"))

    assert [g.name for g in genres] == ["Biography", "Fantasy", "Mystery"]

def test_find_many_by_reference(store, run, book_id, author_id):
    other_author = run(store.insert(Author, {"first_name": "Ursula", "family_name": "LeGuin"}))
    run(store.insert(Book, {"title": "Earthsea", "author": other_author, "summary": "s", "isbn": "2"}))

    books = run(store.find_many(Book, author=author_id))

    assert [b.id for b in books] == [book_id]

def test_find_many_by_genre_membership(store, run, book_id, genre_id):
    other_genre = run(store.insert(Genre, {"name": "Horror"}))

    assert [b.id for b in run(store.find_many(Book, genre=genre_id))] == [book_id]
    assert run(store.find_many(Book, genre=other_genre)) == []

def test_find_many_unknown_filter_raises(store, run):
    with pytest.raises(StoreError):
        run(store.find_many(Book, publisher="x"))

def test_count(store, run, bookinstance_id, book_id):
    run(store.insert(BookInstance, {"book": book_id, "imprint": "Second printing"}))

    assert run(store.count(BookInstance)) == 2
    assert run(store.count(BookInstance, status="Available")) == 1
    assert run(store.count(BookInstance, status="Maintenance")) == 1
    assert run(store.count(BookInstance, book=book_id)) == 2

def test_update_by_id_keeps_identifier(store, run, book_id, author_id):
    new_author = run(store.insert(Author, {"first_name": "Ursula", "family_name": "LeGuin"}))

    updated = run(store.update_by_id(Book, book_id, {
        "title": "Renamed", "author": new_author, "summary": "s", "isbn": "3", "genre": [],
    }))

    assert updated.id == book_id
    assert updated.title == "Renamed"
    assert updated.author.id == new_author
    assert updated.genres == []
    assert run(store.count(Book)) == 1

def test_update_by_id_missing_returns_none(store, run):
    assert run(store.update_by_id(Genre, "nope", {"name": "x"})) is None

def test_unknown_genre_ids_are_stored_as_given(store, run, author_id, genre_id):
    """Test a genre id with no stored genre is kept as a link, only unresolved on read."""
    book_id = run(store.insert(Book, {
        "title": "T", "author": author_id, "summary": "s", "isbn": "4", "genre": [genre_id, "ghost", genre_id],
    }))

    assert run(store.find_by_id(Book, book_id)).genre_ids == [genre_id]
    assert [b.id for b in run(store.find_many(Book, genre="ghost"))] == [book_id]

def test_update_replaces_genre_links(store, run, book_id, genre_id):
    horror = run(store.insert(Genre, {"name": "Horror"}))

    updated = run(store.update_by_id(Book, book_id, {"genre": [horror]}))

    assert updated.genre_ids == [horror]
    assert run(store.find_many(Book, genre=genre_id)) == []

def test_delete_by_id(store, run, genre_id):
    run(store.delete_by_id(Genre, genre_id))

    assert run(store.find_by_id(Genre, genre_id)) is None

def test_delete_missing_is_noop(store, run):
    run(store.delete_by_id(Genre, "nope"))

def test_delete_book_removes_genre_links(store, run, book_id, genre_id):
    run(store.delete_by_id(Book, book_id))

    assert run(store.find_many(Book, genre=genre_id)) == []
    assert run(store.find_by_id(Genre, genre_id)) is not None

def test_store_failure_becomes_store_error(tmp_path, run):
    """Test a broken database surfaces as StoreError."""
    from locallibrary.db.session import make_engine, make_session_factory

    # No tables were created on this engine
    engine = make_engine(f"sqlite:///{tmp_path / 'empty.db'}")
    broken = EntityStore(make_session_factory(engine))

    with pytest.raises(StoreError) as exc_info:
        run(broken.find_by_id(Author, "x"))

    assert exc_info.value.operation == "find_by_id"
    assert isinstance(exc_info.value.__cause__, OperationalError)
    engine.dispose()
