"""
Script to populate the Local Library catalog with fake data.

Creates authors, genres, books and book copies using Faker. Every record
goes through the same form pipelines as the catalog handlers, so only
data that would be accepted from a form ends up in the store.

Usage:
    python scripts/generate_fake_data.py

Note:
    - Tables are created if they do not exist yet.
    - The target database is read from DATABASE_URL (see .env).
"""

import asyncio
import logging
import random
import sys
from faker import Faker
from typing import Dict, List

logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(levelname)s - %(message)s')
logger = logging.getLogger(__name__)

try:
    from locallibrary.core.config import settings
    from locallibrary.core.errors import StoreError
    from locallibrary.crud import EntityStore
    from locallibrary.db.session import make_engine, make_session_factory, create_tables
    from locallibrary.models.author import Author
    from locallibrary.models.book import Book
    from locallibrary.models.bookinstance import BookInstance, BookStatus
    from locallibrary.models.genre import Genre
    from locallibrary.services.forms import AUTHOR_FORM, BOOK_FORM, BOOKINSTANCE_FORM, GENRE_FORM
except ImportError as e:
    logger.error(f"Error importing project modules: {e}.")
    logger.error("Make sure you ran 'pip install -e .'")
    sys.exit(1)

logging.getLogger().setLevel(settings.LOG_LEVEL)

NUM_AUTHORS: int = 10
BOOKS_PER_AUTHOR: int = 3
MAX_COPIES_PER_BOOK: int = 4
GENRE_NAMES: List[str] = ["Fantasy", "Science Fiction", "French Poetry", "Mystery", "Biography"]

fake = Faker("en_US")


def _alnum_name(generator) -> str:
    """Faker names can contain spaces or hyphens, which the author form rejects."""
    while True:
        name = generator()
        if name.isascii() and name.isalnum():
            return name


async def _insert(store: EntityStore, kind: type, form, raw: Dict[str, object]) -> str:
    result, candidate = form.process(raw)
    if candidate is None:
        raise ValueError(f"Generated {kind.__name__} rejected: {[v.message for v in result.violations]}")
    return await store.insert(kind, candidate.model_dump())


async def generate_data(store: EntityStore) -> None:
    """
    Generates genres, authors, books and copies.

    Args:
        store (EntityStore): Store handle to write through.
    """
    logger.info("--- Phase 1: Genres ---")
    genre_ids: List[str] = []
    for name in GENRE_NAMES:
        existing = await store.find_one(Genre, name=name)
        if existing is not None:
            logger.info(f"  Genre found: {name} ({existing.id})")
            genre_ids.append(existing.id)
        else:
            genre_ids.append(await _insert(store, Genre, GENRE_FORM, {"name": name}))

    logger.info(f"--- Phase 2: {NUM_AUTHORS} authors with {BOOKS_PER_AUTHOR} books each ---")
    book_ids: List[str] = []
    for i in range(NUM_AUTHORS):
        birth = fake.date_of_birth(minimum_age=30, maximum_age=120)
        death = fake.date_between(start_date=birth, end_date="today") if random.random() < 0.4 else None
        author_id = await _insert(store, Author, AUTHOR_FORM, {
            "first_name": _alnum_name(fake.first_name),
            "family_name": _alnum_name(fake.last_name),
            "date_of_birth": birth.isoformat(),
            "date_of_death": death.isoformat() if death else "",
        })
        logger.info(f"  ({i+1}/{NUM_AUTHORS}) Author created: {author_id}")
        for _ in range(BOOKS_PER_AUTHOR):
            book_ids.append(await _insert(store, Book, BOOK_FORM, {
                "title": fake.sentence(nb_words=4).rstrip("."),
                "author": author_id,
                "summary": fake.paragraph(nb_sentences=3),
                "isbn": fake.isbn13(),
                "genre": random.sample(genre_ids, random.randint(0, 2)),
            }))

    logger.info("--- Phase 3: Copies ---")
    total_copies = 0
    for book_id in book_ids:
        for _ in range(random.randint(0, MAX_COPIES_PER_BOOK)):
            await _insert(store, BookInstance, BOOKINSTANCE_FORM, {
                "book": book_id,
                "imprint": f"{fake.company()}, {fake.year()}",
                "status": random.choice(BookStatus.values()),
                "due_back": fake.date_between(start_date="today", end_date="+30d").isoformat(),
            })
            total_copies += 1
    logger.info(f"--- Done: {len(genre_ids)} genres, {NUM_AUTHORS} authors, {len(book_ids)} books, {total_copies} copies ---")


def main() -> None:
    engine = make_engine(settings.DATABASE_URL)
    create_tables(engine)
    store = EntityStore(make_session_factory(engine))
    try:
        asyncio.run(generate_data(store))
    except StoreError as e:
        logger.exception(f"Store failure while generating data: {e}")
        sys.exit(1)
    finally:
        engine.dispose()


if __name__ == "__main__":
    main()
