"""
Entity store for the Local Library catalog.

Wraps a SQLAlchemy session factory behind an async API. Every call opens
its own session on a worker thread, so independent lookups issued
together really run side by side. Entities come back fully loaded
(book with author and genres, copy with its book) and can be used after
their session has closed.
"""

import asyncio
import logging
from typing import Any, Callable, Dict, List, Mapping, Optional, Type

from sqlalchemy import delete, func, insert, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from ..core.errors import StoreError
from ..db.session import new_id
from ..models.author import Author
from ..models.genre import Genre
from ..models.book import Book, book_genres
from ..models.bookinstance import BookInstance

logger = logging.getLogger(__name__)

KINDS = (Author, Genre, Book, BookInstance)

# Form-level reference names mapped to their id columns
REFERENCE_COLUMNS: Dict[type, Dict[str, str]] = {
    Book: {"author": "author_id"},
    BookInstance: {"book": "book_id"},
}


def _filter_clause(kind: type, field: str, value: Any):
    """Builds an equality predicate for ``field = value`` on ``kind``."""
    if kind is Book and field == "genre":
        # Membership in the many-to-many link
        return Book.id.in_(select(book_genres.c.book_id).where(book_genres.c.genre_id == value))
    column_name = REFERENCE_COLUMNS.get(kind, {}).get(field, field)
    column = getattr(kind, column_name, None)
    if column is None or column_name not in kind.__table__.columns:
        raise StoreError(f"Unknown filter '{field}' for {kind.__name__}", operation="filter")
    return column == value


class EntityStore:
    """
    Async store handle over a SQLAlchemy session factory.

    The handle is created once by the host and passed explicitly to every
    handler; it holds no state besides the factory.
    """

    def __init__(self, session_factory: sessionmaker):
        self._session_factory = session_factory

    async def _run(self, operation: str, work: Callable[[Session], Any]) -> Any:
        def in_session():
            with self._session_factory() as session:
                return work(session)

        try:
            return await asyncio.to_thread(in_session)
        except StoreError:
            raise
        except SQLAlchemyError as e:
            logger.exception(f"Store operation '{operation}' failed: {e}")
            raise StoreError(f"Store operation '{operation}' failed", operation=operation) from e

    # --- Reads ---

    async def find_by_id(self, kind: Type[Any], entity_id: str) -> Optional[Any]:
        """
        Point lookup by identifier.

        Args:
            kind (type): One of Author, Genre, Book, BookInstance.
            entity_id (str): Identifier to look up.

        Returns:
            Optional[Any]: The entity, or None when no such id exists.

        Raises:
            StoreError: If the query fails.
        """
        logger.debug(f"find_by_id {kind.__name__} {entity_id}")
        return await self._run("find_by_id", lambda session: session.get(kind, entity_id))

    async def find_many(self, kind: Type[Any], sort: Optional[str] = None, **filters: Any) -> List[Any]:
        """
        Lists entities matching every equality filter, optionally sorted ascending.

        Filters use form-level names: ``author=``/``book=`` for references,
        ``genre=`` for genre membership, or any plain column name.
        """
        def work(session: Session) -> List[Any]:
            stmt = select(kind)
            for field, value in filters.items():
                stmt = stmt.where(_filter_clause(kind, field, value))
            if sort is not None:
                column = getattr(kind, sort, None)
                if column is None:
                    raise StoreError(f"Unknown sort field '{sort}' for {kind.__name__}", operation="find_many")
                stmt = stmt.order_by(column.asc())
            return list(session.execute(stmt).scalars().unique().all())

        logger.debug(f"find_many {kind.__name__} filters={filters} sort={sort}")
        return await self._run("find_many", work)

    async def find_one(self, kind: Type[Any], **filters: Any) -> Optional[Any]:
        """Returns the first entity matching the filters, or None."""
        found = await self.find_many(kind, **filters)
        return found[0] if found else None

    async def count(self, kind: Type[Any], **filters: Any) -> int:
        def work(session: Session) -> int:
            stmt = select(func.count()).select_from(kind)
            for field, value in filters.items():
                stmt = stmt.where(_filter_clause(kind, field, value))
            return session.execute(stmt).scalar_one()

        return await self._run("count", work)

    # --- Writes ---

    async def insert(self, kind: Type[Any], values: Mapping[str, Any]) -> str:
        """
        Persists a new entity and returns its assigned identifier.

        Args:
            kind (type): Entity class.
            values (Mapping[str, Any]): Field values using form-level names.

        Returns:
            str: Identifier assigned at persistence time.
        """
        def work(session: Session) -> str:
            entity = kind()
            _apply_values(session, entity, values)
            session.add(entity)
            try:
                session.commit()
            except Exception:
                session.rollback()
                raise
            return entity.id

        entity_id = await self._run("insert", work)
        logger.info(f"{kind.__name__} {entity_id} created.")
        return entity_id

    async def update_by_id(self, kind: Type[Any], entity_id: str, values: Mapping[str, Any]) -> Optional[Any]:
        """
        Replaces the fields of an existing entity, keeping its identifier.

        Returns:
            Optional[Any]: The updated entity, or None if the id does not exist.
        """
        def work(session: Session) -> Optional[Any]:
            entity = session.get(kind, entity_id)
            if entity is None:
                return None
            _apply_values(session, entity, values)
            try:
                session.commit()
            except Exception:
                session.rollback()
                raise
            # Reload so references reflect the new ids
            return session.get(kind, entity_id, populate_existing=True)

        updated = await self._run("update_by_id", work)
        if updated is None:
            logger.warning(f"Attempted update of non-existent {kind.__name__} {entity_id}")
        else:
            logger.info(f"{kind.__name__} {entity_id} updated.")
        return updated

    async def delete_by_id(self, kind: Type[Any], entity_id: str) -> None:
        def work(session: Session) -> bool:
            entity = session.get(kind, entity_id)
            if entity is None:
                return False
            if kind is Book:
                _unlink_genres(session, entity_id)
            session.delete(entity)
            try:
                session.commit()
            except Exception:
                session.rollback()
                raise
            return True

        if await self._run("delete_by_id", work):
            logger.info(f"{kind.__name__} {entity_id} deleted.")
        else:
            logger.warning(f"Attempted delete of non-existent {kind.__name__} {entity_id}")


def _apply_values(session: Session, entity: Any, values: Mapping[str, Any]) -> None:
    kind = type(entity)
    references = REFERENCE_COLUMNS.get(kind, {})
    for field, value in values.items():
        if kind is Book and field == "genre":
            _link_genres(session, entity, value or [])
        elif field in references:
            setattr(entity, references[field], value)
        elif field in kind.__table__.columns and field != "id":
            setattr(entity, field, value)
        else:
            raise StoreError(f"Unknown field '{field}' for {kind.__name__}", operation="write")


def _unlink_genres(session: Session, book_id: str) -> None:
    session.execute(delete(book_genres).where(book_genres.c.book_id == book_id))


def _link_genres(session: Session, book: Book, genre_ids: List[str]) -> None:
    """Replaces a book's genre links with the given ids, stored as given."""
    if book.id is None:
        book.id = new_id()
    _unlink_genres(session, book.id)
    # Duplicates collapse, order is kept
    rows = [{"book_id": book.id, "genre_id": genre_id} for genre_id in dict.fromkeys(genre_ids)]
    if rows:
        session.execute(insert(book_genres), rows)
