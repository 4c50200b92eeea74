"""
SQLAlchemy engine and session factory helpers for Local Library.

There is no process-wide engine: callers build one from a URL and hand
the resulting session factory to the `EntityStore`.
"""

import uuid

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker, declarative_base

Base = declarative_base()


def new_id() -> str:
    """Generates a globally unique entity identifier."""
    return uuid.uuid4().hex


def make_engine(database_url: str) -> Engine:
    """
    Creates an engine for the given database URL.

    SQLite connections are opened with ``check_same_thread=False`` because
    store calls run on worker threads.

    Args:
        database_url (str): SQLAlchemy database URL.

    Returns:
        Engine: Configured SQLAlchemy engine.
    """
    connect_args = {}
    if database_url.startswith("sqlite"):
        connect_args["check_same_thread"] = False
    return create_engine(database_url, pool_pre_ping=True, connect_args=connect_args)


def make_session_factory(engine: Engine) -> sessionmaker:
    """
    Builds the session factory used by the store.

    ``expire_on_commit=False`` keeps loaded attributes readable once the
    session that produced them has been closed.
    """
    return sessionmaker(autocommit=False, autoflush=False, expire_on_commit=False, bind=engine)


def create_tables(engine: Engine) -> None:
    """Creates every table registered on ``Base``."""
    # Import models so they are registered with Base
    from locallibrary.models import author, genre, book, bookinstance  # noqa: F401

    Base.metadata.create_all(bind=engine)
