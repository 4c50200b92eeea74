"""
ORM model for the Book entity and its many-to-many link to Genre.

References (author, genres) are plain id columns with no database-level
foreign keys: integrity is only checked when deleting, so a book may point
at an author id that does not exist.
"""

from sqlalchemy import Column, String, Text, Table
from sqlalchemy.orm import relationship
from locallibrary.db.session import Base, new_id

book_genres = Table(
    "book_genres",
    Base.metadata,
    Column("book_id", String(32), primary_key=True),
    Column("genre_id", String(32), primary_key=True, index=True),
)

class Book(Base):
    """
    Represents a book title in the catalog.

    Attributes:
        id (str): Globally unique identifier.
        title (str): Title of the book.
        author_id (str): Id of the referenced Author.
        summary (str): Short summary.
        isbn (str): ISBN as entered.
        author (Author): Referenced author, None if the id does not resolve.
        genres (List[Genre]): Referenced genres that resolve, ordered by name.
            Read-only: the store writes the link rows.
    """
    __tablename__ = "books"

    id = Column(String(32), primary_key=True, default=new_id)
    title = Column(String(255), nullable=False, index=True)
    author_id = Column(String(32), nullable=False, index=True)
    summary = Column(Text, nullable=False)
    isbn = Column(String(32), nullable=False)

    author = relationship(
        "Author",
        primaryjoin="foreign(Book.author_id) == Author.id",
        lazy="joined",
    )
    genres = relationship(
        "Genre",
        secondary=book_genres,
        primaryjoin="Book.id == foreign(book_genres.c.book_id)",
        secondaryjoin="Genre.id == foreign(book_genres.c.genre_id)",
        order_by="Genre.name",
        lazy="selectin",
        viewonly=True,
    )

    @property
    def genre_ids(self) -> list:
        return [genre.id for genre in self.genres]

    def __repr__(self) -> str:
        return f"<Book(id={self.id}, title='{self.title[:30]}...', isbn='{self.isbn}')>"
