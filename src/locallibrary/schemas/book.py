"""
Pydantic candidates for the Book entity.
"""

from pydantic import BaseModel, Field
from typing import List

class BookCreate(BaseModel):
    """
    Typed Book candidate.

    Attributes:
        title (str): Book title.
        author (str): Id of the referenced Author. Not checked for existence.
        summary (str): Short summary.
        isbn (str): ISBN as entered.
        genre (List[str]): Ids of the referenced Genres, possibly empty.
    """
    title: str = Field(..., min_length=1)
    author: str = Field(..., min_length=1)
    summary: str = Field(..., min_length=1)
    isbn: str = Field(..., min_length=1)
    genre: List[str] = Field(default_factory=list)
