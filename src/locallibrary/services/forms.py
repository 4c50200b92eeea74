"""
Form pipelines for each catalog entity.
"""

from ..models.bookinstance import BookStatus
from ..schemas.author import AuthorCreate
from ..schemas.book import BookCreate
from ..schemas.bookinstance import BookInstanceCreate
from ..schemas.genre import GenreCreate
from .validation import (
    FieldRule,
    FormPipeline,
    escape,
    is_alphanumeric,
    is_iso8601,
    max_length,
    not_empty,
    one_of,
    to_date,
    to_datetime,
)

AUTHOR_FORM = FormPipeline(
    rules=[
        FieldRule("first_name", not_empty, "First name must be specified"),
        FieldRule("first_name", is_alphanumeric, "First name cannot contain non-alphanumeric characters"),
        FieldRule("first_name", max_length(100), "First name must be at most 100 characters"),
        FieldRule("family_name", not_empty, "Family name must be specified"),
        FieldRule("family_name", is_alphanumeric, "Family name cannot contain non-alphanumeric characters"),
        FieldRule("family_name", max_length(100), "Family name must be at most 100 characters"),
        FieldRule("date_of_birth", is_iso8601, "Invalid date of birth", optional=True),
        FieldRule("date_of_death", is_iso8601, "Invalid date of death", optional=True),
    ],
    sanitizers={
        "first_name": escape,
        "family_name": escape,
        "date_of_birth": to_date,
        "date_of_death": to_date,
    },
    schema=AuthorCreate,
)

GENRE_FORM = FormPipeline(
    rules=[FieldRule("name", not_empty, "Genre name required")],
    sanitizers={"name": escape},
    schema=GenreCreate,
)

GENRE_UPDATE_FORM = FormPipeline(
    rules=[FieldRule("name", not_empty, "Genre name must be specified")],
    sanitizers={"name": escape},
    schema=GenreCreate,
)

# genre is normalized to a list before any rule runs
BOOK_FORM = FormPipeline(
    rules=[
        FieldRule("title", not_empty, "Title must not be empty"),
        FieldRule("author", not_empty, "Author must not be empty"),
        FieldRule("summary", not_empty, "Summary must not be empty"),
        FieldRule("isbn", not_empty, "ISBN must not be empty"),
    ],
    sanitizers={"genre": escape},
    schema=BookCreate,
    multi_fields=["genre"],
)

BOOKINSTANCE_FORM = FormPipeline(
    rules=[
        FieldRule("book", not_empty, "Book must be specified"),
        FieldRule("imprint", not_empty, "Imprint must be specified"),
        FieldRule("due_back", is_iso8601, "Invalid date", optional=True),
        FieldRule("status", one_of(BookStatus.values()), "Invalid status", optional=True),
    ],
    sanitizers={"due_back": to_datetime},
    schema=BookInstanceCreate,
)
