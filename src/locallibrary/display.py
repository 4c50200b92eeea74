"""
Derived display values for catalog entities.

Nothing here is stored: names, lifespans, formatted dates and canonical
URLs are computed on demand from the persisted fields.
"""

import datetime
from typing import Optional, Union

DateLike = Union[datetime.date, datetime.datetime]

DEFAULT_PREFIX = "/catalog"


def ordinal(day: int) -> str:
    """Returns the day with its English ordinal suffix (1st, 2nd, 11th, 23rd)."""
    if 11 <= day % 100 <= 13:
        suffix = "th"
    else:
        suffix = {1: "st", 2: "nd", 3: "rd"}.get(day % 10, "th")
    return f"{day}{suffix}"


def format_long_date(value: Optional[DateLike], default: str = "") -> str:
    """
    Formats a date as ``Do MMMM YYYY`` (e.g. ``5th June 1990``).

    Args:
        value (Optional[date]): Date or datetime to format.
        default (str): Returned when value is None.

    Returns:
        str: The formatted date or the default.
    """
    if value is None:
        return default
    return f"{ordinal(value.day)} {value.strftime('%B')} {value.year}"


def format_form_date(value: Optional[DateLike]) -> str:
    """Formats a date as ``YYYY-MM-DD`` for a date input, or ``""``."""
    if value is None:
        return ""
    return value.strftime("%Y-%m-%d")


def author_name(author) -> str:
    return f"{author.family_name}, {author.first_name}"


def author_lifespan(author, today: Optional[datetime.date] = None) -> str:
    """
    Returns the author's lifespan in years as a string.

    Uses the year of death when known, otherwise the current year. Without
    a date of birth the lifespan is ``"Unknown"``.
    """
    if author.date_of_birth is None:
        return "Unknown"
    if author.date_of_death is not None:
        end_year = author.date_of_death.year
    else:
        end_year = (today or datetime.date.today()).year
    return str(end_year - author.date_of_birth.year)


def author_view(author, prefix: str = DEFAULT_PREFIX) -> dict:
    """
    Flattens an Author with its derived values for a template.

    Works on an unsaved Author too, which then has an empty url.
    """
    return {
        "id": author.id,
        "first_name": author.first_name,
        "family_name": author.family_name,
        "name": author_name(author),
        "lifespan": author_lifespan(author),
        "date_of_birth_formatted": format_long_date(author.date_of_birth, default="Unknown"),
        "date_of_death_formatted": format_long_date(author.date_of_death),
        "date_of_birth_form": format_form_date(author.date_of_birth),
        "date_of_death_form": format_form_date(author.date_of_death),
        "url": entity_url("author", author.id, prefix) if author.id else "",
    }


def bookinstance_view(instance, prefix: str = DEFAULT_PREFIX) -> dict:
    return {
        "id": instance.id,
        "book": instance.book,
        "book_id": instance.book_id,
        "imprint": instance.imprint,
        "status": instance.status,
        "due_back": instance.due_back,
        "due_back_formatted": format_long_date(instance.due_back),
        "due_back_form": format_form_date(instance.due_back),
        "url": entity_url("bookinstance", instance.id, prefix) if instance.id else "",
    }


def entity_url(kind: str, entity_id: str, prefix: str = DEFAULT_PREFIX) -> str:
    """Canonical location of a single entity, e.g. ``/catalog/book/<id>``."""
    return f"{prefix}/{kind}/{entity_id}"


def listing_url(kind: str, prefix: str = DEFAULT_PREFIX) -> str:
    """Canonical location of a collection, e.g. ``/catalog/books``."""
    return f"{prefix}/{kind}s"
