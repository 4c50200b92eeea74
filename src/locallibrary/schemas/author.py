"""
Pydantic candidates for the Author entity.
Built from sanitized form data once every field rule has passed.
"""

from pydantic import BaseModel, Field, field_validator
import datetime
from typing import Optional

class AuthorCreate(BaseModel):
    """
    Typed Author candidate, used for both creation and update.

    Attributes:
        first_name (str): Given name, 1 to 100 characters.
        family_name (str): Family name, 1 to 100 characters.
        date_of_birth (Optional[datetime.date]): Date of birth, if known.
        date_of_death (Optional[datetime.date]): Date of death, if known.
    """
    first_name: str = Field(..., min_length=1, max_length=100)
    family_name: str = Field(..., min_length=1, max_length=100)
    date_of_birth: Optional[datetime.date] = None
    date_of_death: Optional[datetime.date] = None

    @field_validator("date_of_birth", "date_of_death", mode="before")
    @classmethod
    def empty_date_is_none(cls, value):
        return value or None
