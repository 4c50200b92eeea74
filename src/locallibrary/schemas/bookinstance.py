"""
Pydantic candidates for the BookInstance entity (a physical copy).
"""

from pydantic import BaseModel, Field, ConfigDict, field_validator
import datetime

from ..models.bookinstance import BookStatus

class BookInstanceCreate(BaseModel):
    """
    Typed BookInstance candidate.

    An empty status falls back to Maintenance and an empty due date to the
    creation time.
    """
    book: str = Field(..., min_length=1)
    imprint: str = Field(..., min_length=1)
    status: BookStatus = BookStatus.MAINTENANCE
    due_back: datetime.datetime = Field(default_factory=datetime.datetime.now)

    model_config = ConfigDict(use_enum_values=True)

    @field_validator("status", mode="before")
    @classmethod
    def default_status(cls, value):
        return value or BookStatus.MAINTENANCE

    @field_validator("due_back", mode="before")
    @classmethod
    def default_due_back(cls, value):
        return value or datetime.datetime.now()
