"""
ORM model for the Author entity of the Local Library catalog.
"""

from sqlalchemy import Column, String, Date
from locallibrary.db.session import Base, new_id

class Author(Base):
    """
    Represents an author in the catalog.

    Attributes:
        id (str): Globally unique identifier.
        first_name (str): Given name, at most 100 characters.
        family_name (str): Family name, at most 100 characters.
        date_of_birth (date): Optional date of birth.
        date_of_death (date): Optional date of death.

    Display values (name, lifespan, formatted dates) are derived on demand
    by `locallibrary.display`, never stored.
    """
    __tablename__ = "authors"

    id = Column(String(32), primary_key=True, default=new_id)
    first_name = Column(String(100), nullable=False)
    family_name = Column(String(100), nullable=False, index=True)
    date_of_birth = Column(Date, nullable=True)
    date_of_death = Column(Date, nullable=True)

    def __repr__(self) -> str:
        return f"<Author(id={self.id}, name='{self.family_name}, {self.first_name}')>"
