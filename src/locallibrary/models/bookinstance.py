# src/locallibrary/models/bookinstance.py
import datetime
import enum
from sqlalchemy import Column, String, DateTime, CheckConstraint
from sqlalchemy.orm import relationship
from locallibrary.db.session import Base, new_id


class BookStatus(str, enum.Enum):
    AVAILABLE = "Available"
    MAINTENANCE = "Maintenance"
    LOANED = "Loaned"
    RESERVED = "Reserved"

    @classmethod
    def values(cls) -> list[str]:
        return [status.value for status in cls]


class BookInstance(Base):
    __tablename__ = "bookinstances"

    id = Column(String(32), primary_key=True, default=new_id)
    book_id = Column(String(32), nullable=False, index=True)
    imprint = Column(String(255), nullable=False)
    status = Column(String(20), nullable=False, default=BookStatus.MAINTENANCE.value, index=True)
    # Defaults to creation time when the form leaves it empty
    due_back = Column(DateTime, nullable=False, default=datetime.datetime.now)

    # Joined load chains into Book.author so a copy can be rendered detached
    book = relationship(
        "Book",
        primaryjoin="foreign(BookInstance.book_id) == Book.id",
        lazy="joined",
    )

    __table_args__ = (
        CheckConstraint(
            "status IN ('Available', 'Maintenance', 'Loaned', 'Reserved')",
            name="bookinstance_status_check",
        ),
    )

    def __repr__(self):
        return f"<BookInstance(id={self.id}, book_id={self.book_id}, status={self.status})>"
