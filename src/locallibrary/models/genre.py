from sqlalchemy import Column, String, Text
from locallibrary.db.session import Base, new_id

class Genre(Base):
    __tablename__ = "genres"

    id = Column(String(32), primary_key=True, default=new_id)
    # Not unique at the schema level; duplicates are detected on creation
    name = Column(Text, nullable=False, index=True)

    def __repr__(self):
        return f"<Genre(id={self.id}, name='{self.name}')>"
