from sqlalchemy.orm import relationship
from sqlalchemy import Column, String, Index

from models.base_model import BaseModel, Base
from models.book import book_genres


class Genre(BaseModel, Base):
    __tablename__ = "genres"
    URL_SEGMENT = "genre"

    # Not unique; duplicates are prevented by the create handler only
    name = Column(String(100), nullable=False)

    books = relationship("Book", secondary=book_genres, back_populates="genres")

    __table_args__ = (
        Index("ix_genres_name", "name"),
    )
