from sqlalchemy.orm import relationship
from sqlalchemy import Column, String, Date, Index

from models.base_model import BaseModel, Base, format_date_med


class Author(BaseModel, Base):
    __tablename__ = "authors"
    URL_SEGMENT = "author"

    first_name = Column(String(100), nullable=False)
    family_name = Column(String(100), nullable=False)
    date_of_birth = Column(Date, nullable=True)
    date_of_death = Column(Date, nullable=True)

    books = relationship("Book", back_populates="author")

    __table_args__ = (
        Index("ix_authors_family_name", "family_name"),
    )

    @property
    def name(self) -> str:
        """"family_name, first_name", or an empty string if either part is missing."""
        if self.first_name and self.family_name:
            return f"{self.family_name}, {self.first_name}"
        return ""

    @property
    def lifespan(self) -> str:
        birth = format_date_med(self.date_of_birth)
        death = format_date_med(self.date_of_death)
        if not birth and not death:
            return ""
        return f"{birth} - {death}"
