from enum import Enum

from sqlalchemy import Column, String, ForeignKey, Date
from sqlalchemy.orm import relationship
from sqlalchemy.types import Enum as SAEnum

from models.base_model import BaseModel, Base, format_date_med


class BookInstanceStatus(str, Enum):
    AVAILABLE = "Available"
    MAINTENANCE = "Maintenance"
    LOANED = "Loaned"
    RESERVED = "Reserved"

    def __str__(self) -> str:
        return self.value


class BookInstance(BaseModel, Base):
    __tablename__ = "book_instances"
    URL_SEGMENT = "bookinstance"

    # Book: RESTRICT deletion while copies reference it
    book_id = Column(String(36), ForeignKey("books.id", ondelete="RESTRICT"), nullable=False, index=True)
    imprint = Column(String(255), nullable=False)
    status = Column(
        SAEnum(
            BookInstanceStatus,
            name="book_instance_status",
            native_enum=False,
            values_callable=lambda enum: [member.value for member in enum],
        ),
        nullable=False,
        default=BookInstanceStatus.MAINTENANCE,
    )
    due_back = Column(Date, nullable=True)

    book = relationship("Book", back_populates="instances")

    @property
    def due_back_formatted(self) -> str:
        return format_date_med(self.due_back)
