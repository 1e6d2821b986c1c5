# core/sa/models/book.py
from sqlalchemy import String, Integer, Float, ForeignKey, Index, CheckConstraint
from sqlalchemy.orm import relationship, Mapped, mapped_column
from .base import Base, TimestampMixin, new_id
from enum import Enum

class BookStatus(str, Enum):
    AVAILABLE = "available"
    ISSUED = "issued"
    MAINTENANCE = "maintenance"
    LOST = "lost"

class BookLanguage(str, Enum):
    ENGLISH = "English"
    KANNADA = "Kannada"
    MALAYALAM = "Malayalam"
    URDU = "Urdu"
    ARABIC = "Arabic"

class Book(Base, TimestampMixin):
    __tablename__ = 'books'

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    title: Mapped[str] = mapped_column(String(500), nullable=False)
    author: Mapped[str] = mapped_column(String(255), nullable=False)
    isbn: Mapped[str | None] = mapped_column(String(20), nullable=True)
    publisher: Mapped[str | None] = mapped_column(String(255), nullable=True)
    ddc_number: Mapped[str | None] = mapped_column(String(50), nullable=True)  # Dewey Decimal class, e.g. "823.914"
    publication_year: Mapped[int | None] = mapped_column(Integer, nullable=True)
    price: Mapped[float | None] = mapped_column(Float, nullable=True)
    language: Mapped[str | None] = mapped_column(String(20), nullable=True)
    category_id: Mapped[str | None] = mapped_column(String(36), ForeignKey('categories.id'), nullable=True)
    total_copies: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    available_copies: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    status: Mapped[str] = mapped_column(String(20), nullable=False, default=BookStatus.AVAILABLE.value)

    # Relationships
    category = relationship('Category', back_populates='books')

    __table_args__ = (
        CheckConstraint('total_copies >= 1', name='ck_books_total_copies_positive'),
        CheckConstraint(
            'available_copies >= 0 AND available_copies <= total_copies',
            name='ck_books_available_copies_range'
        ),

        # Search indexes
        Index('idx_books_title', 'title'),
        Index('idx_books_author', 'author'),
        Index('idx_books_isbn', 'isbn'),
        Index('idx_books_category_id', 'category_id'),
    )

    @property
    def category_name(self) -> str | None:
        return self.category.name if self.category else None

    @property
    def copies_on_loan(self) -> int:
        return self.total_copies - self.available_copies
