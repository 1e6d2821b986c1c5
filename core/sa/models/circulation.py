# core/sa/models/circulation.py
from datetime import datetime
from sqlalchemy import String, Float, DateTime, Index, CheckConstraint
from sqlalchemy.orm import Mapped, mapped_column
from .base import Base, TimestampMixin, new_id, utcnow
from enum import Enum

class CirculationStatus(str, Enum):
    ISSUED = "issued"
    RETURNED = "returned"
    OVERDUE = "overdue"    # administrative marking only, live views compare due_date
    LOST = "lost"

class Circulation(Base, TimestampMixin):
    """One loan of one copy of a book to a member.

    book_id and member_id are plain columns rather than foreign keys: loan
    history outlives the books and members it mentions.
    """
    __tablename__ = 'circulation'

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    book_id: Mapped[str] = mapped_column(String(36), nullable=False)
    member_id: Mapped[str] = mapped_column(String(36), nullable=False)
    issue_date: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=utcnow)
    due_date: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    return_date: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)
    status: Mapped[str] = mapped_column(String(20), nullable=False, default=CirculationStatus.ISSUED.value)
    fine_amount: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)

    __table_args__ = (
        CheckConstraint('fine_amount >= 0', name='ck_circulation_fine_non_negative'),

        Index('idx_circulation_book_status', 'book_id', 'status'),
        Index('idx_circulation_member_id', 'member_id'),
        Index('idx_circulation_due_date', 'due_date'),
    )

    @property
    def is_open(self) -> bool:
        return self.status == CirculationStatus.ISSUED.value and self.return_date is None
