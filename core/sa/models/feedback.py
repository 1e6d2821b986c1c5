# core/sa/models/feedback.py
from sqlalchemy import String, Integer, Text, Index, CheckConstraint
from sqlalchemy.orm import Mapped, mapped_column
from .base import Base, CreatedAtMixin, new_id
from enum import Enum

class FeedbackType(str, Enum):
    BOOK_REVIEW = "book_review"
    SERVICE_FEEDBACK = "service_feedback"
    SUGGESTION = "suggestion"

class FeedbackStatus(str, Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"

class Feedback(Base, CreatedAtMixin):
    __tablename__ = 'feedback'

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    member_id: Mapped[str] = mapped_column(String(36), nullable=False)
    book_id: Mapped[str | None] = mapped_column(String(36), nullable=True)
    rating: Mapped[int | None] = mapped_column(Integer, nullable=True)
    review: Mapped[str | None] = mapped_column(Text, nullable=True)
    feedback_type: Mapped[str] = mapped_column(String(30), nullable=False)
    status: Mapped[str] = mapped_column(String(20), nullable=False, default=FeedbackStatus.PENDING.value)
    suggestion_title: Mapped[str | None] = mapped_column(String(500), nullable=True)
    suggestion_author: Mapped[str | None] = mapped_column(String(255), nullable=True)
    suggestion_reason: Mapped[str | None] = mapped_column(Text, nullable=True)

    __table_args__ = (
        CheckConstraint('rating IS NULL OR (rating >= 1 AND rating <= 5)', name='ck_feedback_rating_range'),
        Index('idx_feedback_status', 'status'),
        Index('idx_feedback_member_id', 'member_id'),
    )
