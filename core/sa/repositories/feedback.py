# core/sa/repositories/feedback.py

from typing import List, Optional
from sqlalchemy import desc
from sqlalchemy.orm import Session
import logging

from core.errors import NotFound, Conflict, InvalidArgument
from core.sa.models import Feedback, FeedbackType, FeedbackStatus, Member, Book

logger = logging.getLogger(__name__)

class FeedbackRepository:
    """Repository for reviews, suggestions and service feedback."""

    def __init__(self, session: Session):
        self.session = session

    def get_by_id(self, feedback_id: str) -> Optional[Feedback]:
        return self.session.query(Feedback).filter(Feedback.id == feedback_id).first()

    def _require_member(self, member_id: str) -> None:
        if not member_id or not self.session.query(Member.id).filter(Member.id == member_id).first():
            raise NotFound(f"Member '{member_id}' not found")

    def _add(self, feedback: Feedback) -> Feedback:
        self.session.add(feedback)
        self.session.commit()
        logger.info(f"Recorded {feedback.feedback_type} {feedback.id} from member {feedback.member_id}")
        return feedback

    def submit_review(
        self,
        member_id: str,
        book_id: str,
        rating: int,
        review: Optional[str] = None
    ) -> Feedback:
        """Record a book review awaiting moderation.
        
        Raises:
            InvalidArgument: If the rating is not between 1 and 5
            NotFound: If the member or book does not exist
        """
        if rating is None or isinstance(rating, bool) or not 1 <= rating <= 5:
            raise InvalidArgument("Rating must be between 1 and 5")
        self._require_member(member_id)
        if not book_id or not self.session.query(Book.id).filter(Book.id == book_id).first():
            raise NotFound(f"Book '{book_id}' not found")

        return self._add(Feedback(
            member_id=member_id,
            book_id=book_id,
            rating=rating,
            review=review,
            feedback_type=FeedbackType.BOOK_REVIEW.value,
            status=FeedbackStatus.PENDING.value
        ))

    def submit_suggestion(
        self,
        member_id: str,
        title: str,
        author: Optional[str] = None,
        reason: Optional[str] = None
    ) -> Feedback:
        """Record a suggestion for a book the library should acquire"""
        if not title or not title.strip():
            raise InvalidArgument("Suggested title is required")
        self._require_member(member_id)

        return self._add(Feedback(
            member_id=member_id,
            feedback_type=FeedbackType.SUGGESTION.value,
            status=FeedbackStatus.PENDING.value,
            suggestion_title=title.strip(),
            suggestion_author=author,
            suggestion_reason=reason
        ))

    def submit_service_feedback(self, member_id: str, review: str, rating: Optional[int] = None) -> Feedback:
        if not review or not review.strip():
            raise InvalidArgument("Feedback text is required")
        if rating is not None and not 1 <= rating <= 5:
            raise InvalidArgument("Rating must be between 1 and 5")
        self._require_member(member_id)

        return self._add(Feedback(
            member_id=member_id,
            rating=rating,
            review=review.strip(),
            feedback_type=FeedbackType.SERVICE_FEEDBACK.value,
            status=FeedbackStatus.PENDING.value
        ))

    def moderate(self, feedback_id: str, status: str) -> Feedback:
        """Approve or reject pending feedback.
        
        Raises:
            NotFound: Unknown feedback
            InvalidArgument: Target status is not approved or rejected
            Conflict: Feedback was already moderated
        """
        if status not in (FeedbackStatus.APPROVED.value, FeedbackStatus.REJECTED.value):
            raise InvalidArgument("Feedback can only be moved to 'approved' or 'rejected'")
        feedback = self.get_by_id(feedback_id)
        if feedback is None:
            raise NotFound(f"Feedback '{feedback_id}' not found")
        if feedback.status != FeedbackStatus.PENDING.value:
            raise Conflict(f"Feedback '{feedback_id}' is already {feedback.status}")

        feedback.status = status
        self.session.commit()
        return feedback

    def list_feedback(
        self,
        status: Optional[str] = None,
        feedback_type: Optional[str] = None,
        book_id: Optional[str] = None,
        limit: int = 50,
        offset: int = 0
    ) -> List[Feedback]:
        query = self.session.query(Feedback)
        if status:
            query = query.filter(Feedback.status == status)
        if feedback_type:
            query = query.filter(Feedback.feedback_type == feedback_type)
        if book_id:
            query = query.filter(Feedback.book_id == book_id)
        return (
            query.order_by(desc(Feedback.created_at), desc(Feedback.id))
            .offset(offset)
            .limit(limit)
            .all()
        )

    def count_pending(self) -> int:
        return self.session.query(Feedback).filter(Feedback.status == FeedbackStatus.PENDING.value).count()
