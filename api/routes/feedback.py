# api/routes/feedback.py

from typing import Optional
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from core.events import notifier
from core.sa.database import get_db
from core.sa.repositories import FeedbackRepository
from api.deps import require_admin
from api.schemas.feedback import (
    Feedback, FeedbackList, FeedbackModeration, ReviewCreate, ServiceFeedbackCreate, SuggestionCreate
)

router = APIRouter(prefix="/feedback", tags=["feedback"])

@router.post("/reviews", response_model=Feedback, status_code=status.HTTP_201_CREATED)
def submit_review(review: ReviewCreate, db: Session = Depends(get_db)):
    feedback = FeedbackRepository(db).submit_review(
        member_id=review.member_id,
        book_id=review.book_id,
        rating=review.rating,
        review=review.review
    )
    notifier.publish("feedback", "insert", feedback.id)
    return feedback

@router.post("/suggestions", response_model=Feedback, status_code=status.HTTP_201_CREATED)
def submit_suggestion(suggestion: SuggestionCreate, db: Session = Depends(get_db)):
    feedback = FeedbackRepository(db).submit_suggestion(
        member_id=suggestion.member_id,
        title=suggestion.suggestion_title,
        author=suggestion.suggestion_author,
        reason=suggestion.suggestion_reason
    )
    notifier.publish("feedback", "insert", feedback.id)
    return feedback

@router.post("/service", response_model=Feedback, status_code=status.HTTP_201_CREATED)
def submit_service_feedback(entry: ServiceFeedbackCreate, db: Session = Depends(get_db)):
    feedback = FeedbackRepository(db).submit_service_feedback(
        member_id=entry.member_id,
        review=entry.review,
        rating=entry.rating
    )
    notifier.publish("feedback", "insert", feedback.id)
    return feedback

@router.get("", response_model=FeedbackList, dependencies=[Depends(require_admin)])
def list_feedback(
    feedback_status: Optional[str] = Query(None, alias="status", description="pending, approved or rejected"),
    feedback_type: Optional[str] = Query(None, description="book_review, service_feedback or suggestion"),
    limit: int = Query(50, ge=1, le=200),
    db: Session = Depends(get_db)
):
    items = FeedbackRepository(db).list_feedback(status=feedback_status, feedback_type=feedback_type, limit=limit)
    return FeedbackList(items=[Feedback.model_validate(item) for item in items], total=len(items))

@router.put("/{feedback_id}", response_model=Feedback, dependencies=[Depends(require_admin)])
def moderate_feedback(feedback_id: str, moderation: FeedbackModeration, db: Session = Depends(get_db)):
    feedback = FeedbackRepository(db).moderate(feedback_id, moderation.status)
    notifier.publish("feedback", "update", feedback_id)
    return feedback
