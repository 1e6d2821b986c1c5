# api/schemas/feedback.py
from datetime import datetime
from typing import Optional, List
from pydantic import BaseModel, ConfigDict

class ReviewCreate(BaseModel):
    member_id: str
    book_id: str
    rating: int
    review: Optional[str] = None

class SuggestionCreate(BaseModel):
    member_id: str
    suggestion_title: str
    suggestion_author: Optional[str] = None
    suggestion_reason: Optional[str] = None

class ServiceFeedbackCreate(BaseModel):
    member_id: str
    review: str
    rating: Optional[int] = None

class FeedbackModeration(BaseModel):
    status: str

class Feedback(BaseModel):
    id: str
    member_id: str
    book_id: Optional[str] = None
    rating: Optional[int] = None
    review: Optional[str] = None
    feedback_type: str
    status: str
    suggestion_title: Optional[str] = None
    suggestion_author: Optional[str] = None
    suggestion_reason: Optional[str] = None
    created_at: datetime
    
    model_config = ConfigDict(from_attributes=True)

class FeedbackList(BaseModel):
    items: List[Feedback]
    total: int
