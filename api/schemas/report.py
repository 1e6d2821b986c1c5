# api/schemas/report.py
from datetime import datetime
from typing import List
from pydantic import BaseModel, ConfigDict

class BookCount(BaseModel):
    book_id: str
    title: str
    author: str
    count: int
    
    model_config = ConfigDict(from_attributes=True)

class MemberCount(BaseModel):
    member_id: str
    name: str
    email: str
    count: int
    
    model_config = ConfigDict(from_attributes=True)

class IssuedItem(BaseModel):
    circulation_id: str
    book_id: str
    title: str
    author: str
    member_id: str
    member_name: str
    member_email: str
    issue_date: datetime
    due_date: datetime
    overdue: bool
    
    model_config = ConfigDict(from_attributes=True)

class Reports(BaseModel):
    most_borrowed: List[BookCount]
    most_active: List[MemberCount]
    currently_issued: List[IssuedItem]
    overdue: List[IssuedItem]
    
    model_config = ConfigDict(from_attributes=True)

class DashboardStats(BaseModel):
    total_books: int
    total_copies: int
    available_copies: int
    total_members: int
    active_members: int
    issued_loans: int
    overdue_loans: int
    pending_feedback: int
    
    model_config = ConfigDict(from_attributes=True)
