# api/schemas/circulation.py
from datetime import datetime
from typing import Optional, List
from pydantic import BaseModel, ConfigDict

class IssueRequest(BaseModel):
    book_id: str
    member_id: str
    loan_days: Optional[int] = None

class ReturnRequest(BaseModel):
    book_id: str

class FineUpdate(BaseModel):
    amount: float

class CirculationRecord(BaseModel):
    id: str
    book_id: str
    member_id: str
    issue_date: datetime
    due_date: datetime
    return_date: Optional[datetime] = None
    status: str
    fine_amount: float
    overdue: bool = False
    created_at: datetime
    updated_at: datetime
    
    model_config = ConfigDict(from_attributes=True)

class CirculationList(BaseModel):
    items: List[CirculationRecord]
    total: int
    page: int
    size: int

class LoanPeriods(BaseModel):
    default: int
    choices: List[int]
