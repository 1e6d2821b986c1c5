# api/routes/circulation.py

from typing import Optional
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from core.config import settings
from core.sa.database import get_db
from core.sa.models import Circulation
from core.sa.repositories import CirculationRepository
from core.services import CirculationEngine, is_overdue
from api.deps import get_circulation_engine, require_admin
from api.schemas.circulation import CirculationList, CirculationRecord, FineUpdate, IssueRequest, LoanPeriods, ReturnRequest

router = APIRouter(prefix="/circulation", tags=["circulation"], dependencies=[Depends(require_admin)])

def to_record(record: Circulation) -> CirculationRecord:
    return CirculationRecord.model_validate(record).model_copy(update={"overdue": is_overdue(record)})

@router.get("", response_model=CirculationList)
def get_circulation(
    record_status: Optional[str] = Query(None, alias="status", description="Filter by stored status"),
    book_id: Optional[str] = Query(None, description="Only loans of this book"),
    member_id: Optional[str] = Query(None, description="Only loans to this member"),
    page: int = Query(1, ge=1, description="Page number"),
    size: int = Query(20, ge=1, le=100, description="Items per page"),
    db: Session = Depends(get_db)
):
    """Circulation history, newest first"""
    repo = CirculationRepository(db)
    records = repo.list_records(
        status=record_status,
        book_id=book_id,
        member_id=member_id,
        limit=size,
        offset=(page - 1) * size
    )
    total = repo.count_records(status=record_status, book_id=book_id, member_id=member_id)
    return CirculationList(
        items=[to_record(record) for record in records],
        total=total,
        page=page,
        size=size
    )

@router.get("/loan-periods", response_model=LoanPeriods)
def get_loan_periods():
    """Loan periods offered when issuing a book"""
    choices = sorted(set(settings.loan_period_choices) | {settings.default_loan_days})
    return LoanPeriods(default=settings.default_loan_days, choices=choices)

@router.post("/issue", response_model=CirculationRecord, status_code=status.HTTP_201_CREATED)
def issue_book(request: IssueRequest, engine: CirculationEngine = Depends(get_circulation_engine)):
    return to_record(engine.issue(request.book_id, request.member_id, request.loan_days))

@router.post("/return", response_model=CirculationRecord)
def return_book(request: ReturnRequest, engine: CirculationEngine = Depends(get_circulation_engine)):
    return to_record(engine.return_book(request.book_id))

@router.post("/{circulation_id}/return", response_model=CirculationRecord)
def return_record(circulation_id: str, engine: CirculationEngine = Depends(get_circulation_engine)):
    return to_record(engine.return_record(circulation_id))

@router.put("/{circulation_id}/fine", response_model=CirculationRecord)
def record_fine(
    circulation_id: str,
    fine: FineUpdate,
    engine: CirculationEngine = Depends(get_circulation_engine)
):
    return to_record(engine.record_fine(circulation_id, fine.amount))
