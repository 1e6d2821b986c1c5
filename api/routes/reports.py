# api/routes/reports.py

from typing import List, Optional
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from core.sa.database import get_db
from core.services import ReportingAggregator
from api.deps import require_admin
from api.schemas.report import DashboardStats, IssuedItem, Reports

router = APIRouter(prefix="/reports", tags=["reports"], dependencies=[Depends(require_admin)])

@router.get("", response_model=Reports)
def get_reports(
    limit: Optional[int] = Query(None, ge=1, le=100, description="Entries in the most borrowed/most active rankings"),
    db: Session = Depends(get_db)
):
    """Most borrowed books, most active members, loans out and loans overdue"""
    return ReportingAggregator(db).get_reports(limit)

@router.get("/dashboard", response_model=DashboardStats)
def get_dashboard(db: Session = Depends(get_db)):
    return ReportingAggregator(db).dashboard_stats()

@router.get("/overdue", response_model=List[IssuedItem])
def get_overdue(db: Session = Depends(get_db)):
    return ReportingAggregator(db).overdue()
