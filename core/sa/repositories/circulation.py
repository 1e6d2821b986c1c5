# core/sa/repositories/circulation.py

from datetime import datetime
from typing import List, Optional
from sqlalchemy import update, desc, asc, func
from sqlalchemy.orm import Session

from core.sa.models import Circulation, CirculationStatus, utcnow

class CirculationRepository:
    """Repository for circulation records.

    Records are never deleted. Write methods here only flush; the circulation
    engine owns the transaction around them.
    """

    def __init__(self, session: Session):
        self.session = session

    def get_by_id(self, circulation_id: str) -> Optional[Circulation]:
        return self.session.query(Circulation).filter(Circulation.id == circulation_id).first()

    def _open_filter(self, query):
        return query.filter(
            Circulation.status == CirculationStatus.ISSUED.value,
            Circulation.return_date.is_(None)
        )

    def get_open_for_book(self, book_id: str) -> Optional[Circulation]:
        """Most recent open record for a book, or None"""
        return (
            self._open_filter(self.session.query(Circulation))
            .filter(Circulation.book_id == book_id)
            .order_by(desc(Circulation.issue_date), desc(Circulation.created_at))
            .first()
        )

    def count_open_for_book(self, book_id: str) -> int:
        return (
            self._open_filter(self.session.query(func.count(Circulation.id)))
            .filter(Circulation.book_id == book_id)
            .scalar()
        )

    def list_open(self) -> List[Circulation]:
        return (
            self._open_filter(self.session.query(Circulation))
            .order_by(asc(Circulation.due_date), Circulation.id)
            .all()
        )

    def list_records(
        self,
        status: Optional[str] = None,
        book_id: Optional[str] = None,
        member_id: Optional[str] = None,
        limit: Optional[int] = None,
        offset: int = 0,
        newest_first: bool = True
    ) -> List[Circulation]:
        """List circulation history with optional filters.

        Args:
            status: Only records with this stored status
            book_id: Only records for this book
            member_id: Only records for this member
            limit: Maximum number of records, None for all
            offset: Number of records to skip
            newest_first: Order by issue date descending instead of ascending

        Returns:
            List of Circulation objects
        """
        query = self.session.query(Circulation)
        if status:
            query = query.filter(Circulation.status == status)
        if book_id:
            query = query.filter(Circulation.book_id == book_id)
        if member_id:
            query = query.filter(Circulation.member_id == member_id)

        if newest_first:
            query = query.order_by(desc(Circulation.issue_date), desc(Circulation.id))
        else:
            query = query.order_by(asc(Circulation.issue_date), asc(Circulation.id))

        query = query.offset(offset)
        if limit is not None:
            query = query.limit(limit)
        return query.all()

    def count_records(
        self,
        status: Optional[str] = None,
        book_id: Optional[str] = None,
        member_id: Optional[str] = None
    ) -> int:
        query = self.session.query(func.count(Circulation.id))
        if status:
            query = query.filter(Circulation.status == status)
        if book_id:
            query = query.filter(Circulation.book_id == book_id)
        if member_id:
            query = query.filter(Circulation.member_id == member_id)
        return query.scalar()

    def insert(self, book_id: str, member_id: str, issue_date: datetime, due_date: datetime) -> Circulation:
        record = Circulation(
            book_id=book_id,
            member_id=member_id,
            issue_date=issue_date,
            due_date=due_date,
            status=CirculationStatus.ISSUED.value,
            fine_amount=0.0
        )
        self.session.add(record)
        self.session.flush()
        return record

    def close(self, circulation_id: str, returned_at: datetime) -> bool:
        """Mark an open record returned.

        Guarded on the record still being open, so a second return of the same
        loan matches nothing. Returns False in that case.
        """
        result = self.session.execute(
            update(Circulation)
            .where(
                Circulation.id == circulation_id,
                Circulation.status == CirculationStatus.ISSUED.value,
                Circulation.return_date.is_(None)
            )
            .values(
                status=CirculationStatus.RETURNED.value,
                return_date=returned_at,
                updated_at=utcnow()
            )
            .execution_options(synchronize_session=False)
        )
        return result.rowcount > 0

    def set_fine(self, circulation_id: str, amount: float) -> bool:
        result = self.session.execute(
            update(Circulation)
            .where(Circulation.id == circulation_id)
            .values(fine_amount=amount, updated_at=utcnow())
            .execution_options(synchronize_session=False)
        )
        return result.rowcount > 0
