# core/services/reports.py

from collections import Counter
from dataclasses import dataclass, field
from datetime import datetime
from typing import Callable, List, Optional

from sqlalchemy.orm import Session

from core.config import settings
from core.sa.models import Book, Circulation, CirculationStatus, Member, as_utc_naive, utcnow
from core.sa.repositories import BookRepository, CirculationRepository, FeedbackRepository, MemberRepository
from core.services.circulation import is_overdue

UNKNOWN_BOOK_TITLE = "Unknown Book"
UNKNOWN_BOOK_AUTHOR = "N/A"
UNKNOWN_MEMBER_NAME = "Unknown Member"
UNKNOWN_MEMBER_EMAIL = ""


@dataclass
class BookCount:
    book_id: str
    title: str
    author: str
    count: int


@dataclass
class MemberCount:
    member_id: str
    name: str
    email: str
    count: int


@dataclass
class IssuedItem:
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


@dataclass
class Reports:
    most_borrowed: List[BookCount] = field(default_factory=list)
    most_active: List[MemberCount] = field(default_factory=list)
    currently_issued: List[IssuedItem] = field(default_factory=list)
    overdue: List[IssuedItem] = field(default_factory=list)


@dataclass
class DashboardStats:
    total_books: int
    total_copies: int
    available_copies: int
    total_members: int
    active_members: int
    issued_loans: int
    overdue_loans: int
    pending_feedback: int


class ReportingAggregator:
    """Read-only views over circulation history.

    Records are joined with books and members in memory. A record whose book
    or member has since been deleted still counts, under a placeholder name.
    """

    def __init__(
        self,
        session: Session,
        clock: Callable[[], datetime] = utcnow,
        history_limit: Optional[int] = None
    ):
        self.session = session
        self.clock = clock
        self.history_limit = history_limit if history_limit is not None else settings.report_history_limit
        self.books = BookRepository(session)
        self.members = MemberRepository(session)
        self.circulation = CirculationRepository(session)
        self.feedback = FeedbackRepository(session)

    def _history(self) -> List[Circulation]:
        """Circulation records oldest first, bounded to the newest history_limit"""
        if self.history_limit is None:
            return self.circulation.list_records(newest_first=False)
        newest = self.circulation.list_records(limit=self.history_limit, newest_first=True)
        return list(reversed(newest))

    def _lookups(self, records: List[Circulation]):
        books = self.books.get_by_ids([r.book_id for r in records if r.book_id])
        members = self.members.get_by_ids([r.member_id for r in records if r.member_id])
        return books, members

    def most_borrowed(self, limit: Optional[int] = None, records: Optional[List[Circulation]] = None) -> List[BookCount]:
        """Books ranked by how many times they were ever issued.

        Ties keep the order in which the books first appear in the history.
        """
        records = self._history() if records is None else records
        counts = Counter(r.book_id for r in records if r.book_id)
        books = self.books.get_by_ids(list(counts))
        # sorted() is stable and Counter keeps first-seen order
        ranked = sorted(counts.items(), key=lambda item: item[1], reverse=True)
        return [
            BookCount(
                book_id=book_id,
                title=books[book_id].title if book_id in books else UNKNOWN_BOOK_TITLE,
                author=books[book_id].author if book_id in books else UNKNOWN_BOOK_AUTHOR,
                count=count
            )
            for book_id, count in ranked[:self._limit(limit)]
        ]

    def most_active(self, limit: Optional[int] = None, records: Optional[List[Circulation]] = None) -> List[MemberCount]:
        """Members ranked by how many loans they ever took"""
        records = self._history() if records is None else records
        counts = Counter(r.member_id for r in records if r.member_id)
        members = self.members.get_by_ids(list(counts))
        ranked = sorted(counts.items(), key=lambda item: item[1], reverse=True)
        return [
            MemberCount(
                member_id=member_id,
                name=members[member_id].name if member_id in members else UNKNOWN_MEMBER_NAME,
                email=members[member_id].email if member_id in members else UNKNOWN_MEMBER_EMAIL,
                count=count
            )
            for member_id, count in ranked[:self._limit(limit)]
        ]

    def currently_issued(self, records: Optional[List[Circulation]] = None) -> List[IssuedItem]:
        """Every loan whose stored status is still issued, earliest due first"""
        if records is None:
            open_records = self.circulation.list_records(status=CirculationStatus.ISSUED.value, newest_first=False)
        else:
            open_records = [r for r in records if r.status == CirculationStatus.ISSUED.value]
        books, members = self._lookups(open_records)
        now = self.clock()

        items = [self._issued_item(r, books.get(r.book_id), members.get(r.member_id), now) for r in open_records]
        return sorted(items, key=lambda item: as_utc_naive(item.due_date))

    def overdue(self, records: Optional[List[Circulation]] = None) -> List[IssuedItem]:
        return [item for item in self.currently_issued(records) if item.overdue]

    def get_reports(self, limit: Optional[int] = None) -> Reports:
        records = self._history()
        issued = self.currently_issued()
        return Reports(
            most_borrowed=self.most_borrowed(limit, records),
            most_active=self.most_active(limit, records),
            currently_issued=issued,
            overdue=[item for item in issued if item.overdue]
        )

    def dashboard_stats(self) -> DashboardStats:
        copies = self.books.get_copy_totals()
        member_counts = self.members.count_by_status()
        issued = self.currently_issued()
        return DashboardStats(
            total_books=self.books.count_books(),
            total_copies=copies["total_copies"],
            available_copies=copies["available_copies"],
            total_members=sum(member_counts.values()),
            active_members=member_counts.get("active", 0),
            issued_loans=len(issued),
            overdue_loans=sum(1 for item in issued if item.overdue),
            pending_feedback=self.feedback.count_pending()
        )

    def _issued_item(
        self,
        record: Circulation,
        book: Optional[Book],
        member: Optional[Member],
        now: datetime
    ) -> IssuedItem:
        return IssuedItem(
            circulation_id=record.id,
            book_id=record.book_id,
            title=book.title if book else UNKNOWN_BOOK_TITLE,
            author=book.author if book else UNKNOWN_BOOK_AUTHOR,
            member_id=record.member_id,
            member_name=member.name if member else UNKNOWN_MEMBER_NAME,
            member_email=member.email if member else UNKNOWN_MEMBER_EMAIL,
            issue_date=record.issue_date,
            due_date=record.due_date,
            overdue=is_overdue(record, now)
        )

    def _limit(self, limit: Optional[int]) -> int:
        return settings.report_limit if limit is None else max(0, limit)
