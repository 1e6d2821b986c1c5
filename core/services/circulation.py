# core/services/circulation.py

from contextlib import contextmanager
from datetime import datetime, timedelta
from typing import Callable, Iterator, Optional
import logging

from sqlalchemy.exc import IntegrityError, InterfaceError, OperationalError
from sqlalchemy.orm import Session

from core.config import settings
from core.errors import Conflict, InvalidArgument, NotFound, PermissionDenied, TransientError
from core.events import ChangeNotifier
from core.sa.models import Book, Circulation, CirculationStatus, as_utc_naive, utcnow
from core.sa.repositories import BookRepository, CirculationRepository, MemberRepository

logger = logging.getLogger(__name__)


def is_overdue(record: Circulation, now: Optional[datetime] = None) -> bool:
    """A loan is overdue while it is still issued and its due date has passed.

    Worked out from the clock on every read; the stored 'overdue' status is
    not consulted.
    """
    if record.status != CirculationStatus.ISSUED.value:
        return False
    now = as_utc_naive(now) if now is not None else utcnow()
    return as_utc_naive(record.due_date) < now


class CirculationEngine:
    """Issues and returns books.

    The only place that moves a book's available_copies. Each operation is
    one transaction: the circulation record and the copy counter change
    together or not at all.
    """

    def __init__(
        self,
        session: Session,
        notifier: Optional[ChangeNotifier] = None,
        clock: Callable[[], datetime] = utcnow,
        is_authorized: Optional[Callable[[], bool]] = None,
        default_loan_days: Optional[int] = None
    ):
        self.session = session
        self.books = BookRepository(session)
        self.members = MemberRepository(session)
        self.circulation = CirculationRepository(session)
        self.notifier = notifier
        self.clock = clock
        self.is_authorized = is_authorized
        self.default_loan_days = default_loan_days or settings.default_loan_days

    def issue(self, book_id: str, member_id: str, loan_days: Optional[int] = None) -> Circulation:
        """Lend one copy of a book to a member.

        Args:
            book_id: Book to lend
            member_id: Borrowing member, must be active
            loan_days: Loan period in days, defaults to the configured period

        Returns:
            The new open Circulation record

        Raises:
            InvalidArgument: Non-positive loan period or inactive member
            NotFound: Unknown book or member
            Conflict: No copy left at commit time
            TransientError: Database unavailable, nothing was applied
        """
        self._authorize("issue books")
        if loan_days is None:
            loan_days = self.default_loan_days
        if isinstance(loan_days, bool) or not isinstance(loan_days, int) or loan_days <= 0:
            raise InvalidArgument(f"Loan period must be a positive number of days, got {loan_days!r}")

        with self._transaction("issue"):
            book = self.books.require(book_id)
            member = self.members.require(member_id)
            if not member.is_active:
                raise InvalidArgument(f"Member '{member.name}' is {member.status} and cannot borrow books")

            if not self.books.claim_copy(book_id):
                logger.warning(f"Issue refused: no copies of '{book.title}' ({book_id}) left")
                raise Conflict(f"No copies of '{book.title}' are available")

            issued_at = as_utc_naive(self.clock())
            record = self.circulation.insert(
                book_id=book_id,
                member_id=member_id,
                issue_date=issued_at,
                due_date=issued_at + timedelta(days=loan_days)
            )
            self.session.commit()

        logger.info(
            f"Issued '{book.title}' ({book_id}) to {member.name} ({member_id}) "
            f"due {record.due_date:%Y-%m-%d}"
        )
        self._publish("circulation", "insert", record.id)
        self._publish("books", "update", book_id)
        return record

    def return_book(self, book_id: str) -> Circulation:
        """Close the most recent open loan of a book.

        Raises:
            NotFound: Unknown book
            Conflict: The book has no open loan (double return)
            TransientError: Database unavailable, nothing was applied
        """
        self._authorize("return books")
        with self._transaction("return"):
            book = self.books.require(book_id)
            record = self.circulation.get_open_for_book(book_id)
            if record is None:
                logger.warning(f"Return refused: '{book.title}' ({book_id}) has no open loan")
                raise Conflict(f"'{book.title}' is not currently issued")
            self._close(record, book)
        return self._after_return(record)

    def return_record(self, circulation_id: str) -> Circulation:
        """Close a specific open loan.

        Raises:
            NotFound: Unknown circulation record
            Conflict: The record is not open
        """
        self._authorize("return books")
        with self._transaction("return"):
            record = self.circulation.get_by_id(circulation_id)
            if record is None:
                raise NotFound(f"Circulation record '{circulation_id}' not found")
            if not record.is_open:
                raise Conflict(f"Circulation record '{circulation_id}' is already {record.status}")
            self._close(record, self.books.get_by_id(record.book_id))
        return self._after_return(record)

    def record_fine(self, circulation_id: str, amount: float) -> Circulation:
        """Store a fine on a loan. Nothing enforces or collects it."""
        self._authorize("record fines")
        if amount is None or amount < 0:
            raise InvalidArgument("Fine amount cannot be negative")

        with self._transaction("fine"):
            if not self.circulation.set_fine(circulation_id, float(amount)):
                raise NotFound(f"Circulation record '{circulation_id}' not found")
            self.session.commit()

        record = self.circulation.get_by_id(circulation_id)
        self._publish("circulation", "update", circulation_id)
        return record

    def is_overdue(self, record: Circulation) -> bool:
        return is_overdue(record, self.clock())

    def _close(self, record: Circulation, book: Optional[Book]) -> None:
        returned_at = as_utc_naive(self.clock())
        if not self.circulation.close(record.id, returned_at):
            # Someone else closed it after we read it
            raise Conflict(f"Circulation record '{record.id}' was already returned")

        if book is None:
            logger.warning(f"Returned loan {record.id} for missing book {record.book_id}")
        elif not self.books.release_copy(book.id):
            logger.warning(
                f"'{book.title}' ({book.id}) already had all {book.total_copies} copies on the shelf; "
                f"counter left unchanged"
            )

        if as_utc_naive(record.due_date) < returned_at:
            late_days = (returned_at - as_utc_naive(record.due_date)).days
            logger.info(f"Loan {record.id} returned {late_days} days late")
        self.session.commit()

    def _after_return(self, record: Circulation) -> Circulation:
        logger.info(f"Returned book {record.book_id} from member {record.member_id} (loan {record.id})")
        self._publish("circulation", "update", record.id)
        self._publish("books", "update", record.book_id)
        return record

    def _authorize(self, action: str) -> None:
        if self.is_authorized is not None and not self.is_authorized():
            logger.warning(f"Unauthorized attempt to {action}")
            raise PermissionDenied(f"Not permitted to {action}")

    def _publish(self, table: str, event: str, row_id: str) -> None:
        if self.notifier is not None:
            self.notifier.publish(table, event, row_id)

    @contextmanager
    def _transaction(self, operation: str) -> Iterator[None]:
        """Roll back on any failure and translate database outages to TransientError"""
        try:
            yield
        except (OperationalError, InterfaceError) as e:
            self.session.rollback()
            logger.error(f"Database unavailable during {operation}: {str(e)}")
            raise TransientError(f"Database unavailable, {operation} was not applied") from e
        except IntegrityError as e:
            self.session.rollback()
            logger.error(f"Integrity error during {operation}: {str(e)}")
            raise Conflict(f"{operation.capitalize()} conflicts with current data") from e
        except Exception:
            self.session.rollback()
            raise
