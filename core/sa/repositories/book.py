from typing import Optional, List, Dict, Any
from sqlalchemy import update, case, or_, func, asc, desc
from sqlalchemy.orm import Session, joinedload
import logging

from core.errors import NotFound, Conflict, InvalidArgument
from core.sa.models import Book, BookStatus, BookLanguage, Category, Circulation, CirculationStatus, utcnow

logger = logging.getLogger(__name__)

SORT_FIELDS = {
    "title": Book.title,
    "author": Book.author,
    "created_at": Book.created_at,
    "publication_year": Book.publication_year,
    "available_copies": Book.available_copies,
}

# Columns update_book accepts. available_copies only moves through circulation
# or a total_copies change.
EDITABLE_FIELDS = (
    "title", "author", "isbn", "publisher", "ddc_number", "publication_year",
    "price", "language", "category_id", "status",
)


class BookRepository:
    """Repository for managing Book entities."""

    def __init__(self, session: Session):
        self.session = session

    def get_by_id(self, book_id: str) -> Optional[Book]:
        """Get a book by its ID"""
        return self.session.query(Book).filter(Book.id == book_id).first()

    def get_by_ids(self, book_ids: List[str]) -> Dict[str, Book]:
        """Get books keyed by ID. Unknown IDs are simply absent from the result."""
        if not book_ids:
            return {}
        books = self.session.query(Book).filter(Book.id.in_(set(book_ids))).all()
        return {book.id: book for book in books}

    def require(self, book_id: str) -> Book:
        book = self.get_by_id(book_id)
        if book is None:
            raise NotFound(f"Book '{book_id}' not found")
        return book

    def _filtered_query(
        self,
        query: Optional[str] = None,
        category_id: Optional[str] = None,
        language: Optional[str] = None,
        status: Optional[str] = None,
        available_only: bool = False
    ):
        base_query = self.session.query(Book)
        if query:
            pattern = f"%{query.strip()}%"
            base_query = base_query.filter(
                or_(
                    Book.title.ilike(pattern),
                    Book.author.ilike(pattern),
                    Book.isbn.ilike(pattern)
                )
            )
        if category_id:
            base_query = base_query.filter(Book.category_id == category_id)
        if language:
            base_query = base_query.filter(Book.language == language)
        if status:
            base_query = base_query.filter(Book.status == status)
        if available_only:
            base_query = base_query.filter(Book.available_copies > 0)
        return base_query

    def search_books(
        self,
        query: Optional[str] = None,
        category_id: Optional[str] = None,
        language: Optional[str] = None,
        status: Optional[str] = None,
        available_only: bool = False,
        sort_field: str = "title",
        sort_order: str = "asc",
        limit: Optional[int] = 20,
        offset: int = 0
    ) -> List[Book]:
        """Search books by title, author or ISBN with optional filters.

        Args:
            query: Case-insensitive substring matched against title, author and ISBN
            category_id: Only books in this category
            language: Only books in this language
            status: Only books with this status
            available_only: Only books with at least one copy on the shelf
            sort_field: One of SORT_FIELDS
            sort_order: 'asc' or 'desc'
            limit: Maximum number of results, None for no limit
            offset: Number of results to skip

        Returns:
            List of matching Book objects with their category loaded
        """
        if sort_field not in SORT_FIELDS:
            raise InvalidArgument(f"Invalid sort field. Must be one of: {', '.join(SORT_FIELDS)}")
        if sort_order not in ("asc", "desc"):
            raise InvalidArgument("Invalid sort order. Must be 'asc' or 'desc'")

        column = SORT_FIELDS[sort_field]
        ordering = asc(column) if sort_order == "asc" else desc(column)
        results = (
            self._filtered_query(query, category_id, language, status, available_only)
            .options(joinedload(Book.category))
            .order_by(ordering, Book.id)
            .offset(offset)
        )
        if limit is not None:
            results = results.limit(limit)
        return results.all()

    def count_books(
        self,
        query: Optional[str] = None,
        category_id: Optional[str] = None,
        language: Optional[str] = None,
        status: Optional[str] = None,
        available_only: bool = False
    ) -> int:
        """Count books matching the same filters as search_books"""
        return self._filtered_query(query, category_id, language, status, available_only).count()

    def create_book(
        self,
        title: str,
        author: str,
        total_copies: int = 1,
        isbn: Optional[str] = None,
        publisher: Optional[str] = None,
        ddc_number: Optional[str] = None,
        publication_year: Optional[int] = None,
        price: Optional[float] = None,
        language: Optional[str] = None,
        category_id: Optional[str] = None
    ) -> Book:
        """Create a new book with every copy on the shelf.

        Raises:
            InvalidArgument: Missing title/author, fewer than one copy, bad language or price
            NotFound: category_id does not resolve
        """
        if not title or not title.strip():
            raise InvalidArgument("Book title is required")
        if not author or not author.strip():
            raise InvalidArgument("Book author is required")
        if total_copies is None or total_copies < 1:
            raise InvalidArgument("total_copies must be at least 1")
        self._validate_fields({"language": language, "price": price, "category_id": category_id})

        book = Book(
            title=title.strip(),
            author=author.strip(),
            isbn=isbn,
            publisher=publisher,
            ddc_number=ddc_number,
            publication_year=publication_year,
            price=price,
            language=language,
            category_id=category_id,
            total_copies=total_copies,
            available_copies=total_copies,
            status=BookStatus.AVAILABLE.value
        )
        self.session.add(book)
        self.session.commit()
        logger.info(f"Added book '{book.title}' ({book.id}) with {total_copies} copies")
        return book

    def update_book(self, book_id: str, **changes: Any) -> Book:
        """Update book details.

        Changing total_copies moves available_copies by the same delta so the
        number of copies on loan is unchanged.

        Raises:
            NotFound: Unknown book
            InvalidArgument: Unknown field, available_copies in changes, bad values
            Conflict: New total is below the number of copies currently on loan
        """
        book = self.require(book_id)

        if "available_copies" in changes:
            raise InvalidArgument("available_copies is maintained by circulation and cannot be set directly")
        unknown = set(changes) - set(EDITABLE_FIELDS) - {"total_copies"}
        if unknown:
            raise InvalidArgument(f"Unknown book fields: {', '.join(sorted(unknown))}")
        self._validate_fields(changes)

        new_total = changes.pop("total_copies", None)
        if new_total is not None and new_total < 1:
            raise InvalidArgument("total_copies must be at least 1")
        for field_name, value in changes.items():
            setattr(book, field_name, value)

        if new_total is not None and new_total != book.total_copies:
            delta = new_total - book.total_copies
            # Single guarded statement so a concurrent issue cannot slip between check and write.
            # status is SET first so it reads the old available_copies on every backend.
            result = self.session.execute(
                update(Book)
                .where(
                    Book.id == book_id,
                    Book.total_copies - Book.available_copies <= new_total
                )
                .ordered_values(
                    (Book.status, case(
                        (Book.available_copies + delta <= 0, BookStatus.ISSUED.value),
                        (Book.status == BookStatus.ISSUED.value, BookStatus.AVAILABLE.value),
                        else_=Book.status
                    )),
                    (Book.total_copies, new_total),
                    (Book.available_copies, Book.available_copies + delta),
                    (Book.updated_at, utcnow())
                )
                .execution_options(synchronize_session=False)
            )
            if result.rowcount == 0:
                self.session.rollback()
                raise Conflict(
                    f"Cannot reduce '{book.title}' to {new_total} copies while more copies are on loan"
                )

        self.session.commit()
        self.session.refresh(book)
        return book

    def delete_book(self, book_id: str) -> bool:
        """Delete a book that has no copies on loan.

        Returns:
            True if the book was deleted, False if not found

        Raises:
            Conflict: The book still has an open circulation record
        """
        book = self.get_by_id(book_id)
        if not book:
            return False

        open_loans = (
            self.session.query(func.count(Circulation.id))
            .filter(
                Circulation.book_id == book_id,
                Circulation.status == CirculationStatus.ISSUED.value,
                Circulation.return_date.is_(None)
            )
            .scalar()
        )
        if open_loans:
            raise Conflict(f"Cannot delete '{book.title}': {open_loans} copies are still issued")

        self.session.delete(book)
        self.session.commit()
        logger.info(f"Deleted book {book_id}")
        return True

    def claim_copy(self, book_id: str) -> bool:
        """Take one copy off the shelf if any is left. Does not commit.

        The capacity check and the decrement are one UPDATE, so two callers can
        never both see the last copy. Returns False when nothing was claimed.
        """
        # status before available_copies: MySQL evaluates SET left to right
        result = self.session.execute(
            update(Book)
            .where(Book.id == book_id, Book.available_copies > 0)
            .ordered_values(
                (Book.status, case(
                    (Book.available_copies <= 1, BookStatus.ISSUED.value),
                    else_=Book.status
                )),
                (Book.available_copies, Book.available_copies - 1),
                (Book.updated_at, utcnow())
            )
            .execution_options(synchronize_session=False)
        )
        return result.rowcount > 0

    def release_copy(self, book_id: str) -> bool:
        """Put one copy back on the shelf, never above total_copies. Does not commit.

        Returns False when the counter was already at total_copies.
        """
        result = self.session.execute(
            update(Book)
            .where(Book.id == book_id, Book.available_copies < Book.total_copies)
            .values(
                available_copies=Book.available_copies + 1,
                status=case(
                    (Book.status == BookStatus.ISSUED.value, BookStatus.AVAILABLE.value),
                    else_=Book.status
                ),
                updated_at=utcnow()
            )
            .execution_options(synchronize_session=False)
        )
        return result.rowcount > 0

    def get_status_counts(self) -> Dict[str, int]:
        rows = self.session.query(Book.status, func.count(Book.id)).group_by(Book.status).all()
        return {status: count for status, count in rows}

    def get_copy_totals(self) -> Dict[str, int]:
        total, available = self.session.query(
            func.coalesce(func.sum(Book.total_copies), 0),
            func.coalesce(func.sum(Book.available_copies), 0)
        ).one()
        return {"total_copies": int(total), "available_copies": int(available)}

    def _validate_fields(self, values: Dict[str, Any]) -> None:
        language = values.get("language")
        if language is not None and language not in {lang.value for lang in BookLanguage}:
            raise InvalidArgument(
                f"Invalid language '{language}'. Must be one of: {', '.join(lang.value for lang in BookLanguage)}"
            )
        price = values.get("price")
        if price is not None and price < 0:
            raise InvalidArgument("price cannot be negative")
        status = values.get("status")
        if status is not None and status not in {s.value for s in BookStatus}:
            raise InvalidArgument(f"Invalid book status '{status}'")
        category_id = values.get("category_id")
        if category_id and not self.session.query(Category.id).filter(Category.id == category_id).first():
            raise NotFound(f"Category '{category_id}' not found")
