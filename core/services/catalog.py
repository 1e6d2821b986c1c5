# core/services/catalog.py

import csv
import io
from dataclasses import dataclass
from typing import Iterable, List, Optional

from sqlalchemy.orm import Session

from core.config import settings
from core.sa.models import Book, Category
from core.sa.repositories import BookRepository, CategoryRepository

CSV_COLUMNS = [
    "title", "author", "isbn", "category", "language", "publisher",
    "ddc_number", "publication_year", "total_copies", "available_copies", "status",
]


@dataclass
class CatalogPage:
    items: List[Book]
    total: int
    page: int
    size: int

    @property
    def total_pages(self) -> int:
        return (self.total + self.size - 1) // self.size if self.size else 0


class CatalogService:
    """Book listings for the public collection page and the admin library tab."""

    def __init__(self, session: Session):
        self.session = session
        self.books = BookRepository(session)
        self.categories = CategoryRepository(session)

    def search(
        self,
        query: Optional[str] = None,
        category_id: Optional[str] = None,
        language: Optional[str] = None,
        status: Optional[str] = None,
        available_only: bool = False,
        sort: str = "title",
        order: str = "asc",
        page: int = 1,
        size: Optional[int] = None
    ) -> CatalogPage:
        """One page of books matching title/author/ISBN text and filters"""
        size = min(size or settings.default_page_size, settings.max_page_size)
        page = max(page, 1)
        filters = dict(
            query=query,
            category_id=category_id,
            language=language,
            status=status,
            available_only=available_only
        )
        items = self.books.search_books(
            sort_field=sort,
            sort_order=order,
            limit=size,
            offset=(page - 1) * size,
            **filters
        )
        return CatalogPage(items=items, total=self.books.count_books(**filters), page=page, size=size)

    def list_public_catalog(self, query: Optional[str] = None) -> List[Book]:
        """Whole collection ordered by title, categories loaded"""
        return self.books.search_books(query=query, limit=None)

    def list_categories(self) -> List[Category]:
        return self.categories.list_categories()

    def export_csv(self, books: Optional[Iterable[Book]] = None) -> str:
        """Render books (default: the whole collection) as CSV text"""
        if books is None:
            books = self.list_public_catalog()
        buffer = io.StringIO()
        writer = csv.writer(buffer)
        writer.writerow(CSV_COLUMNS)
        for book in books:
            writer.writerow([
                book.title,
                book.author,
                book.isbn or "",
                book.category_name or "Uncategorized",
                book.language or "",
                book.publisher or "",
                book.ddc_number or "",
                book.publication_year or "",
                book.total_copies,
                book.available_copies,
                book.status,
            ])
        return buffer.getvalue()
