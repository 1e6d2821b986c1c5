# api/routes/books.py

from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from core.events import notifier
from core.sa.database import get_db
from core.sa.repositories import BookRepository
from core.services import CatalogService
from api.deps import require_admin
from api.schemas.book import Book, BookCreate, BookList, BookUpdate

router = APIRouter(prefix="/books", tags=["books"], dependencies=[Depends(require_admin)])

@router.get("", response_model=BookList)
def get_books(
    query: Optional[str] = Query(None, description="Search books by title, author or ISBN"),
    category_id: Optional[str] = Query(None, description="Filter by category"),
    language: Optional[str] = Query(None, description="Filter by language"),
    book_status: Optional[str] = Query(None, alias="status", description="Filter by status"),
    available_only: bool = Query(False, description="Only books with a copy on the shelf"),
    sort: str = Query("title", description="Sort field (title, author, created_at, publication_year, available_copies)"),
    order: str = Query("asc", description="Sort order (asc or desc)"),
    page: int = Query(1, ge=1, description="Page number"),
    size: int = Query(20, ge=1, le=100, description="Items per page"),
    db: Session = Depends(get_db)
):
    """
    Get a paginated list of books for the admin library tab.
    
    Returns:
        BookList containing the requested page and the total match count
    """
    result = CatalogService(db).search(
        query=query,
        category_id=category_id,
        language=language,
        status=book_status,
        available_only=available_only,
        sort=sort,
        order=order,
        page=page,
        size=size
    )
    return BookList(
        items=[Book.model_validate(book) for book in result.items],
        total=result.total,
        page=result.page,
        size=result.size
    )

@router.post("", response_model=Book, status_code=status.HTTP_201_CREATED)
def create_book(book: BookCreate, db: Session = Depends(get_db)):
    db_book = BookRepository(db).create_book(**book.model_dump())
    notifier.publish("books", "insert", db_book.id)
    return db_book

@router.get("/{book_id}", response_model=Book)
def get_book(book_id: str, db: Session = Depends(get_db)):
    db_book = BookRepository(db).get_by_id(book_id)
    if db_book is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Book not found")
    return db_book

@router.put("/{book_id}", response_model=Book)
def update_book(book_id: str, book: BookUpdate, db: Session = Depends(get_db)):
    db_book = BookRepository(db).update_book(book_id, **book.model_dump(exclude_unset=True))
    notifier.publish("books", "update", book_id)
    return db_book

@router.delete("/{book_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_book(book_id: str, db: Session = Depends(get_db)):
    if not BookRepository(db).delete_book(book_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Book not found")
    notifier.publish("books", "delete", book_id)
