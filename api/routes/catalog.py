# api/routes/catalog.py

from typing import List, Optional
from fastapi import APIRouter, Depends, Query
from fastapi.responses import Response
from sqlalchemy.orm import Session

from core.sa.database import get_db
from core.services import CatalogService
from api.schemas.book import Book, BookList, Category

router = APIRouter(tags=["catalog"])

@router.get("/catalog", response_model=BookList)
def browse_catalog(
    query: Optional[str] = Query(None, description="Search title, author or ISBN"),
    category_id: Optional[str] = Query(None, description="Filter by category"),
    language: Optional[str] = Query(None, description="Filter by language"),
    page: int = Query(1, ge=1, description="Page number"),
    size: int = Query(20, ge=1, le=100, description="Items per page"),
    db: Session = Depends(get_db)
):
    """Public collection page, ordered by title"""
    result = CatalogService(db).search(
        query=query,
        category_id=category_id,
        language=language,
        page=page,
        size=size
    )
    return BookList(
        items=[Book.model_validate(book) for book in result.items],
        total=result.total,
        page=result.page,
        size=result.size
    )

@router.get("/catalog/export.csv")
def export_catalog(
    query: Optional[str] = Query(None, description="Only export matching books"),
    db: Session = Depends(get_db)
):
    service = CatalogService(db)
    content = service.export_csv(service.list_public_catalog(query))
    return Response(
        content=content,
        media_type="text/csv",
        headers={"Content-Disposition": 'attachment; filename="library_collection.csv"'}
    )

@router.get("/categories", response_model=List[Category], tags=["categories"])
def list_categories(db: Session = Depends(get_db)):
    return CatalogService(db).list_categories()
