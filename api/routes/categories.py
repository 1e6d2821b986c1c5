# api/routes/categories.py

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from core.events import notifier
from core.sa.database import get_db
from core.sa.repositories import CategoryRepository
from api.deps import require_admin
from api.schemas.book import Category, CategoryCreate

router = APIRouter(prefix="/categories", tags=["categories"], dependencies=[Depends(require_admin)])

@router.post("", response_model=Category, status_code=status.HTTP_201_CREATED)
def add_category(category: CategoryCreate, db: Session = Depends(get_db)):
    created = CategoryRepository(db).add_category(category.name)
    notifier.publish("categories", "insert", created.id)
    return created

@router.delete("/{category_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_category(category_id: str, db: Session = Depends(get_db)):
    CategoryRepository(db).delete_category(category_id)
    notifier.publish("categories", "delete", category_id)
