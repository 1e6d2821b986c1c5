# core/sa/repositories/category.py

from typing import List, Optional
from sqlalchemy import func
from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError
import logging

from core.errors import NotFound, Conflict, InvalidArgument
from core.sa.models import Category, Book

logger = logging.getLogger(__name__)

class CategoryRepository:
    """Repository for managing Category entities.

    Categories are only created and removed through add_category and
    delete_category, which guard name uniqueness and references from books.
    """

    def __init__(self, session: Session):
        """Initialize the repository with a database session.
        
        Args:
            session: SQLAlchemy session for database operations
        """
        self.session = session

    def get_by_id(self, category_id: str) -> Optional[Category]:
        return self.session.query(Category).filter(Category.id == category_id).first()

    def get_by_name(self, name: str) -> Optional[Category]:
        """Get a category by name, ignoring case.
        
        Args:
            name: The name of the category to retrieve
            
        Returns:
            The Category object if found, None otherwise
        """
        return (
            self.session.query(Category)
            .filter(func.lower(Category.name) == name.strip().lower())
            .first()
        )

    def list_categories(self) -> List[Category]:
        """All categories ordered by name"""
        return self.session.query(Category).order_by(Category.name).all()

    def count_books(self, category_id: str) -> int:
        return (
            self.session.query(func.count(Book.id))
            .filter(Book.category_id == category_id)
            .scalar()
        )

    def add_category(self, name: str) -> Category:
        """Create a category.
        
        Args:
            name: Category name, surrounding whitespace is dropped
            
        Returns:
            The created Category object
            
        Raises:
            InvalidArgument: If the name is empty
            Conflict: If a category with the same name (any case) exists
        """
        cleaned = (name or "").strip()
        if not cleaned:
            raise InvalidArgument("Category name cannot be empty")
        if self.get_by_name(cleaned):
            raise Conflict(f"Category '{cleaned}' already exists")

        category = Category(name=cleaned)
        self.session.add(category)
        try:
            self.session.commit()
        except IntegrityError:
            self.session.rollback()
            raise Conflict(f"Category '{cleaned}' already exists")
        logger.info(f"Added category '{cleaned}' ({category.id})")
        return category

    def delete_category(self, category_id: str) -> None:
        """Delete a category no book refers to.
        
        Raises:
            NotFound: If the category does not exist
            Conflict: If any book is still filed under it
        """
        category = self.get_by_id(category_id)
        if category is None:
            raise NotFound(f"Category '{category_id}' not found")

        in_use = self.count_books(category_id)
        if in_use:
            logger.warning(f"Refusing to delete category '{category.name}': used by {in_use} books")
            raise Conflict(f"Category '{category.name}' is used by {in_use} books")

        self.session.delete(category)
        try:
            self.session.commit()
        except IntegrityError:
            # A book was filed under it between the check and the delete
            self.session.rollback()
            raise Conflict(f"Category '{category.name}' is in use")
        logger.info(f"Deleted category '{category.name}' ({category_id})")
