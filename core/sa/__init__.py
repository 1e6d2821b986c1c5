# core/sa/__init__.py
from .database import Database, get_database, set_database
from .models import (
    Base, Book, Member, Category, Circulation, Feedback
)

__all__ = [
    'Database',
    'get_database',
    'set_database',
    'Base',
    'Book',
    'Member',
    'Category',
    'Circulation',
    'Feedback'
]
