# core/sa/models/__init__.py
from .base import Base, TimestampMixin, CreatedAtMixin, utcnow, as_utc_naive, new_id
from .category import Category
from .book import Book, BookStatus, BookLanguage
from .member import Member, MemberStatus, MembershipType
from .circulation import Circulation, CirculationStatus
from .feedback import Feedback, FeedbackType, FeedbackStatus

__all__ = [
    'Base',
    'TimestampMixin',
    'CreatedAtMixin',
    'utcnow',
    'as_utc_naive',
    'new_id',
    'Category',
    'Book',
    'BookStatus',
    'BookLanguage',
    'Member',
    'MemberStatus',
    'MembershipType',
    'Circulation',
    'CirculationStatus',
    'Feedback',
    'FeedbackType',
    'FeedbackStatus'
]
