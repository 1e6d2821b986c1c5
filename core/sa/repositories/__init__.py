from .book import BookRepository
from .member import MemberRepository
from .category import CategoryRepository
from .circulation import CirculationRepository
from .feedback import FeedbackRepository

__all__ = [
    'BookRepository',
    'MemberRepository',
    'CategoryRepository',
    'CirculationRepository',
    'FeedbackRepository'
]
