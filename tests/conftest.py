# tests/conftest.py
import sys
import pytest
from pathlib import Path
from datetime import datetime, timedelta

# Add project root to Python path
project_root = str(Path(__file__).parent.parent)
if project_root not in sys.path:
    sys.path.insert(0, project_root)

from core.events import ChangeNotifier
from core.sa.database import Database, set_database
from core.sa.models import Book, Category, Member, MemberStatus
from core.services import CirculationEngine


class Clock:
    """Deterministic clock for services. Every reading moves time forward by step."""

    def __init__(self, start: datetime, step: timedelta = timedelta(seconds=1)):
        self.now = start
        self.step = step

    def __call__(self) -> datetime:
        current = self.now
        self.now = self.now + self.step
        return current

    def advance(self, **kwargs) -> None:
        self.now = self.now + timedelta(**kwargs)


@pytest.fixture
def database(tmp_path):
    """Fresh SQLite file database per test, installed as the process-wide database"""
    db = Database(f"sqlite:///{tmp_path / 'library.db'}")
    db.init_db()
    set_database(db)
    yield db
    set_database(None)
    db.dispose()

@pytest.fixture
def db_session(database):
    """Create a new database session for a test"""
    session = database.get_session()
    try:
        yield session
    finally:
        session.close()

@pytest.fixture
def clock():
    return Clock(datetime(2025, 3, 1, 9, 0, 0))

@pytest.fixture
def change_notifier():
    return ChangeNotifier()

@pytest.fixture
def engine(db_session, clock, change_notifier):
    """CirculationEngine on the test session with a fixed clock"""
    return CirculationEngine(db_session, notifier=change_notifier, clock=clock)

@pytest.fixture
def sample_category(db_session):
    """Create a sample category for testing."""
    category = Category(name="Fiction")
    db_session.add(category)
    db_session.commit()
    return category

@pytest.fixture
def sample_book(db_session, sample_category):
    """Create a sample book with three copies."""
    book = Book(
        title="The Old Man and the Sea",
        author="Ernest Hemingway",
        isbn="9780684801223",
        publisher="Scribner",
        ddc_number="813.52",
        publication_year=1952,
        price=350.0,
        language="English",
        category_id=sample_category.id,
        total_copies=3,
        available_copies=3
    )
    db_session.add(book)
    db_session.commit()
    return book

@pytest.fixture
def single_copy_book(db_session):
    """Create a book with only one copy."""
    book = Book(title="Khasakkinte Itihasam", author="O. V. Vijayan", language="Malayalam",
                total_copies=1, available_copies=1)
    db_session.add(book)
    db_session.commit()
    return book

@pytest.fixture
def sample_member(db_session):
    """Create an active member for testing."""
    member = Member(
        name="Anu Joseph",
        email="anu@example.com",
        phone="9847000001",
        place="Kochi",
        member_class="9B",
        membership_type="student"
    )
    db_session.add(member)
    db_session.commit()
    return member

@pytest.fixture
def second_member(db_session):
    member = Member(name="Rahul Menon", email="rahul@example.com")
    db_session.add(member)
    db_session.commit()
    return member

@pytest.fixture
def inactive_member(db_session):
    member = Member(name="Sara Thomas", email="sara@example.com", status=MemberStatus.SUSPENDED.value)
    db_session.add(member)
    db_session.commit()
    return member
