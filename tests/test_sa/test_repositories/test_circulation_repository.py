# tests/test_sa/test_repositories/test_circulation_repository.py
import pytest
from datetime import datetime, timedelta
from core.sa.models import CirculationStatus
from core.sa.repositories import CirculationRepository

@pytest.fixture
def circulation_repo(db_session):
    """Fixture to create a CirculationRepository instance"""
    return CirculationRepository(db_session)

def add_record(repo, session, book_id, member_id, issued):
    record = repo.insert(book_id, member_id, issued, issued + timedelta(days=14))
    session.commit()
    return record

def test_insert_creates_open_record(circulation_repo, db_session, sample_book, sample_member):
    record = add_record(circulation_repo, db_session, sample_book.id, sample_member.id, datetime(2025, 1, 1))
    assert record.status == CirculationStatus.ISSUED.value
    assert record.return_date is None
    assert record.due_date == datetime(2025, 1, 15)
    assert circulation_repo.count_open_for_book(sample_book.id) == 1

def test_get_open_for_book_returns_most_recent(circulation_repo, db_session, sample_book, sample_member, second_member):
    add_record(circulation_repo, db_session, sample_book.id, sample_member.id, datetime(2025, 1, 1))
    later = add_record(circulation_repo, db_session, sample_book.id, second_member.id, datetime(2025, 1, 5))
    assert circulation_repo.get_open_for_book(sample_book.id).id == later.id

def test_close_only_once(circulation_repo, db_session, sample_book, sample_member):
    record = add_record(circulation_repo, db_session, sample_book.id, sample_member.id, datetime(2025, 1, 1))

    assert circulation_repo.close(record.id, datetime(2025, 1, 3)) is True
    assert circulation_repo.close(record.id, datetime(2025, 1, 4)) is False
    db_session.commit()

    stored = circulation_repo.get_by_id(record.id)
    assert stored.status == CirculationStatus.RETURNED.value
    assert stored.return_date == datetime(2025, 1, 3)
    assert circulation_repo.get_open_for_book(sample_book.id) is None

def test_list_records_ordering_and_filters(circulation_repo, db_session, sample_book, sample_member, second_member):
    first = add_record(circulation_repo, db_session, sample_book.id, sample_member.id, datetime(2025, 1, 1))
    second = add_record(circulation_repo, db_session, sample_book.id, second_member.id, datetime(2025, 1, 2))
    circulation_repo.close(first.id, datetime(2025, 1, 3))
    db_session.commit()

    assert [r.id for r in circulation_repo.list_records()] == [second.id, first.id]
    assert [r.id for r in circulation_repo.list_records(newest_first=False)] == [first.id, second.id]
    assert [r.id for r in circulation_repo.list_records(status="returned")] == [first.id]
    assert [r.id for r in circulation_repo.list_records(member_id=second_member.id)] == [second.id]
    assert circulation_repo.count_records() == 2
    assert circulation_repo.count_records(status="issued", book_id=sample_book.id) == 1
    assert [r.id for r in circulation_repo.list_open()] == [second.id]

def test_set_fine(circulation_repo, db_session, sample_book, sample_member):
    record = add_record(circulation_repo, db_session, sample_book.id, sample_member.id, datetime(2025, 1, 1))
    assert circulation_repo.set_fine(record.id, 25.0) is True
    assert circulation_repo.set_fine("missing", 25.0) is False
    db_session.commit()
    db_session.expire_all()
    assert circulation_repo.get_by_id(record.id).fine_amount == 25.0
