# tests/test_sa/test_repositories/test_member_repository.py
import pytest
from core.errors import Conflict, InvalidArgument, NotFound
from core.sa.models import MemberStatus
from core.sa.repositories import MemberRepository

@pytest.fixture
def member_repo(db_session):
    """Fixture to create a MemberRepository instance"""
    return MemberRepository(db_session)

def test_create_member(member_repo):
    member = member_repo.create_member(
        name=" Fathima Rasheed ",
        email="fathima@example.com",
        member_class="10A",
        register_number="R-1042",
        membership_type="student"
    )
    assert member.name == "Fathima Rasheed"
    assert member.status == MemberStatus.ACTIVE.value
    assert member.member_class == "10A"
    assert member.membership_date is not None

@pytest.mark.parametrize("kwargs", [
    {"name": "", "email": "x@example.com"},
    {"name": "Someone", "email": ""},
    {"name": "Someone", "email": "x@example.com", "membership_type": "gold"},
    {"name": "Someone", "email": "x@example.com", "status": "banned"},
])
def test_create_member_rejects_invalid_input(member_repo, kwargs):
    with pytest.raises(InvalidArgument):
        member_repo.create_member(**kwargs)

def test_search_members(member_repo, sample_member, second_member, inactive_member):
    assert [m.name for m in member_repo.search_members("anu")] == ["Anu Joseph"]
    assert [m.name for m in member_repo.search_members("example.com")] == ["Anu Joseph", "Rahul Menon", "Sara Thomas"]
    assert [m.name for m in member_repo.search_members("98470")] == ["Anu Joseph"]
    assert [m.name for m in member_repo.search_members(status="suspended")] == ["Sara Thomas"]
    assert member_repo.count_members(status="active") == 2

def test_update_member(member_repo, sample_member):
    updated = member_repo.update_member(sample_member.id, status="inactive", place="Thrissur")
    assert updated.status == "inactive"
    assert updated.place == "Thrissur"
    assert not updated.is_active

def test_update_member_validation(member_repo, sample_member):
    with pytest.raises(InvalidArgument):
        member_repo.update_member(sample_member.id, email=" ")
    with pytest.raises(InvalidArgument):
        member_repo.update_member(sample_member.id, nickname="Anu")
    with pytest.raises(NotFound):
        member_repo.update_member("missing", name="Nobody")

def test_delete_member(member_repo, second_member):
    assert member_repo.delete_member(second_member.id) is True
    assert member_repo.get_by_id(second_member.id) is None
    assert member_repo.delete_member(second_member.id) is False

def test_delete_member_with_open_loan_conflicts(member_repo, engine, sample_book, sample_member):
    engine.issue(sample_book.id, sample_member.id)
    with pytest.raises(Conflict):
        member_repo.delete_member(sample_member.id)

def test_count_by_status(member_repo, sample_member, second_member, inactive_member):
    assert member_repo.count_by_status() == {"active": 2, "suspended": 1}
