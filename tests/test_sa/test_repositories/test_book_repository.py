# tests/test_sa/test_repositories/test_book_repository.py
import pytest
from sqlalchemy import event
from core.errors import Conflict, InvalidArgument, NotFound
from core.sa.models import Book, BookStatus
from core.sa.repositories import BookRepository

@pytest.fixture
def book_repo(db_session):
    """Fixture to create a BookRepository instance"""
    return BookRepository(db_session)

@pytest.fixture
def shelf(book_repo, sample_category):
    """A handful of books to search through"""
    return [
        book_repo.create_book("Pathummayude Aadu", "Vaikom Muhammad Basheer", total_copies=2,
                              isbn="9788171300013", language="Malayalam", category_id=sample_category.id),
        book_repo.create_book("Balyakalasakhi", "Vaikom Muhammad Basheer", isbn="9788171300020",
                              language="Malayalam"),
        book_repo.create_book("Wings of Fire", "A. P. J. Abdul Kalam", total_copies=4,
                              isbn="9788173711466", language="English", publication_year=1999),
    ]

def test_create_book(book_repo, sample_category):
    """Test creating a book puts every copy on the shelf"""
    book = book_repo.create_book(
        title="  Chemmeen ",
        author="Thakazhi Sivasankara Pillai",
        total_copies=3,
        category_id=sample_category.id
    )
    assert book.title == "Chemmeen"
    assert book.total_copies == 3
    assert book.available_copies == 3
    assert book.status == BookStatus.AVAILABLE.value
    assert book.category_name == "Fiction"

@pytest.mark.parametrize("kwargs", [
    {"title": "", "author": "Someone"},
    {"title": "Something", "author": "  "},
    {"title": "Something", "author": "Someone", "total_copies": 0},
    {"title": "Something", "author": "Someone", "language": "Klingon"},
    {"title": "Something", "author": "Someone", "price": -5},
])
def test_create_book_rejects_invalid_input(book_repo, db_session, kwargs):
    with pytest.raises(InvalidArgument):
        book_repo.create_book(**kwargs)
    assert db_session.query(Book).count() == 0

def test_create_book_unknown_category(book_repo):
    with pytest.raises(NotFound):
        book_repo.create_book("Something", "Someone", category_id="missing")

def test_get_by_id_and_require(book_repo, sample_book):
    assert book_repo.get_by_id(sample_book.id).title == sample_book.title
    assert book_repo.get_by_id("nonexistent") is None
    with pytest.raises(NotFound):
        book_repo.require("nonexistent")

def test_get_by_ids_skips_unknown(book_repo, sample_book):
    found = book_repo.get_by_ids([sample_book.id, "missing"])
    assert list(found) == [sample_book.id]
    assert book_repo.get_by_ids([]) == {}

def test_search_books_matches_title_author_and_isbn(book_repo, shelf):
    assert [b.title for b in book_repo.search_books("wings")] == ["Wings of Fire"]
    assert [b.title for b in book_repo.search_books("basheer")] == ["Balyakalasakhi", "Pathummayude Aadu"]
    assert [b.title for b in book_repo.search_books("9788173711466")] == ["Wings of Fire"]
    assert book_repo.search_books("no such book") == []

def test_search_books_filters(book_repo, shelf, sample_category):
    assert [b.title for b in book_repo.search_books(category_id=sample_category.id)] == ["Pathummayude Aadu"]
    assert len(book_repo.search_books(language="Malayalam")) == 2
    assert book_repo.count_books(language="English") == 1
    assert book_repo.count_books() == 3

def test_search_books_sorting_and_paging(book_repo, shelf):
    by_copies = book_repo.search_books(sort_field="available_copies", sort_order="desc")
    assert [b.available_copies for b in by_copies] == [4, 2, 1]

    first_page = book_repo.search_books(limit=2, offset=0)
    second_page = book_repo.search_books(limit=2, offset=2)
    assert len(first_page) == 2
    assert len(second_page) == 1
    assert {b.id for b in first_page}.isdisjoint({b.id for b in second_page})

def test_search_books_rejects_unknown_sort(book_repo):
    with pytest.raises(InvalidArgument):
        book_repo.search_books(sort_field="price")
    with pytest.raises(InvalidArgument):
        book_repo.search_books(sort_order="sideways")

def test_update_book_fields(book_repo, sample_book):
    updated = book_repo.update_book(sample_book.id, title="The Old Man & the Sea", price=400.0)
    assert updated.title == "The Old Man & the Sea"
    assert updated.price == 400.0

def test_update_book_rejects_available_copies(book_repo, sample_book):
    with pytest.raises(InvalidArgument):
        book_repo.update_book(sample_book.id, available_copies=1)

def test_update_book_rejects_unknown_fields(book_repo, sample_book):
    with pytest.raises(InvalidArgument):
        book_repo.update_book(sample_book.id, goodreads_id="123")

def test_update_total_copies_keeps_copies_on_loan(book_repo, sample_book, db_session):
    """Raising or lowering capacity moves available_copies by the same amount"""
    assert book_repo.claim_copy(sample_book.id)
    db_session.commit()

    book = book_repo.update_book(sample_book.id, total_copies=5)
    assert (book.total_copies, book.available_copies) == (5, 4)

    book = book_repo.update_book(sample_book.id, total_copies=1)
    assert (book.total_copies, book.available_copies) == (1, 0)

def test_raising_total_on_fully_lent_book_makes_it_available(book_repo, single_copy_book, db_session):
    assert book_repo.claim_copy(single_copy_book.id)
    db_session.commit()

    book = book_repo.update_book(single_copy_book.id, total_copies=2)
    assert (book.available_copies, book.total_copies) == (1, 2)
    assert book.status == BookStatus.AVAILABLE.value

def test_cutting_total_to_copies_on_loan_marks_book_issued(book_repo, sample_book, db_session):
    assert book_repo.claim_copy(sample_book.id)
    db_session.commit()

    book = book_repo.update_book(sample_book.id, total_copies=1)
    assert (book.available_copies, book.total_copies) == (0, 1)
    assert book.status == BookStatus.ISSUED.value

def test_update_total_copies_leaves_maintenance_status(book_repo, sample_book, db_session):
    book_repo.update_book(sample_book.id, status=BookStatus.MAINTENANCE.value)
    book = book_repo.update_book(sample_book.id, total_copies=4)
    assert book.status == BookStatus.MAINTENANCE.value

def test_update_total_copies_below_loans_conflicts(book_repo, sample_book, db_session):
    assert book_repo.claim_copy(sample_book.id)
    assert book_repo.claim_copy(sample_book.id)
    db_session.commit()

    with pytest.raises(Conflict):
        book_repo.update_book(sample_book.id, total_copies=1)

    db_session.expire_all()
    book = book_repo.get_by_id(sample_book.id)
    assert (book.total_copies, book.available_copies) == (3, 1)

def test_update_total_copies_must_be_positive(book_repo, sample_book):
    with pytest.raises(InvalidArgument):
        book_repo.update_book(sample_book.id, total_copies=0, title="Changed")
    assert book_repo.get_by_id(sample_book.id).title == "The Old Man and the Sea"

def test_claim_copy_stops_at_zero(book_repo, single_copy_book, db_session):
    assert book_repo.claim_copy(single_copy_book.id) is True
    assert book_repo.claim_copy(single_copy_book.id) is False
    db_session.commit()

    db_session.expire_all()
    book = book_repo.get_by_id(single_copy_book.id)
    assert book.available_copies == 0
    assert book.status == BookStatus.ISSUED.value

def test_claim_copy_sets_status_before_counter(book_repo, single_copy_book, database):
    """The status CASE must read the counter before it is decremented"""
    statements = []

    def capture(conn, cursor, statement, parameters, context, executemany):
        if statement.startswith("UPDATE books"):
            statements.append(statement)

    event.listen(database.engine, "before_cursor_execute", capture)
    try:
        assert book_repo.claim_copy(single_copy_book.id)
    finally:
        event.remove(database.engine, "before_cursor_execute", capture)

    assert len(statements) == 1
    assert statements[0].index("status=") < statements[0].index("available_copies=")

def test_release_copy_is_capped(book_repo, single_copy_book, db_session):
    assert book_repo.release_copy(single_copy_book.id) is False

    book_repo.claim_copy(single_copy_book.id)
    assert book_repo.release_copy(single_copy_book.id) is True
    db_session.commit()

    db_session.expire_all()
    book = book_repo.get_by_id(single_copy_book.id)
    assert book.available_copies == 1
    assert book.status == BookStatus.AVAILABLE.value

def test_delete_book(book_repo, single_copy_book):
    assert book_repo.delete_book(single_copy_book.id) is True
    assert book_repo.get_by_id(single_copy_book.id) is None
    assert book_repo.delete_book(single_copy_book.id) is False

def test_delete_book_with_open_loan_conflicts(book_repo, engine, single_copy_book, sample_member):
    engine.issue(single_copy_book.id, sample_member.id)
    with pytest.raises(Conflict):
        book_repo.delete_book(single_copy_book.id)

def test_copy_totals_and_status_counts(book_repo, shelf, db_session):
    assert book_repo.get_copy_totals() == {"total_copies": 7, "available_copies": 7}
    book_repo.claim_copy(shelf[1].id)
    db_session.commit()
    assert book_repo.get_copy_totals() == {"total_copies": 7, "available_copies": 6}
    assert book_repo.get_status_counts() == {"available": 2, "issued": 1}
