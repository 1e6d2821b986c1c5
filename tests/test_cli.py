# tests/test_cli.py
import pytest
from click.testing import CliRunner
from cli.main import cli
from core.sa.models import Book, Circulation, Member
from core.sa.repositories import CategoryRepository
from core.services import CirculationEngine

@pytest.fixture
def runner(database):
    return CliRunner()

def test_init_db(runner):
    result = runner.invoke(cli, ["init-db"])
    assert result.exit_code == 0
    assert "Database initialized" in result.output

def test_book_add_and_list(runner, db_session, sample_category):
    result = runner.invoke(cli, [
        "book", "add", "Randamoozham", "M. T. Vasudevan Nair",
        "--copies", "2", "--language", "Malayalam", "--category", "fiction"
    ])
    assert result.exit_code == 0, result.output
    assert "Successfully added book" in result.output

    book = db_session.query(Book).filter(Book.title == "Randamoozham").one()
    assert book.total_copies == 2
    assert book.category_id == sample_category.id

    result = runner.invoke(cli, ["book", "list", "--query", "vasudevan"])
    assert result.exit_code == 0
    assert "Randamoozham" in result.output
    assert "2/2" in result.output

def test_book_add_unknown_category(runner):
    result = runner.invoke(cli, ["book", "add", "Title", "Author", "--category", "Nope"])
    assert result.exit_code == 1
    assert "Category 'Nope' not found" in result.output

def test_book_list_empty(runner):
    result = runner.invoke(cli, ["book", "list"])
    assert result.exit_code == 0
    assert "No books found" in result.output

def test_book_delete(runner, db_session, single_copy_book):
    book_id = single_copy_book.id
    result = runner.invoke(cli, ["book", "delete", book_id])
    assert result.exit_code == 0
    db_session.expire_all()
    assert db_session.query(Book).filter(Book.id == book_id).first() is None

    result = runner.invoke(cli, ["book", "delete", book_id])
    assert result.exit_code == 1
    assert "not found" in result.output

def test_book_export(runner, sample_book, tmp_path):
    result = runner.invoke(cli, ["book", "export"])
    assert result.exit_code == 0
    assert result.stdout.startswith("title,author,isbn,category")
    assert "The Old Man and the Sea" in result.output

    target = tmp_path / "collection.csv"
    result = runner.invoke(cli, ["book", "export", "--output", str(target)])
    assert result.exit_code == 0
    assert "Fiction" in target.read_text(encoding="utf-8")

def test_member_add_and_list(runner, db_session):
    result = runner.invoke(cli, [
        "member", "add", "Fathima Rasheed", "fathima@example.com", "--type", "student", "--class", "10A"
    ])
    assert result.exit_code == 0, result.output
    member = db_session.query(Member).one()
    assert member.member_class == "10A"

    result = runner.invoke(cli, ["member", "list"])
    assert "Fathima Rasheed" in result.output

def test_category_commands(runner, db_session):
    result = runner.invoke(cli, ["category", "add", "Poetry"])
    assert result.exit_code == 0
    category = CategoryRepository(db_session).get_by_name("Poetry")
    assert category is not None

    result = runner.invoke(cli, ["category", "add", "poetry"])
    assert result.exit_code == 1
    assert "already exists" in result.output

    result = runner.invoke(cli, ["category", "list"])
    assert "Poetry" in result.output

    result = runner.invoke(cli, ["category", "delete", category.id])
    assert result.exit_code == 0
    db_session.expire_all()
    assert CategoryRepository(db_session).get_by_name("Poetry") is None

def test_circulation_commands(runner, db_session, single_copy_book, sample_member):
    book_id = single_copy_book.id
    member_id = sample_member.id

    result = runner.invoke(cli, ["circulation", "issue", book_id, member_id, "--days", "7"])
    assert result.exit_code == 0, result.output
    assert "Book issued" in result.output

    result = runner.invoke(cli, ["circulation", "issue", book_id, member_id])
    assert result.exit_code == 1
    assert "No copies" in result.output

    result = runner.invoke(cli, ["circulation", "list"])
    assert book_id in result.output
    assert "issued" in result.output

    result = runner.invoke(cli, ["circulation", "overdue"])
    assert "Nothing is overdue" in result.output

    result = runner.invoke(cli, ["circulation", "return", book_id])
    assert result.exit_code == 0
    assert "Book returned" in result.output
    assert db_session.query(Circulation).one().return_date is not None

    result = runner.invoke(cli, ["circulation", "return", book_id])
    assert result.exit_code == 1

def test_report_show(runner, db_session, sample_book, sample_member):
    CirculationEngine(db_session).issue(sample_book.id, sample_member.id)

    result = runner.invoke(cli, ["report", "show"])
    assert result.exit_code == 0, result.output
    assert "Most borrowed books" in result.output
    assert "The Old Man and the Sea" in result.output
    assert "Anu Joseph" in result.output
    assert "Overdue (0)" in result.output
