# tests/test_services/test_catalog.py
import csv
import io
import pytest
from core.sa.repositories import BookRepository
from core.services import CatalogService
from core.services.catalog import CSV_COLUMNS

@pytest.fixture
def catalog(db_session):
    return CatalogService(db_session)

@pytest.fixture
def collection(db_session, sample_category):
    repo = BookRepository(db_session)
    return [
        repo.create_book("Chemmeen", "Thakazhi Sivasankara Pillai", total_copies=2,
                         language="Malayalam", category_id=sample_category.id, isbn="9788126407864"),
        repo.create_book("Ignited Minds", "A. P. J. Abdul Kalam", language="English", publication_year=2002),
        repo.create_book("Malgudi Days", "R. K. Narayan", language="English", category_id=sample_category.id),
    ]

def test_search_pages(catalog, collection):
    page = catalog.search(size=2)
    assert [b.title for b in page.items] == ["Chemmeen", "Ignited Minds"]
    assert page.total == 3
    assert page.total_pages == 2

    second = catalog.search(page=2, size=2)
    assert [b.title for b in second.items] == ["Malgudi Days"]

def test_search_text_and_filters(catalog, collection, sample_category):
    assert [b.title for b in catalog.search(query="kalam").items] == ["Ignited Minds"]
    assert [b.title for b in catalog.search(query="9788126407864").items] == ["Chemmeen"]
    assert catalog.search(category_id=sample_category.id).total == 2
    assert catalog.search(language="English", sort="title", order="desc").items[0].title == "Malgudi Days"

def test_search_size_is_capped(catalog, collection):
    assert catalog.search(size=10_000).size == 100

def test_public_catalog_lists_everything(catalog, collection):
    assert [b.title for b in catalog.list_public_catalog()] == ["Chemmeen", "Ignited Minds", "Malgudi Days"]
    assert [c.name for c in catalog.list_categories()] == ["Fiction"]

def test_export_csv(catalog, collection):
    rows = list(csv.reader(io.StringIO(catalog.export_csv())))
    assert rows[0] == list(CSV_COLUMNS)
    assert len(rows) == 4

    by_title = {row[0]: dict(zip(CSV_COLUMNS, row)) for row in rows[1:]}
    assert by_title["Chemmeen"]["author"] == "Thakazhi Sivasankara Pillai"
    assert by_title["Ignited Minds"]["category"] == "Uncategorized"
    assert by_title["Malgudi Days"]["category"] == "Fiction"

def test_export_csv_of_selection(catalog, collection):
    text = catalog.export_csv(catalog.list_public_catalog("malgudi"))
    assert text.count("\n") == 2
    assert "Malgudi Days" in text
