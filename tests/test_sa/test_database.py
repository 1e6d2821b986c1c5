# tests/test_sa/test_database.py
from sqlalchemy import text
from core.sa.database import Database, get_database, set_database

def test_sqlite_database_enforces_foreign_keys(database):
    """Every SQLite connection is opened with foreign keys on"""
    session = database.get_session()
    try:
        assert session.execute(text("PRAGMA foreign_keys")).scalar() == 1
    finally:
        session.close()

def test_set_database_swaps_process_instance(database, tmp_path):
    assert get_database() is database

    other = Database(f"sqlite:///{tmp_path / 'other.db'}")
    set_database(other)
    try:
        assert get_database() is other
        assert get_database().is_sqlite
    finally:
        set_database(database)
        other.dispose()
