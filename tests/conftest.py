# tests/conftest.py
import pytest
import os
import sys

# Add the src directory to the Python path so the tests run without an install
project_root = os.path.abspath(os.path.join(os.path.dirname(__file__), '..'))
src_path = os.path.join(project_root, 'src')
if src_path not in sys.path:
    sys.path.insert(0, src_path)

from sqlalchemy import func

from bookloan.db.session import Database
from bookloan.crud import crud_book
from bookloan.models.book import Book
from bookloan.models.borrowing import Borrowing, BorrowingStatus

# --- Test Database Setup ---
# A throwaway SQLite file per test: several connections (threads, the API)
# must see the same data, which an in-memory database cannot offer.
@pytest.fixture(scope="function")
def database(tmp_path):
    db = Database(f"sqlite:///{tmp_path / 'test_library.db'}")
    db.init(create_tables=True)
    yield db
    db.dispose()

@pytest.fixture(scope="function")
def db_engine(database):
    return database.engine

@pytest.fixture(scope="function")
def db_session_factory(database):
    """Returns the SQLAlchemy session factory bound to the test database."""
    return database.SessionLocal

@pytest.fixture(scope="function")
def db_session(db_session_factory):
    """Provides a session for one test; it is closed (and rolled back) afterwards."""
    session = db_session_factory()
    try:
        yield session
    finally:
        session.close()

@pytest.fixture
def make_book(db_session):
    """Factory that commits a book with every copy available."""
    def _make_book(title="Dune", author="Frank Herbert", category="SciFi", total_copies=2, isbn=None):
        book = Book(
            title=title,
            author=author,
            isbn=isbn,
            category=category,
            total_copies=total_copies,
            available_copies=total_copies,
        )
        db_session.add(book)
        db_session.commit()
        db_session.refresh(book)
        return book
    return _make_book

def assert_stock_consistent(db, book_id):
    """available_copies equals total_copies minus the active borrowings, within bounds."""
    total, available = crud_book.get_stock(db, book_id)
    active = db.query(func.count(Borrowing.id)).filter(
        Borrowing.book_id == book_id,
        Borrowing.status == BorrowingStatus.BORROWED.value,
    ).scalar()
    assert available == total - active
    assert 0 <= available <= total

@pytest.fixture
def stock_is_consistent():
    """Exposes assert_stock_consistent(db, book_id) to the tests."""
    return assert_stock_consistent
