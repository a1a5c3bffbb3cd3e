# tests/models/test_borrowing_model.py
import pytest
from sqlalchemy.exc import IntegrityError

from bookloan.models.book import Book
from bookloan.models.borrowing import Borrowing, BorrowingStatus

@pytest.fixture
def test_book(make_book):
    return make_book(title="Borrowing Model Book", total_copies=2)

def test_create_borrowing_defaults(db_session, test_book):
    borrowing = Borrowing(book_id=test_book.id, borrower_name="Alice")
    db_session.add(borrowing)
    db_session.commit()
    db_session.refresh(borrowing)

    assert borrowing.id is not None
    assert borrowing.status == BorrowingStatus.BORROWED.value
    assert borrowing.is_active is True
    assert borrowing.created_at is not None
    assert borrowing.return_date is None

    # Relationship access in both directions
    assert borrowing.book == test_book
    assert borrowing in test_book.borrowings

def test_borrowing_invalid_status(db_session, test_book):
    borrowing = Borrowing(book_id=test_book.id, borrower_name="Alice", status="lost")
    db_session.add(borrowing)

    with pytest.raises(IntegrityError):
        db_session.commit()

def test_borrowing_requires_borrower_name(db_session, test_book):
    db_session.add(Borrowing(book_id=test_book.id))

    with pytest.raises(IntegrityError):
        db_session.commit()

def test_borrowing_unknown_book(db_session):
    """Foreign keys are enforced on SQLite connections too."""
    db_session.add(Borrowing(book_id=99999, borrower_name="Ghost"))

    with pytest.raises(IntegrityError):
        db_session.commit()

def test_referenced_book_cannot_be_deleted(db_session, test_book):
    db_session.add(Borrowing(book_id=test_book.id, borrower_name="Alice", status=BorrowingStatus.RETURNED.value))
    db_session.commit()

    db_session.delete(test_book)
    with pytest.raises(IntegrityError):
        db_session.commit()
    db_session.rollback()

    assert db_session.get(Book, test_book.id) is not None

def test_borrowing_repr(db_session, test_book):
    borrowing = Borrowing(book_id=test_book.id, borrower_name="Bob")
    db_session.add(borrowing)
    db_session.commit()
    db_session.refresh(borrowing)

    assert repr(borrowing) == f"<Borrowing(id={borrowing.id}, book_id={test_book.id}, borrower='Bob', status=borrowed)>"
