# tests/models/test_book_model.py
import pytest
from sqlalchemy.exc import IntegrityError

from bookloan.models.book import Book

def test_create_book(db_session):
    """Test creating a valid Book instance."""
    book = Book(
        title="The Left Hand of Darkness",
        author="Ursula K. Le Guin",
        isbn="9780441478125",
        category="SciFi",
        total_copies=3,
        available_copies=3,
    )
    db_session.add(book)
    db_session.commit()

    retrieved_book = db_session.query(Book).filter(Book.isbn == "9780441478125").first()

    assert retrieved_book is not None
    assert retrieved_book.id is not None
    assert retrieved_book.title == "The Left Hand of Darkness"
    assert retrieved_book.category == "SciFi"
    assert retrieved_book.total_copies == 3
    assert retrieved_book.available_copies == 3
    assert retrieved_book.on_loan == 0

def test_create_book_no_title(db_session):
    """Test that creating a book without a title raises IntegrityError."""
    book = Book(author="Some Author", category="Misc", total_copies=1, available_copies=1)
    db_session.add(book)

    with pytest.raises(IntegrityError):
        db_session.commit()

def test_create_book_negative_total_copies(db_session):
    """total_copies has a CHECK constraint; available_copies deliberately does not."""
    book = Book(title="Broken", author="Nobody", category="Misc", total_copies=-1, available_copies=0)
    db_session.add(book)

    with pytest.raises(IntegrityError):
        db_session.commit()

def test_negative_available_copies_is_storable(db_session):
    book = Book(title="Shrunk", author="Somebody", category="Misc", total_copies=1, available_copies=-2)
    db_session.add(book)
    db_session.commit()
    db_session.refresh(book)

    assert book.available_copies == -2
    assert book.on_loan == 3

def test_isbn_is_not_unique(db_session):
    """Two records may share an ISBN."""
    db_session.add_all([
        Book(title="Copy A", author="A", isbn="1111111111111", category="Misc", total_copies=1, available_copies=1),
        Book(title="Copy B", author="B", isbn="1111111111111", category="Misc", total_copies=1, available_copies=1),
    ])
    db_session.commit()

    assert db_session.query(Book).filter(Book.isbn == "1111111111111").count() == 2

def test_book_repr(make_book):
    book = make_book(title="Representation Test Book Title That Is Quite Long", total_copies=4)

    expected_repr = f"<Book(id={book.id}, title='Representation Test Book Title', available=4/4)>"
    assert repr(book) == expected_repr
