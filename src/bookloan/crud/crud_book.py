"""
CRUD operations for the Book model (the book catalog store).

None of these functions commit: they flush their changes and leave the
transaction to the caller, so that the stock accounting service can combine
several of them into one atomic unit.
"""

import logging
from sqlalchemy.orm import Session
from sqlalchemy import select, update, delete, func
from sqlalchemy.exc import IntegrityError
from typing import List, Optional

from ..core.errors import NotFoundError, ConflictError
from ..models.book import Book
from ..models.borrowing import Borrowing
from ..schemas.book import BookCreate, BookUpdate

logger = logging.getLogger(__name__)

def get_books(db: Session) -> List[Book]:
    """
    Lists every book ordered by title.

    Args:
        db (Session): SQLAlchemy session.

    Returns:
        List[Book]: A fresh snapshot, sorted by title ascending.
    """
    stmt = select(Book).order_by(Book.title.asc(), Book.id.asc())
    result = db.execute(stmt)
    return list(result.scalars().all())

def get_book_by_id(db: Session, book_id: int) -> Optional[Book]:
    """
    Retrieves a book by its primary key.

    Args:
        db (Session): SQLAlchemy session.
        book_id (int): ID of the book.

    Returns:
        Optional[Book]: The Book if found, None otherwise.
    """
    return db.get(Book, book_id)

def create_book(db: Session, book: BookCreate) -> Book:
    """
    Inserts a new book with every copy available.

    Args:
        db (Session): SQLAlchemy session.
        book (BookCreate): Validated book data.

    Returns:
        Book: The pending Book, with its ID assigned.
    """
    db_book = Book(**book.model_dump(), available_copies=book.total_copies)
    db.add(db_book)
    db.flush()
    return db_book

def update_book(db: Session, book_id: int, book: BookUpdate) -> None:
    """
    Overwrites a book's fields while keeping its on-loan count.

    available_copies is recomputed inside the UPDATE from the row's current
    values, so a borrow committed between our read and our write is never lost.

    Args:
        db (Session): SQLAlchemy session.
        book_id (int): ID of the book to edit.
        book (BookUpdate): Validated book data.

    Raises:
        NotFoundError: If no book has that ID.
    """
    on_loan = Book.total_copies - Book.available_copies
    stmt = (
        update(Book)
        .where(Book.id == book_id)
        .values(
            title=book.title,
            author=book.author,
            isbn=book.isbn,
            category=book.category,
            total_copies=book.total_copies,
            available_copies=book.total_copies - on_loan,
        )
        .execution_options(synchronize_session=False)
    )
    result = db.execute(stmt)
    if result.rowcount != 1:
        raise NotFoundError("Book not found")

def count_borrowings_for_book(db: Session, book_id: int) -> int:
    """Counts borrowings of any status that reference the book."""
    stmt = select(func.count(Borrowing.id)).where(Borrowing.book_id == book_id)
    return db.execute(stmt).scalar_one()

def delete_book(db: Session, book_id: int) -> None:
    """
    Deletes a book that no borrowing references.

    Args:
        db (Session): SQLAlchemy session.
        book_id (int): ID of the book to delete.

    Raises:
        NotFoundError: If no book has that ID.
        ConflictError: If any borrowing, borrowed or returned, still references it.
    """
    if get_stock(db, book_id) is None:
        raise NotFoundError("Book not found")

    if count_borrowings_for_book(db, book_id) > 0:
        raise ConflictError("Cannot delete: book has borrowings")

    try:
        result = db.execute(
            delete(Book).where(Book.id == book_id).execution_options(synchronize_session=False)
        )
    except IntegrityError as exc:
        # A borrowing inserted after our count: the foreign key has the final word.
        logger.warning(f"Foreign key blocked deletion of book {book_id}: {exc.orig}")
        raise ConflictError("Cannot delete: book has borrowings") from exc

    if result.rowcount != 1:
        raise NotFoundError("Book not found")

def decrement_available_copies(db: Session, book_id: int) -> bool:
    """
    Takes one copy off the shelf if there is one.

    Returns:
        bool: True if exactly one row was updated, False if the book is
        missing or has no copies left.
    """
    stmt = (
        update(Book)
        .where(Book.id == book_id, Book.available_copies > 0)
        .values(available_copies=Book.available_copies - 1)
        .execution_options(synchronize_session=False)
    )
    return db.execute(stmt).rowcount == 1

def increment_available_copies(db: Session, book_id: int) -> bool:
    """Puts one copy back on the shelf. Returns False if the book is missing."""
    stmt = (
        update(Book)
        .where(Book.id == book_id)
        .values(available_copies=Book.available_copies + 1)
        .execution_options(synchronize_session=False)
    )
    return db.execute(stmt).rowcount == 1

def get_stock(db: Session, book_id: int) -> Optional[tuple]:
    """
    Reads (total_copies, available_copies) straight from the table, bypassing
    the session's identity map. None if the book does not exist.
    """
    stmt = select(Book.total_copies, Book.available_copies).where(Book.id == book_id)
    row = db.execute(stmt).first()
    return tuple(row) if row is not None else None
