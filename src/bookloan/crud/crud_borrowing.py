from sqlalchemy.orm import Session
from sqlalchemy import desc, select, update, delete
import datetime
import logging

from ..models.borrowing import Borrowing, BorrowingStatus
from ..models.book import Book

logger = logging.getLogger(__name__)


def get_borrowings(db: Session) -> list:
    """
    Lists every borrowing, newest first, with the title and author of its book.
    Returns a list of Rows shaped (Borrowing, book_title, book_author).
    """
    stmt = (
        select(Borrowing, Book.title.label("book_title"), Book.author.label("book_author"))
        .join(Book, Borrowing.book_id == Book.id)
        .order_by(desc(Borrowing.created_at), desc(Borrowing.id))
    )
    return list(db.execute(stmt).all())


def get_borrowing_by_id(db: Session, borrowing_id: int) -> Borrowing | None:
    return db.get(Borrowing, borrowing_id)


def get_status(db: Session, borrowing_id: int) -> str | None:
    """Reads the status column directly from the table. None if the row is gone."""
    stmt = select(Borrowing.status).where(Borrowing.id == borrowing_id)
    return db.execute(stmt).scalar_one_or_none()


def get_book_id(db: Session, borrowing_id: int) -> int | None:
    stmt = select(Borrowing.book_id).where(Borrowing.id == borrowing_id)
    return db.execute(stmt).scalar_one_or_none()


def create_borrowing(db: Session, book_id: int, borrower_name: str) -> Borrowing:
    db_borrowing = Borrowing(
        book_id=book_id,
        borrower_name=borrower_name,
        status=BorrowingStatus.BORROWED.value,
    )
    db.add(db_borrowing)
    db.flush()  # assigns the ID; the caller commits
    return db_borrowing


def mark_returned(db: Session, borrowing_id: int, return_date: datetime.date) -> bool:
    """
    Moves a borrowing from 'borrowed' to 'returned'.
    Returns True only for the caller whose update matched the borrowed row.
    """
    stmt = (
        update(Borrowing)
        .where(Borrowing.id == borrowing_id, Borrowing.status == BorrowingStatus.BORROWED.value)
        .values(status=BorrowingStatus.RETURNED.value, return_date=return_date)
        .execution_options(synchronize_session=False)
    )
    return db.execute(stmt).rowcount == 1


def delete_active_borrowing(db: Session, borrowing_id: int) -> bool:
    """
    Deletes a borrowing that is still 'borrowed'.
    Returned borrowings are history and are never matched.
    """
    stmt = (
        delete(Borrowing)
        .where(Borrowing.id == borrowing_id, Borrowing.status == BorrowingStatus.BORROWED.value)
        .execution_options(synchronize_session=False)
    )
    return db.execute(stmt).rowcount == 1
