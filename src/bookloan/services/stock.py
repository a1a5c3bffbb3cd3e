"""
Stock accounting: the operations that keep books.available_copies in lockstep
with the lifecycle of borrowings.

Each public operation runs as a single transaction on the injected Session:
it commits when everything applied and rolls back on any failure, then hands
the outcome back as a Result instead of raising. Every read-then-write step is
expressed as a conditional UPDATE/DELETE whose row count decides the outcome,
so two callers racing for the same book or borrowing cannot both win.
"""

import datetime
import functools
import logging
from typing import Any, Callable, List, Mapping, Optional, TypeVar

from pydantic import BaseModel, ValidationError as PydanticValidationError
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..core.errors import (
    AlreadyReturnedError,
    InvalidStateError,
    LibraryError,
    NotFoundError,
    Result,
    StorageError,
    UnavailableError,
    ValidationError,
)
from ..crud import crud_book, crud_borrowing
from ..db.session import Base
from ..models.book import Book
from ..models.borrowing import Borrowing
from ..schemas.book import BookCreate, BookSchema, BookUpdate
from ..schemas.borrowing import BorrowingCreate, BorrowingSchema, BorrowingWithBook

logger = logging.getLogger(__name__)

SchemaT = TypeVar("SchemaT", bound=BaseModel)

BOOK_DELETED = "Book deleted"
BORROWING_CANCELED = "Borrowing canceled"


def _atomic(operation: Callable[..., Any]) -> Callable[..., Result]:
    """
    Runs `operation(db, ...)` as one transaction and wraps its outcome in a Result.

    Domain errors roll back and become failed Results. Any SQLAlchemy error
    rolls back and becomes a StorageError; nothing is retried.

    Returned rows are loaded before the commit, and the commit is the last
    statement that can fail: once it succeeds the outcome is a success and
    the session holds no open transaction.
    """
    @functools.wraps(operation)
    def wrapper(db: Session, *args, **kwargs) -> Result:
        name = operation.__name__
        try:
            value = operation(db, *args, **kwargs)
            db.flush()
            if isinstance(value, Base):
                db.refresh(value)
            db.commit()
        except LibraryError as exc:
            db.rollback()
            logger.warning(f"{name} rejected ({exc.kind}): {exc.message}")
            return Result.failure(exc)
        except SQLAlchemyError as exc:
            db.rollback()
            logger.exception(f"Storage failure during {name}: {exc}")
            return Result.failure(StorageError(f"Storage failure during {name}"))
        return Result.success(value)

    return wrapper


def _validate(schema: type[SchemaT], data: Any, headline: str) -> SchemaT:
    """Validates raw input against a schema, translating pydantic errors."""
    try:
        return schema.model_validate(data)
    except PydanticValidationError as exc:
        first = exc.errors()[0]
        field = ".".join(str(part) for part in first.get("loc", ())) or "input"
        raise ValidationError(f"{headline} ({field}: {first['msg']})") from exc


def _require_id(value: Optional[int], entity: str) -> int:
    if value is None:
        raise ValidationError(f"{entity} id is required")
    return value


# --- Books -----------------------------------------------------------------

@_atomic
def list_books(db: Session) -> List[BookSchema]:
    """Every book ordered by title, read as one snapshot."""
    return [BookSchema.model_validate(book) for book in crud_book.get_books(db)]


@_atomic
def create_book(db: Session, data: Mapping[str, Any] | BookCreate) -> Book:
    """
    Adds a book to the catalog with every copy available.

    Failures: ValidationError when title, author or category is empty, or
    total_copies is missing or negative.
    """
    book_in = _validate(BookCreate, data, "Title, author, category, and copies are required")
    book = crud_book.create_book(db, book_in)
    logger.info(f"Book {book.id} '{book.title}' created with {book.total_copies} copies.")
    return book


@_atomic
def edit_book(db: Session, book_id: int, data: Mapping[str, Any] | BookUpdate) -> Book:
    """
    Replaces a book's fields while preserving how many copies are on loan.

    available_copies becomes new total_copies minus the on-loan count. When
    the new total is below the on-loan count the result is negative; that is
    accepted and logged as a warning rather than clamped or rejected.

    Failures: ValidationError, NotFoundError.
    """
    book_in = _validate(BookUpdate, data, "All fields are required")
    _require_id(book_id, "Book")
    crud_book.update_book(db, book_id, book_in)

    total, available = crud_book.get_stock(db, book_id)
    if available < 0:
        logger.warning(
            f"Book {book_id} total_copies set to {total}, below the {total - available} "
            f"copies on loan; available_copies is now {available}."
        )
    else:
        logger.info(f"Book {book_id} updated: {available}/{total} available.")
    return crud_book.get_book_by_id(db, book_id)


@_atomic
def delete_book(db: Session, book_id: int) -> str:
    """
    Removes a book no borrowing refers to.

    Failures: NotFoundError, ConflictError when any borrowing, whatever its
    status, still references the book.
    """
    _require_id(book_id, "Book")
    crud_book.delete_book(db, book_id)
    logger.info(f"Book {book_id} deleted.")
    return BOOK_DELETED


# --- Borrowings ------------------------------------------------------------

@_atomic
def list_borrowings(db: Session) -> List[BorrowingWithBook]:
    rows = crud_borrowing.get_borrowings(db)
    return [
        BorrowingWithBook(
            **BorrowingSchema.model_validate(row.Borrowing).model_dump(),
            book_title=row.book_title,
            book_author=row.book_author,
        )
        for row in rows
    ]


@_atomic
def borrow_book(db: Session, data: Mapping[str, Any] | BorrowingCreate) -> Borrowing:
    """
    Lends one copy of a book.

    The decrement only matches a row that still has a copy, so of two
    concurrent borrows of the last copy exactly one succeeds.

    Failures: ValidationError, NotFoundError, UnavailableError.
    """
    borrowing_in = _validate(BorrowingCreate, data, "Book and borrower name are required")

    if not crud_book.decrement_available_copies(db, borrowing_in.book_id):
        if crud_book.get_stock(db, borrowing_in.book_id) is None:
            raise NotFoundError("Book not found")
        raise UnavailableError("Book is not available")

    borrowing = crud_borrowing.create_borrowing(db, borrowing_in.book_id, borrowing_in.borrower_name)
    logger.info(f"Borrowing {borrowing.id}: book {borrowing.book_id} lent to '{borrowing.borrower_name}'.")
    return borrowing


@_atomic
def return_borrowing(db: Session, borrowing_id: int) -> Borrowing:
    """
    Marks a borrowing as returned and puts its copy back on the shelf.

    Only the caller whose status transition matched increments the stock, so
    a second return of the same borrowing fails and never adds a copy twice.

    Failures: NotFoundError, AlreadyReturnedError.
    """
    _require_id(borrowing_id, "Borrowing")
    if not crud_borrowing.mark_returned(db, borrowing_id, datetime.date.today()):
        if crud_borrowing.get_status(db, borrowing_id) is None:
            raise NotFoundError("Borrowing not found")
        raise AlreadyReturnedError("Book already returned")

    book_id = crud_borrowing.get_book_id(db, borrowing_id)
    crud_book.increment_available_copies(db, book_id)
    logger.info(f"Borrowing {borrowing_id} returned; book {book_id} restocked.")
    return crud_borrowing.get_borrowing_by_id(db, borrowing_id)


@_atomic
def cancel_borrowing(db: Session, borrowing_id: int) -> str:
    """
    Deletes a borrowing that is still active and restores its copy.

    Failures: NotFoundError, InvalidStateError when the borrowing was returned.
    """
    _require_id(borrowing_id, "Borrowing")
    book_id = crud_borrowing.get_book_id(db, borrowing_id)
    if book_id is None:
        raise NotFoundError("Borrowing not found")

    if not crud_borrowing.delete_active_borrowing(db, borrowing_id):
        if crud_borrowing.get_status(db, borrowing_id) is None:
            raise NotFoundError("Borrowing not found")
        raise InvalidStateError("Cannot delete returned borrowing")

    crud_book.increment_available_copies(db, book_id)
    logger.info(f"Borrowing {borrowing_id} canceled; book {book_id} restocked.")
    return BORROWING_CANCELED
