from .crud_book import (
    get_books,
    get_book_by_id,
    create_book,
    update_book,
    delete_book,
    count_borrowings_for_book,
    decrement_available_copies,
    increment_available_copies,
    get_stock,
)
from .crud_borrowing import (
    get_borrowings,
    get_borrowing_by_id,
    create_borrowing,
    mark_returned,
    delete_active_borrowing,
)

__all__ = [
    "get_books",
    "get_book_by_id",
    "create_book",
    "update_book",
    "delete_book",
    "count_borrowings_for_book",
    "decrement_available_copies",
    "increment_available_copies",
    "get_stock",
    "get_borrowings",
    "get_borrowing_by_id",
    "create_borrowing",
    "mark_returned",
    "delete_active_borrowing",
]
