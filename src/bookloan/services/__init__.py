from .stock import (
    list_books,
    create_book,
    edit_book,
    delete_book,
    list_borrowings,
    borrow_book,
    return_borrowing,
    cancel_borrowing,
)

__all__ = [
    "list_books",
    "create_book",
    "edit_book",
    "delete_book",
    "list_borrowings",
    "borrow_book",
    "return_borrowing",
    "cancel_borrowing",
]
