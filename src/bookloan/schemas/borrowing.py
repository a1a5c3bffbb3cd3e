"""
Pydantic schemas for the Borrowing entity.
"""

from pydantic import BaseModel, Field, ConfigDict
import datetime
from typing import Optional

class BorrowingCreate(BaseModel):
    """
    Input for Borrow.

    Attributes:
        book_id (int): ID of the book to lend.
        borrower_name (str): Non-empty name of the person taking the copy.
    """
    book_id: int
    borrower_name: str = Field(..., min_length=1, max_length=255)

class BorrowingSchema(BaseModel):
    id: int
    book_id: int
    borrower_name: str
    status: str
    created_at: datetime.datetime
    return_date: Optional[datetime.date] = None

    model_config = ConfigDict(from_attributes=True)

class BorrowingWithBook(BorrowingSchema):
    """A borrowing as listed: book title and author are joined at read time."""
    book_title: str
    book_author: str
