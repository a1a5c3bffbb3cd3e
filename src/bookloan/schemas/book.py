"""
Pydantic schemas for the Book entity.
Defines the input models used for validation and the output model used for serialization.
"""

from pydantic import BaseModel, Field, ConfigDict, field_validator
from typing import Optional

class BookBase(BaseModel):
    """
    Fields shared by book creation and book edits.

    Attributes:
        title (str): Non-empty title.
        author (str): Non-empty author.
        isbn (Optional[str]): Optional ISBN; an empty string is stored as None.
        category (str): Non-empty category.
        total_copies (int): Copies owned, zero or more. Numeric strings are accepted.
    """
    title: str = Field(..., min_length=1, max_length=255)
    author: str = Field(..., min_length=1, max_length=255)
    isbn: Optional[str] = Field(default=None, max_length=20)
    category: str = Field(..., min_length=1, max_length=100)
    total_copies: int = Field(..., ge=0)

    @field_validator("isbn", mode="before")
    @classmethod
    def blank_isbn_is_none(cls, value):
        if isinstance(value, str) and not value.strip():
            return None
        return value

class BookCreate(BookBase):
    """Input for CreateBook. available_copies is derived, never supplied."""
    pass

class BookUpdate(BookBase):
    """Input for EditBook. Every field is required, as on creation."""
    pass

class BookSchema(BookBase):
    """
    Output schema for a book, including the stock counters.

    Attributes:
        id (int): Book ID.
        available_copies (int): Copies on the shelf. Can be negative after a
            shrinking edit, so it carries no lower bound here.
    """
    id: int
    available_copies: int

    model_config = ConfigDict(from_attributes=True)
