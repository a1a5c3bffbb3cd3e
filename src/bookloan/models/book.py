"""
ORM model for the Book entity.
Tracks the copies a library owns and how many of them are on the shelf.
"""

from sqlalchemy import Column, Integer, String, CheckConstraint
from sqlalchemy.orm import relationship
from bookloan.db.session import Base

class Book(Base):
    """
    A title held by the library.

    Attributes:
        id (int): Primary key.
        title (str): Book title.
        author (str): Book author.
        isbn (str): Optional ISBN. Not unique: several editions may share a record.
        category (str): Shelf category.
        total_copies (int): Physical copies owned.
        available_copies (int): Copies not currently on loan.
        borrowings (List[Borrowing]): Borrowings referencing this book.
    """
    __tablename__ = "books"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String(255), index=True, nullable=False)
    author = Column(String(255), index=True, nullable=False)
    isbn = Column(String(20), index=True, nullable=True)
    category = Column(String(100), nullable=False)
    total_copies = Column(Integer, nullable=False, default=0)
    # No lower bound here: shrinking total_copies below the on-loan count is allowed.
    available_copies = Column(Integer, nullable=False, default=0)

    # passive_deletes leaves the RESTRICT foreign key in charge of blocking deletes.
    borrowings = relationship(
        "Borrowing",
        back_populates="book",
        passive_deletes="all",
    )

    __table_args__ = (
        CheckConstraint('total_copies >= 0', name='book_total_copies_check'),
    )

    @property
    def on_loan(self) -> int:
        return self.total_copies - self.available_copies

    def __repr__(self) -> str:
        return (
            f"<Book(id={self.id}, title='{self.title[:30]}', "
            f"available={self.available_copies}/{self.total_copies})>"
        )
