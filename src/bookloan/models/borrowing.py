# src/bookloan/models/borrowing.py
import enum
from sqlalchemy import (Column, Integer, String, ForeignKey, DateTime, Date,
                        func, CheckConstraint)
from sqlalchemy.orm import relationship
from bookloan.db.session import Base


class BorrowingStatus(str, enum.Enum):
    BORROWED = "borrowed"
    RETURNED = "returned"


class Borrowing(Base):
    __tablename__ = "borrowings"

    id = Column(Integer, primary_key=True)
    # RESTRICT: a book cannot disappear while a borrowing still points at it.
    book_id = Column(Integer, ForeignKey("books.id", ondelete="RESTRICT"), nullable=False, index=True)
    borrower_name = Column(String(255), nullable=False)
    status = Column(
        String(20),
        nullable=False,
        default=BorrowingStatus.BORROWED.value,
        server_default=BorrowingStatus.BORROWED.value,
        index=True,
    )
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    return_date = Column(Date, nullable=True)

    book = relationship("Book", back_populates="borrowings")

    __table_args__ = (
        CheckConstraint("status IN ('borrowed', 'returned')", name='borrowing_status_check'),
    )

    @property
    def is_active(self) -> bool:
        return self.status == BorrowingStatus.BORROWED.value

    def __repr__(self):
        return f"<Borrowing(id={self.id}, book_id={self.book_id}, borrower='{self.borrower_name}', status={self.status})>"
