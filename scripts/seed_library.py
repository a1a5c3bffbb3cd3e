"""
Script that fills a bookloan database with sample books and borrowings.

Books and borrower names are generated with Faker and written through the
stock accounting operations, so the seeded data respects the same stock rules
as the API (available copies always match the active borrowings).

Usage:
    python scripts/seed_library.py --books 25 --borrowings 40
    Requires the package to be installed ('pip install -e .[seed]').
"""

import argparse
import logging
import random
import sys
from typing import List, Optional

from faker import Faker

logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(levelname)s - %(message)s')
logger = logging.getLogger(__name__)

try:
    from bookloan.core.config import settings
    from bookloan.db.session import Database
    from bookloan.services import stock
except ImportError as e:
    logger.error(f"Error importing project modules: {e}.")
    logger.error("Make sure the package is installed with 'pip install -e .[seed]'.")
    sys.exit(1)

CATEGORIES: List[str] = [
    "Fiction",
    "Science Fiction",
    "Fantasy",
    "History",
    "Biography",
    "Science",
    "Programming",
    "Children",
]
RETURN_RATIO: float = 0.3

fake = Faker('en_US')


def seed_books(db, count: int) -> List[int]:
    """
    Creates `count` books with between 1 and 5 copies each.

    Returns:
        List[int]: IDs of the books created.
    """
    book_ids: List[int] = []
    for _ in range(count):
        result = stock.create_book(db, {
            "title": fake.sentence(nb_words=4).rstrip(".")[:255],
            "author": fake.name(),
            "isbn": fake.isbn13().replace("-", ""),
            "category": random.choice(CATEGORIES),
            "total_copies": random.randint(1, 5),
        })
        if not result.ok:
            logger.error(f"Could not create book: {result.error.message}")
            continue
        book_ids.append(result.value.id)
    logger.info(f"{len(book_ids)} books created.")
    return book_ids


def seed_borrowings(db, book_ids: List[int], count: int) -> None:
    """
    Lends random books to fake borrowers and returns some of them.
    Borrows hitting a book with no copies left are skipped.
    """
    lent = returned = skipped = 0
    for _ in range(count):
        result = stock.borrow_book(db, {"book_id": random.choice(book_ids), "borrower_name": fake.name()})
        if not result.ok:
            skipped += 1
            logger.debug(f"Borrow skipped: {result.error.message}")
            continue
        lent += 1
        if random.random() < RETURN_RATIO:
            if stock.return_borrowing(db, result.value.id).ok:
                returned += 1
    logger.info(f"{lent} borrowings created ({returned} returned, {skipped} skipped for lack of stock).")


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Seed the bookloan database with sample data.")
    parser.add_argument("--database-url", default=settings.DATABASE_URL, help="SQLAlchemy database URL.")
    parser.add_argument("--books", type=int, default=20, help="Number of books to create.")
    parser.add_argument("--borrowings", type=int, default=30, help="Number of borrow attempts.")
    parser.add_argument("--seed", type=int, default=None, help="Random seed for reproducible data.")
    args = parser.parse_args(argv)

    if args.seed is not None:
        random.seed(args.seed)
        Faker.seed(args.seed)

    database = Database(args.database_url).init(create_tables=True)
    db = database.session()
    try:
        book_ids = seed_books(db, args.books)
        if book_ids:
            seed_borrowings(db, book_ids, args.borrowings)
    finally:
        db.close()
        database.dispose()
    return 0


if __name__ == "__main__":
    sys.exit(main())
