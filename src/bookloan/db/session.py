"""
Database lifecycle for bookloan.

Holds the declarative Base for the ORM models and the Database class, which
owns the engine and the session factory. A Database is initialized once on
startup and disposed on shutdown by whoever hosts it (the API lifespan, a
script, a test fixture) and then injected into the code that needs sessions.
"""

import logging
from typing import Iterator, Optional

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, declarative_base, sessionmaker

logger = logging.getLogger(__name__)

Base = declarative_base()


def _configure_sqlite_connection(dbapi_connection, connection_record):
    # Let SQLAlchemy emit BEGIN itself (see _begin_immediate) instead of pysqlite.
    dbapi_connection.isolation_level = None
    # SQLite ships with foreign key enforcement off for every new connection.
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def _begin_immediate(conn):
    # Take the write lock up front. A deferred transaction that reads and then
    # writes can fail with SQLITE_BUSY instead of waiting for a concurrent writer.
    conn.exec_driver_sql("BEGIN IMMEDIATE")


class Database:
    """
    Engine plus session factory with an explicit init/dispose lifecycle.

    Attributes:
        url (str): SQLAlchemy database URL.
        engine (Optional[Engine]): Engine, available after init().
        SessionLocal (Optional[sessionmaker]): Session factory, available after init().
    """

    def __init__(self, url: str):
        self.url = url
        self.engine: Optional[Engine] = None
        self.SessionLocal: Optional[sessionmaker] = None

    @property
    def is_initialized(self) -> bool:
        return self.engine is not None

    def init(self, echo: bool = False, create_tables: bool = False) -> "Database":
        """
        Creates the engine and the session factory. Calling it twice is a no-op.

        Args:
            echo (bool): Log every SQL statement emitted by the engine.
            create_tables (bool): Create missing tables right after connecting.

        Returns:
            Database: self, to allow chaining.
        """
        if self.engine is not None:
            return self

        is_sqlite = self.url.startswith("sqlite")
        connect_args = {"check_same_thread": False} if is_sqlite else {}
        self.engine = create_engine(self.url, pool_pre_ping=True, echo=echo, connect_args=connect_args)
        if is_sqlite:
            event.listen(self.engine, "connect", _configure_sqlite_connection)
            event.listen(self.engine, "begin", _begin_immediate)
        self.SessionLocal = sessionmaker(autocommit=False, autoflush=False, expire_on_commit=False, bind=self.engine)
        logger.info(f"Database engine initialized for {self.engine.url.render_as_string(hide_password=True)}")

        if create_tables:
            self.create_all()
        return self

    def create_all(self) -> None:
        # Register the models on Base.metadata before creating anything.
        from bookloan.models import book, borrowing  # noqa: F401

        Base.metadata.create_all(bind=self._require_engine())

    def drop_all(self) -> None:
        from bookloan.models import book, borrowing  # noqa: F401

        Base.metadata.drop_all(bind=self._require_engine())

    def dispose(self) -> None:
        """Closes every pooled connection and forgets the engine."""
        if self.engine is None:
            return
        self.engine.dispose()
        logger.info("Database engine disposed.")
        self.engine = None
        self.SessionLocal = None

    def session(self) -> Session:
        """Opens a new Session. The caller is responsible for closing it."""
        self._require_engine()
        return self.SessionLocal()

    def get_db(self) -> Iterator[Session]:
        """
        Provides a database session for dependency injection (e.g. in FastAPI).

        Yields:
            Session: SQLAlchemy session.

        Ensures:
            The session is closed after use.
        """
        db = self.session()
        try:
            yield db
        finally:
            db.close()

    def _require_engine(self) -> Engine:
        if self.engine is None:
            raise RuntimeError("Database is not initialized; call init() on startup.")
        return self.engine
