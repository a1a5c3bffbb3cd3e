"""
HTTP API for bookloan.

Maps the REST routes onto the stock accounting operations, turns failed
Results into JSON errors carrying the failure kind, and owns the database
lifecycle through the application lifespan.

Importing this module has no side effects; serve it through the factory:

    uvicorn bookloan.api.main:create_app --factory
"""

import logging
from contextlib import asynccontextmanager
from typing import Any, Dict, Iterator, List, Optional

from fastapi import Body, Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from bookloan.core.config import Settings, settings
from bookloan.core.errors import LibraryError, ValidationError
from bookloan.db.session import Database
from bookloan.schemas.book import BookSchema
from bookloan.schemas.borrowing import BorrowingSchema, BorrowingWithBook
from bookloan.services import stock

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    app_settings: Settings = app.state.settings
    database: Database = app.state.database
    database.init(echo=app_settings.DB_ECHO, create_tables=app_settings.AUTO_CREATE_TABLES)
    logger.info(f"bookloan API started ({app_settings.ENVIRONMENT}).")
    try:
        yield
    finally:
        database.dispose()


def get_db(request: Request) -> Iterator[Session]:
    """Yields a session from the database attached to the running app."""
    database: Database = request.app.state.database
    yield from database.get_db()


async def library_error_handler(request: Request, exc: LibraryError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message, "kind": exc.kind})


async def request_validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Reports malformed path parameters and bodies like any other validation failure."""
    errors = exc.errors()
    message = "Invalid request"
    if errors:
        field = ".".join(str(part) for part in errors[0].get("loc", ())) or "input"
        message = f"{message} ({field}: {errors[0].get('msg', 'invalid value')})"
    return JSONResponse(
        status_code=ValidationError.status_code,
        content={"error": message, "kind": ValidationError.kind},
    )


def create_app(app_settings: Optional[Settings] = None, database: Optional[Database] = None) -> FastAPI:
    """
    Builds the FastAPI application.

    Args:
        app_settings (Optional[Settings]): Settings to use; the module-level ones by default.
        database (Optional[Database]): Database to inject; built from DATABASE_URL by default.
            It is initialized on startup and disposed on shutdown.

    Returns:
        FastAPI: The configured application.
    """
    app_settings = app_settings or settings
    logging.basicConfig(level=app_settings.LOG_LEVEL.upper(), format='%(asctime)s - %(name)s - %(levelname)s - %(message)s')

    app = FastAPI(title="bookloan", lifespan=lifespan)
    app.state.settings = app_settings
    app.state.database = database or Database(app_settings.DATABASE_URL)

    origins = app_settings.list_cors_origins
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_credentials="*" not in origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_exception_handler(LibraryError, library_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_error_handler)

    @app.get("/health")
    def health():
        return {"ok": True}

    # --- Books ---

    @app.get("/api/books", response_model=List[BookSchema])
    def list_books(db: Session = Depends(get_db)):
        return stock.list_books(db).unwrap()

    @app.post("/api/books", response_model=BookSchema, status_code=201)
    def create_book(payload: Optional[Dict[str, Any]] = Body(default=None), db: Session = Depends(get_db)):
        book = stock.create_book(db, payload).unwrap()
        return BookSchema.model_validate(book)

    @app.put("/api/books/{book_id}", response_model=BookSchema)
    def edit_book(book_id: int, payload: Optional[Dict[str, Any]] = Body(default=None), db: Session = Depends(get_db)):
        book = stock.edit_book(db, book_id, payload).unwrap()
        return BookSchema.model_validate(book)

    @app.delete("/api/books/{book_id}")
    def delete_book(book_id: int, db: Session = Depends(get_db)):
        return {"message": stock.delete_book(db, book_id).unwrap()}

    # --- Borrowings ---

    @app.get("/api/borrowings", response_model=List[BorrowingWithBook])
    def list_borrowings(db: Session = Depends(get_db)):
        return stock.list_borrowings(db).unwrap()

    @app.post("/api/borrowings", response_model=BorrowingSchema, status_code=201)
    def borrow_book(payload: Optional[Dict[str, Any]] = Body(default=None), db: Session = Depends(get_db)):
        borrowing = stock.borrow_book(db, payload).unwrap()
        return BorrowingSchema.model_validate(borrowing)

    @app.put("/api/borrowings/{borrowing_id}/return", response_model=BorrowingSchema)
    def return_borrowing(borrowing_id: int, db: Session = Depends(get_db)):
        borrowing = stock.return_borrowing(db, borrowing_id).unwrap()
        return BorrowingSchema.model_validate(borrowing)

    @app.delete("/api/borrowings/{borrowing_id}")
    def cancel_borrowing(borrowing_id: int, db: Session = Depends(get_db)):
        return {"message": stock.cancel_borrowing(db, borrowing_id).unwrap()}

    return app
