"""
Error taxonomy and result type for the stock accounting operations.

Every failure kind carries a stable `kind` string and the HTTP status the
request handler should answer with, so callers can tell "fix your input"
(4xx) apart from "try again later" (503).
"""

from typing import Generic, Optional, TypeVar

T = TypeVar("T")


class LibraryError(Exception):
    """Base class for every failure an operation can report."""
    kind: str = "error"
    status_code: int = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def __repr__(self) -> str:
        return f"<{type(self).__name__}(kind='{self.kind}', message='{self.message}')>"


class ValidationError(LibraryError):
    """Malformed or missing input. No state was changed."""
    kind = "validation"
    status_code = 400


class NotFoundError(LibraryError):
    kind = "not_found"
    status_code = 404


class UnavailableError(LibraryError):
    """No copies left to borrow."""
    kind = "unavailable"
    status_code = 409


class InvalidStateError(LibraryError):
    """Operation not valid for the borrowing's current status."""
    kind = "invalid_state"
    status_code = 409


class AlreadyReturnedError(InvalidStateError):
    kind = "already_returned"


class ConflictError(LibraryError):
    """A referential guard blocks the operation."""
    kind = "conflict"
    status_code = 409


class StorageError(LibraryError):
    """Transient infrastructure failure. Never retried automatically."""
    kind = "storage"
    status_code = 503


class Result(Generic[T]):
    """
    Outcome of a stock accounting operation: either a value or a LibraryError.

    Attributes:
        value (Optional[T]): Payload when the operation succeeded.
        error (Optional[LibraryError]): Failure when it did not.
    """
    __slots__ = ("value", "error")

    def __init__(self, value: Optional[T] = None, error: Optional[LibraryError] = None):
        self.value = value
        self.error = error

    @classmethod
    def success(cls, value: T) -> "Result[T]":
        return cls(value=value)

    @classmethod
    def failure(cls, error: LibraryError) -> "Result[T]":
        return cls(error=error)

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap(self) -> T:
        """Returns the value, re-raising the stored error for failed results."""
        if self.error is not None:
            raise self.error
        return self.value

    def __repr__(self) -> str:
        if self.ok:
            return f"<Result(ok, value={self.value!r})>"
        return f"<Result(failed, error={self.error!r})>"
