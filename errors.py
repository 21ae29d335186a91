"""Error kinds raised by the catalog store and helpers to branch on them."""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Optional


class ErrorKind(str, Enum):
    NOT_FOUND = "NotFound"
    ALREADY_BORROWED = "AlreadyBorrowed"
    NOT_BORROWED = "NotBorrowed"
    NOT_BORROWED_BY_MEMBER = "NotBorrowedByMember"
    PARSE_ERROR = "ParseError"
    IO_ERROR = "IOError"


class CatalogError(Exception):
    """Base class for every recoverable catalog failure."""

    kind: ErrorKind

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class NotFoundError(CatalogError, LookupError):
    kind = ErrorKind.NOT_FOUND


class AlreadyBorrowedError(CatalogError):
    kind = ErrorKind.ALREADY_BORROWED


class NotBorrowedError(CatalogError):
    kind = ErrorKind.NOT_BORROWED


class NotBorrowedByMemberError(CatalogError):
    kind = ErrorKind.NOT_BORROWED_BY_MEMBER


class ParseError(CatalogError, ValueError):
    """A persisted line could not be split into the expected fields."""

    kind = ErrorKind.PARSE_ERROR

    def __init__(self, message: str, source: Optional[str] = None, line_number: Optional[int] = None) -> None:
        if source and line_number:
            message = f"{source} line {line_number}: {message}"
        super().__init__(message)
        self.source = source
        self.line_number = line_number


class StorageError(CatalogError):
    kind = ErrorKind.IO_ERROR

    def __init__(self, message: str, path: Optional[str] = None) -> None:
        super().__init__(message)
        self.path = path


@dataclass
class Outcome:
    """Result of a store call: either a value or the catalog error it raised."""

    value: Any = None
    error: Optional[CatalogError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def kind(self) -> Optional[ErrorKind]:
        return self.error.kind if self.error is not None else None


def attempt(func: Callable[..., Any], *args: Any, **kwargs: Any) -> Outcome:
    """Call ``func`` and capture a ``CatalogError`` as a tagged outcome.

    Anything that is not a catalog error (a bug, a KeyboardInterrupt)
    still propagates.
    """
    try:
        return Outcome(value=func(*args, **kwargs))
    except CatalogError as exc:
        return Outcome(error=exc)
