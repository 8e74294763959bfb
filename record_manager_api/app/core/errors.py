"""
Storage error classification.

Every storage failure that reaches the service layer is sorted into one
of three outcomes by :func:`classify_error`:

* ``NOT_FOUND`` -- an update or delete addressed a row that does not
  exist.  Services recover from this locally and return ``None`` or
  ``False``.
* ``CONFLICT`` -- a uniqueness constraint was violated.  Services raise
  :class:`ConflictError` with a message meant for the end user.
* ``UNEXPECTED`` -- anything else.  Services re-raise the original
  exception and the route layer answers with a server error.

SQLite-specific error names are only inspected here.
"""

import sqlite3
from enum import Enum

from .db import RecordNotFoundError


class ErrorKind(str, Enum):
    NOT_FOUND = "not_found"
    CONFLICT = "conflict"
    UNEXPECTED = "unexpected"


class ConflictError(Exception):
    """Raised when a write violates a uniqueness constraint."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


_UNIQUE_ERROR_NAMES = {"SQLITE_CONSTRAINT_UNIQUE", "SQLITE_CONSTRAINT_PRIMARYKEY"}
_UNIQUE_MESSAGE_PREFIX = "UNIQUE constraint failed"


def classify_error(exc: BaseException) -> ErrorKind:
    """Map an exception raised by a storage call to an :class:`ErrorKind`."""
    if isinstance(exc, RecordNotFoundError):
        return ErrorKind.NOT_FOUND
    if isinstance(exc, sqlite3.IntegrityError):
        # ``sqlite_errorname`` is only populated on Python 3.11+.
        if getattr(exc, "sqlite_errorname", None) in _UNIQUE_ERROR_NAMES:
            return ErrorKind.CONFLICT
        if str(exc).startswith(_UNIQUE_MESSAGE_PREFIX):
            return ErrorKind.CONFLICT
    return ErrorKind.UNEXPECTED
