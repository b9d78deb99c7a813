"""Exceptions raised while reading and checking the content tables."""
from __future__ import annotations


class DataError(Exception):
    """Base exception for the data layer.

    ``table`` names the content file the problem was found in, when known.
    """

    def __init__(self, message: str, *, table: str | None = None) -> None:
        super().__init__(f"{table}: {message}" if table else message)
        self.table = table


class DataLoadError(DataError):
    """A content table is missing, unreadable or not valid JSON."""


class DataValidationError(DataError):
    """A content table has the wrong shape or out-of-range values."""


class DataReferenceError(DataError):
    """A definition points at an id another table does not define."""
