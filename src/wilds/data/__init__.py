"""Data layer utilities for loading the JSON content tables."""

from .errors import DataError, DataLoadError, DataReferenceError, DataValidationError
from .paths import CONTENT_TABLES, get_definitions_path, table_path

__all__ = [
    "CONTENT_TABLES",
    "DataError",
    "DataLoadError",
    "DataReferenceError",
    "DataValidationError",
    "get_definitions_path",
    "table_path",
]
