"""Locale-dependent fields layered on top of SQLAlchemy table records."""

from translatable.errors import (
    InvalidOptionsError,
    NoRowsUpdatedError,
    RecordNotFoundError,
    RecordValidationError,
    TranslatableError,
)
from translatable.records import LocalizedRecord, Record, SaveOptions, SerializeOptions

__version__ = "0.1.0"

__all__ = [
    "LocalizedRecord",
    "Record",
    "SaveOptions",
    "SerializeOptions",
    "TranslatableError",
    "InvalidOptionsError",
    "RecordValidationError",
    "RecordNotFoundError",
    "NoRowsUpdatedError",
]
