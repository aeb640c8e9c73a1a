"""
Record classes: the table-backed base record and its locale-aware wrapper.
"""

from .options import SaveOptions, SerializeOptions
from .base import Record
from .localized import LocalizedRecord

__all__ = [
    "SaveOptions",
    "SerializeOptions",
    "Record",
    "LocalizedRecord",
]
