"""
Pydantic schemas and the save-time validator.
"""

from .validation import partial_schema, validate_attributes
from .reference import TranslatableItemSchema

__all__ = [
    "partial_schema",
    "validate_attributes",
    "TranslatableItemSchema",
]
