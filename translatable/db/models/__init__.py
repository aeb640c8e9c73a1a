"""
SQLAlchemy models and table builders.

Exposes `Base`, the translation table builder and the reference tables used
by the migrations and the test-suite.
"""

from .base import Base  # re-export
from .translations import (
    LOCALE_COLUMN,
    OWNER_COLUMN,
    RESERVED_COLUMNS,
    translation_table_name,
    variation_table,
)
from .reference import TranslatableItem, TranslatableItemLocale

__all__ = [
    "Base",
    "LOCALE_COLUMN",
    "OWNER_COLUMN",
    "RESERVED_COLUMNS",
    "translation_table_name",
    "variation_table",
    "TranslatableItem",
    "TranslatableItemLocale",
]
