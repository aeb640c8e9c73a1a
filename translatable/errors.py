"""Exceptions raised by translatable records."""
from __future__ import annotations

from typing import Any, List


class TranslatableError(Exception):
    """Base class for library errors."""


class RecordValidationError(TranslatableError, ValueError):
    """Attribute validation failed before anything was persisted."""

    def __init__(self, table_name: str, errors: List[dict[str, Any]]):
        self.table_name = table_name
        self.errors = errors
        fields = ", ".join(".".join(str(p) for p in e.get("loc", ())) or "<root>" for e in errors)
        super().__init__(f"Validation failed for '{table_name}': {fields}")


class RecordNotFoundError(TranslatableError, LookupError):
    def __init__(self, table_name: str, record_id: Any):
        self.table_name = table_name
        self.record_id = record_id
        super().__init__(f"No '{table_name}' record with id {record_id!r}")


class NoRowsUpdatedError(TranslatableError):
    def __init__(self, table_name: str, record_id: Any):
        self.table_name = table_name
        self.record_id = record_id
        super().__init__(f"No rows updated in '{table_name}' for id {record_id!r}")


class InvalidOptionsError(TranslatableError, TypeError):
    def __init__(self, kind: str, unknown: List[str]):
        self.kind = kind
        self.unknown = unknown
        super().__init__(f"Unknown {kind} option(s): {', '.join(unknown)}")
