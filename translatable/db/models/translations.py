"""
Builder for per-type translation tables.

A translation table holds one row per (owner record, locale) with one column
per translatable field:

    <base_table>_locale(owner_id -> base.pk ON DELETE CASCADE, locale, <fields>)
    UNIQUE (owner_id, locale)
"""
from __future__ import annotations

from typing import Mapping, Optional

from sqlalchemy import Column, ForeignKey, Integer, String, Table, UniqueConstraint
from sqlalchemy.types import TypeEngine

from translatable.utils.settings import get_settings

OWNER_COLUMN = "owner_id"
LOCALE_COLUMN = "locale"
RESERVED_COLUMNS = frozenset({OWNER_COLUMN, LOCALE_COLUMN})


def translation_table_name(base_table: Table) -> str:
    return f"{base_table.name}{get_settings().table_suffix}"


def variation_table(
    base_table: Table,
    columns: Mapping[str, TypeEngine | type[TypeEngine]],
    name: Optional[str] = None,
) -> Table:
    """Declare the translation table for ``base_table`` on the same metadata."""
    reserved = RESERVED_COLUMNS.intersection(columns)
    if reserved:
        raise ValueError(f"Translatable fields may not be named {sorted(reserved)}")
    pk_columns = list(base_table.primary_key.columns)
    if len(pk_columns) != 1:
        raise ValueError(f"Table '{base_table.name}' needs a single-column primary key")
    table_name = name or translation_table_name(base_table)
    return Table(
        table_name,
        base_table.metadata,
        Column(
            OWNER_COLUMN,
            Integer,
            ForeignKey(pk_columns[0], ondelete="CASCADE"),
            nullable=False,
        ),
        Column(LOCALE_COLUMN, String(16), nullable=False),
        *(Column(field, type_) for field, type_ in columns.items()),
        UniqueConstraint(OWNER_COLUMN, LOCALE_COLUMN, name=f"uq_{table_name}_owner_locale"),
    )
