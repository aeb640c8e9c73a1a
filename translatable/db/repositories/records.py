"""
Base record repository functions.

Point lookup, insert, update and delete for a single table keyed by its
identifier column. Each call runs in its own transaction.
"""
from __future__ import annotations

from typing import Any, Optional

from sqlalchemy import Table, delete, insert, select, update
from sqlalchemy.engine import Engine


def get_record(bind: Engine, table: Table, id_attribute: str, record_id: Any) -> Optional[dict]:
    with bind.connect() as conn:
        row = conn.execute(select(table).where(table.c[id_attribute] == record_id)).first()
    return dict(row._mapping) if row is not None else None


def insert_record(bind: Engine, table: Table, values: dict) -> Any:
    """Insert a row and return its primary key value."""
    with bind.begin() as conn:
        result = conn.execute(insert(table).values(**values))
        pk = result.inserted_primary_key
    return pk[0] if pk else None


def update_record(bind: Engine, table: Table, id_attribute: str, record_id: Any, values: dict) -> int:
    """Update a row by identifier; returns the matched row count."""
    with bind.begin() as conn:
        result = conn.execute(
            update(table).where(table.c[id_attribute] == record_id).values(**values)
        )
        return result.rowcount


def delete_record(bind: Engine, table: Table, id_attribute: str, record_id: Any) -> int:
    with bind.begin() as conn:
        result = conn.execute(delete(table).where(table.c[id_attribute] == record_id))
        return result.rowcount
