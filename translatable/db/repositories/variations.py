"""
Variation store: per-locale rows of translatable field values.

Rows live in ``<base_table>_locale`` and are unique on (owner_id, locale).
Writes use "insert, then update on conflict" without a pre-read, so two
writers never race between an existence check and the write.
"""
from __future__ import annotations

import logging
import threading
from typing import Any, Dict, List, Optional

from sqlalchemy import MetaData, Table, insert, select, update
from sqlalchemy.engine import Engine
from sqlalchemy.exc import IntegrityError

from translatable.db.database import run_on_engine
from translatable.db.models.translations import LOCALE_COLUMN, OWNER_COLUMN

logger = logging.getLogger(__name__)

UNIQUE_VIOLATION_SQLSTATE = "23505"
_UNIQUE_MESSAGES = ("unique constraint", "duplicate key", "duplicate entry")


def is_unique_violation(exc: IntegrityError) -> bool:
    """Return True when the integrity error comes from a uniqueness constraint."""
    orig = getattr(exc, "orig", None)
    # psycopg2 exposes pgcode, psycopg 3 exposes sqlstate
    code = getattr(orig, "pgcode", None) or getattr(orig, "sqlstate", None)
    if code:
        return code == UNIQUE_VIOLATION_SQLSTATE
    message = str(orig if orig is not None else exc).lower()
    return any(marker in message for marker in _UNIQUE_MESSAGES)


class VariationStore:
    """Access to one translation table."""

    def __init__(self, bind: Engine, metadata: MetaData, table_name: str, *, strict: bool = True):
        self.bind = bind
        self.metadata = metadata
        self.table_name = table_name
        self.strict = strict
        self._table: Optional[Table] = None
        self._lock = threading.Lock()

    @property
    def table(self) -> Table:
        if self._table is None:
            with self._lock:
                if self._table is None:
                    self._table = self._resolve_table()
        return self._table

    def _resolve_table(self) -> Table:
        table = self.metadata.tables.get(self.table_name)
        if table is None:
            logger.debug("reflecting translation table %s", self.table_name)
            table = Table(self.table_name, self.metadata, autoload_with=self.bind)
        missing = {OWNER_COLUMN, LOCALE_COLUMN} - set(table.c.keys())
        if missing:
            raise ValueError(f"Translation table '{self.table_name}' lacks columns {sorted(missing)}")
        return table

    # Reads
    def select_rows(self, owner_id: Any) -> List[Dict[str, Any]]:
        table = self.table
        with self.bind.connect() as conn:
            rows = conn.execute(select(table).where(table.c[OWNER_COLUMN] == owner_id)).all()
        return [dict(row._mapping) for row in rows]

    async def fetch(self, owner_id: Any) -> List[Dict[str, Any]]:
        return await run_on_engine(self.bind, self.select_rows, owner_id)

    # Writes
    def _try_insert(self, row: Dict[str, Any]) -> Optional[IntegrityError]:
        """Insert ``row``; return the integrity error instead of raising it."""
        try:
            with self.bind.begin() as conn:
                conn.execute(insert(self.table).values(**row))
        except IntegrityError as exc:
            return exc
        return None

    def _update(self, owner_id: Any, locale: str, fields: Dict[str, Any]) -> int:
        table = self.table
        with self.bind.begin() as conn:
            result = conn.execute(
                update(table)
                .where(table.c[OWNER_COLUMN] == owner_id, table.c[LOCALE_COLUMN] == locale)
                .values(**fields)
            )
            return result.rowcount

    def upsert_locale(self, owner_id: Any, locale: str, fields: Dict[str, Any]) -> str:
        """Write one locale's values for ``owner_id``; returns the locale."""
        row = dict(fields)
        row[OWNER_COLUMN] = owner_id
        row[LOCALE_COLUMN] = locale

        insert_error = self._try_insert(row)
        if insert_error is None:
            logger.debug("inserted %s row owner=%s locale=%s", self.table_name, owner_id, locale)
            return locale

        if self.strict and not is_unique_violation(insert_error):
            raise insert_error

        logger.debug("insert conflicted for %s owner=%s locale=%s; updating", self.table_name, owner_id, locale)
        if not fields:
            if is_unique_violation(insert_error):
                return locale
            raise insert_error
        if self._update(owner_id, locale, fields) == 0:
            if self.strict:
                # The conflicting row vanished between the insert and the update
                raise insert_error
            logger.warning(
                "insert into %s failed and update matched no row owner=%s locale=%s: %s",
                self.table_name, owner_id, locale, insert_error.orig,
            )
        return locale

    async def upsert(self, owner_id: Any, locale: str, fields: Dict[str, Any]) -> str:
        return await run_on_engine(self.bind, self.upsert_locale, owner_id, locale, dict(fields))
