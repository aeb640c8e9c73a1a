"""
Table-backed base record.

Holds a plain attribute map for one row of a SQLAlchemy ``Table`` and
persists it through the record repository. Lifecycle listeners registered
with :meth:`Record.on` run after the matching operation; coroutine listeners
are awaited in registration order.
"""
from __future__ import annotations

import inspect
import logging
from collections import defaultdict
from typing import Any, Callable, Dict, List, Mapping, Optional

from sqlalchemy import Table
from sqlalchemy.engine import Engine

from translatable.db.database import get_engine, run_on_engine
from translatable.db.repositories import records as repo
from translatable.errors import NoRowsUpdatedError, RecordNotFoundError
from translatable.records.options import INSERT, UPDATE, SaveOptions, SerializeOptions

logger = logging.getLogger(__name__)


class Record:
    def __init__(
        self,
        table: Table,
        attributes: Optional[Mapping[str, Any]] = None,
        *,
        bind: Optional[Engine] = None,
        id_attribute: str = "id",
    ):
        self.table = table
        self.bind = bind if bind is not None else get_engine()
        self.id_attribute = id_attribute
        self.attributes: Dict[str, Any] = {}
        self._listeners: Dict[str, List[Callable]] = defaultdict(list)
        if attributes:
            self.set(attributes)

    def __repr__(self):
        return f"<Record table={self.table.name!r} id={self.id!r}>"

    @property
    def table_name(self) -> str:
        return self.table.name

    @property
    def id(self) -> Any:
        return self.attributes.get(self.id_attribute)

    def is_new(self) -> bool:
        return self.id is None

    def save_method(self, options: Optional[SaveOptions] = None) -> str:
        if options is not None and options.method:
            return options.method.lower()
        return INSERT if self.is_new() else UPDATE

    # Events
    def on(self, event: str, callback: Callable) -> "Record":
        self._listeners[event].append(callback)
        return self

    async def trigger(self, event: str, *args: Any) -> None:
        for callback in list(self._listeners.get(event, ())):
            result = callback(*args)
            if inspect.isawaitable(result):
                await result

    # Attributes
    def get(self, field: str) -> Any:
        return self.attributes.get(field)

    def set(self, key: Any, value: Any = None) -> "Record":
        if key is None:
            return self
        if isinstance(key, Mapping):
            self.attributes.update(key)
        else:
            self.attributes[key] = value
        return self

    def serialize(self, options: Any = None) -> Dict[str, Any]:
        opts = SerializeOptions.coerce(options)
        return {
            key: value
            for key, value in self.attributes.items()
            if (opts.include is None or key in opts.include) and key not in opts.exclude
        }

    # Persistence
    async def fetch(self, *, require: bool = False) -> Optional["Record"]:
        record_id = self.id
        row = None
        if record_id is not None:
            row = await run_on_engine(self.bind, repo.get_record, self.bind, self.table, self.id_attribute, record_id)
        if row is None:
            if require:
                raise RecordNotFoundError(self.table_name, record_id)
            return None
        self.attributes.update(row)
        await self.trigger("fetched", self)
        return self

    async def save(self, attrs: Optional[Mapping[str, Any]] = None, options: Any = None) -> "Record":
        opts = SaveOptions.coerce(options)
        attrs = dict(attrs or {})
        method = self.save_method(opts)

        if method == INSERT:
            self.set(attrs)
            values = dict(self.attributes)
            if values.get(self.id_attribute) is None:
                values.pop(self.id_attribute, None)
            new_id = await run_on_engine(self.bind, repo.insert_record, self.bind, self.table, values)
            if self.id is None:
                self.attributes[self.id_attribute] = new_id
            logger.debug("inserted %s id=%s", self.table_name, self.id)
            return self

        if method != UPDATE:
            raise ValueError(f"Unknown save method '{method}'")
        if self.is_new():
            raise ValueError(f"Cannot update a '{self.table_name}' record without an id")

        if opts.patch:
            values = attrs
        else:
            self.set(attrs)
            values = {k: v for k, v in self.attributes.items() if k != self.id_attribute}

        if values:
            count = await run_on_engine(
                self.bind, repo.update_record, self.bind, self.table, self.id_attribute, self.id, values
            )
            if count == 0 and opts.require:
                raise NoRowsUpdatedError(self.table_name, self.id)
        if opts.patch:
            self.set(attrs)
        logger.debug("updated %s id=%s patch=%s", self.table_name, self.id, opts.patch)
        return self

    async def destroy(self) -> "Record":
        if self.is_new():
            raise ValueError(f"Cannot destroy a '{self.table_name}' record without an id")
        await run_on_engine(self.bind, repo.delete_record, self.bind, self.table, self.id_attribute, self.id)
        self.attributes.pop(self.id_attribute, None)
        return self
