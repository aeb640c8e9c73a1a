"""
Records with locale-dependent fields.

A ``LocalizedRecord`` subclass names its base table and the set of fields
that vary by locale:

    class Article(LocalizedRecord):
        table = models.Article.__table__
        translatable = {"title", "body"}

Translatable values live in a per-instance variation table
(``locale -> {field: value}``); everything else goes to the wrapped
:class:`~translatable.records.base.Record`. Reads fall back from the current
locale to the default locale once, never further.
"""
from __future__ import annotations

import asyncio
import logging
from typing import Any, ClassVar, Dict, FrozenSet, List, Mapping, Optional, Type

from pydantic import BaseModel
from sqlalchemy import Table
from sqlalchemy.engine import Engine

from translatable.db.models.translations import LOCALE_COLUMN, OWNER_COLUMN
from translatable.db.models.translations import translation_table_name as default_translation_table_name
from translatable.db.repositories.variations import VariationStore
from translatable.db.schemas.validation import validate_attributes
from translatable.records.base import Record
from translatable.records.options import UPDATE, SaveOptions, SerializeOptions
from translatable.utils.settings import get_settings

logger = logging.getLogger(__name__)

_MISSING = object()


class LocalizedRecord:
    table: ClassVar[Table]
    translatable: ClassVar[FrozenSet[str]] = frozenset()
    translation_table_name: ClassVar[Optional[str]] = None
    schema: ClassVar[Optional[Type[BaseModel]]] = None
    id_attribute: ClassVar[str] = "id"
    # None means the configured default locale
    default_locale: Optional[str] = None

    def __init_subclass__(cls, **kwargs):
        super().__init_subclass__(**kwargs)
        cls.translatable = frozenset(cls.translatable)

    def __init__(
        self,
        attributes: Optional[Mapping[str, Any]] = None,
        *,
        locale: Optional[str] = None,
        bind: Optional[Engine] = None,
    ):
        self.default_locale = self.default_locale or get_settings().default_locale
        self.current_locale = self.default_locale
        self._variations: Dict[str, Dict[str, Any]] = {}
        self.record = Record(self.table, bind=bind, id_attribute=self.id_attribute)
        self._variation_store: Optional[VariationStore] = None

        if self.translatable:
            self._variation_store = VariationStore(
                self.record.bind,
                self.table.metadata,
                self.translation_table_name or default_translation_table_name(self.table),
                strict=get_settings().strict_upsert,
            )
            self.record.on("fetched", self.fetch_translatable)

        if locale is not None:
            self.set_locale(locale)
        if attributes:
            self.set(attributes)

    @classmethod
    def forge(cls, attributes: Optional[Mapping[str, Any]] = None, **kwargs: Any) -> "LocalizedRecord":
        return cls(attributes, **kwargs)

    def __repr__(self):
        return f"<{type(self).__name__} id={self.id!r} locale={self.current_locale!r}>"

    @property
    def id(self) -> Any:
        return self.record.id

    @property
    def variations(self) -> Dict[str, Dict[str, Any]]:
        """Read-only view: a copy of the in-memory variation table."""
        return {locale: dict(fields) for locale, fields in self._variations.items()}

    def is_translatable(self, field: Any) -> bool:
        return field in self.translatable

    def is_new(self) -> bool:
        return self.record.is_new()

    # Locale
    def set_locale(self, locale: str) -> None:
        self.current_locale = locale

    def get_locale(self) -> str:
        return self.current_locale

    # Read path
    def _lookup(self, field: str, locale: str) -> Any:
        return self._variations.get(locale, {}).get(field, _MISSING)

    def get_translation_for_locale(self, field: str, locale: str) -> Any:
        if not self.is_translatable(field):
            return None
        value = self._lookup(field, locale)
        return None if value is _MISSING else value

    def get_translation(self, field: str) -> Any:
        if not self.is_translatable(field):
            return None
        value = self._lookup(field, self.current_locale)
        if value is not _MISSING:
            return value
        if self.current_locale == self.default_locale:
            return None
        return self.get_translation_for_locale(field, self.default_locale)

    def get(self, field: str) -> Any:
        if self.is_translatable(field):
            return self.get_translation(field)
        return self.record.get(field)

    # Write path
    def set_translation(self, value: Any, field: str) -> bool:
        if not self.is_translatable(field):
            return False
        locale = self.current_locale or self.default_locale
        self._variations.setdefault(locale, {})[field] = value
        return True

    def set_translation_for_locale(self, value: Any, field: str, locale: Optional[str]) -> bool:
        if not self.is_translatable(field):
            return False
        locale = locale or self.default_locale
        self._variations.setdefault(locale, {})[field] = value
        return True

    def set(self, key: Any, value: Any = None) -> "LocalizedRecord":
        if key is None:
            return self
        if isinstance(key, Mapping):
            base = {k: v for k, v in key.items() if not self.set_translation(v, k)}
            if base:
                self.record.set(base)
            return self
        if not self.set_translation(value, key):
            self.record.set(key, value)
        return self

    def _strip_translatable(self, attrs: Dict[str, Any]) -> Dict[str, Any]:
        return {key: value for key, value in attrs.items() if not self.set_translation(value, key)}

    # Serialization
    def serialize(self, options: Any = None) -> Dict[str, Any]:
        opts = SerializeOptions.coerce(options)
        serialized = self.record.serialize(opts)
        for field in self.translatable:
            if field not in opts.exclude:
                serialized[field] = self.get_translation(field)
        return serialized

    # Validation
    def validate_save(self, attrs: Mapping[str, Any], options: SaveOptions) -> Dict[str, Any]:
        # Only a patch update validates just the supplied keys
        partial = options.method == UPDATE and options.patch
        if partial:
            data = dict(attrs)
        else:
            data = dict(self.record.attributes)
            data.update(self._variations.get(self.current_locale, {}))
            data.update(attrs)
        value = validate_attributes(self.schema, data, table_name=self.table.name, partial=partial)
        self.set(value)
        return value

    # Persistence
    async def save(self, key: Any = None, value: Any = None, options: Any = None) -> "LocalizedRecord":
        if key is None or isinstance(key, Mapping):
            attrs = dict(key or {})
            opts = SaveOptions.coerce(value)
        else:
            attrs = {key: value}
            opts = SaveOptions.coerce(options)

        opts.method = self.record.save_method(opts)

        if self.schema is not None:
            validated = self.validate_save(attrs, opts)
            attrs = {k: validated.get(k, v) for k, v in attrs.items()}

        attrs = self._strip_translatable(attrs)

        await self.record.save(attrs, opts)
        await self.save_translations(opts)
        return self

    async def save_translations(self, options: Optional[SaveOptions] = None) -> List[str]:
        if self._variation_store is None or not self._variations:
            return []
        owner_id = self.id
        locales = list(self._variations)
        results = await asyncio.gather(
            *(self._variation_store.upsert(owner_id, locale, self._variations[locale]) for locale in locales),
            return_exceptions=True,
        )
        failures = [r for r in results if isinstance(r, BaseException)]
        if failures:
            logger.error(
                "saving translations for %s id=%s failed for %d of %d locales: %s",
                self.table.name, owner_id, len(failures), len(locales), failures[0],
            )
            raise failures[0]
        return list(results)

    async def fetch(self, *, require: bool = False) -> Optional["LocalizedRecord"]:
        record = await self.record.fetch(require=require)
        return self if record is not None else None

    async def fetch_translatable(self, record: Record) -> "LocalizedRecord":
        rows = await self._variation_store.fetch(record.id)
        for row in rows:
            locale = row[LOCALE_COLUMN]
            self._variations[locale] = self._row_fields(row)
        return self

    def _row_fields(self, row: Mapping[str, Any]) -> Dict[str, Any]:
        return {
            key: value
            for key, value in row.items()
            if key not in (OWNER_COLUMN, LOCALE_COLUMN) and key in self.translatable
        }

    async def destroy(self) -> "LocalizedRecord":
        # Variation rows go with the owner through ON DELETE CASCADE
        await self.record.destroy()
        self._variations.clear()
        return self
