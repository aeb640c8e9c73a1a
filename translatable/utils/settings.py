"""Environment-driven settings for translatable records."""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache


DEFAULT_LOCALE = "en"
DEFAULT_TABLE_SUFFIX = "_locale"


@dataclass(frozen=True)
class TranslatableSettings:
    default_locale: str = DEFAULT_LOCALE
    table_suffix: str = DEFAULT_TABLE_SUFFIX
    # When false, any integrity error on insert falls through to an update
    # attempt instead of only uniqueness violations.
    strict_upsert: bool = True


def _normalize_bool(value: str | None, default: bool = True) -> bool:
    """Return normalized boolean from environment-style value."""
    if value is None:
        return default
    normalized = value.strip().lower()
    if normalized in {"", "0", "false", "no", "off"}:
        return False
    if normalized in {"1", "true", "yes", "on"}:
        return True
    return default


def _non_empty(value: str | None, default: str) -> str:
    if value is None or not value.strip():
        return default
    return value.strip()


@lru_cache(maxsize=None)
def get_settings() -> TranslatableSettings:
    """Return the cached settings sourced from the environment."""
    return TranslatableSettings(
        default_locale=_non_empty(os.getenv("TRANSLATABLE_DEFAULT_LOCALE"), DEFAULT_LOCALE),
        table_suffix=_non_empty(os.getenv("TRANSLATABLE_TABLE_SUFFIX"), DEFAULT_TABLE_SUFFIX),
        strict_upsert=_normalize_bool(os.getenv("TRANSLATABLE_STRICT_UPSERT"), default=True),
    )


def refresh_settings_cache() -> None:
    """Invalidate cached settings (useful for tests)."""
    get_settings.cache_clear()
