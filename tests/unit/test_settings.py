import pytest

from translatable.utils.settings import (
    DEFAULT_LOCALE,
    DEFAULT_TABLE_SUFFIX,
    TranslatableSettings,
    get_settings,
    refresh_settings_cache,
)


def test_defaults():
    assert get_settings() == TranslatableSettings(
        default_locale=DEFAULT_LOCALE,
        table_suffix=DEFAULT_TABLE_SUFFIX,
        strict_upsert=True,
    )


def test_settings_are_cached(monkeypatch):
    first = get_settings()
    monkeypatch.setenv("TRANSLATABLE_DEFAULT_LOCALE", "de")
    assert get_settings() is first
    refresh_settings_cache()
    assert get_settings().default_locale == "de"


def test_blank_values_fall_back(monkeypatch):
    monkeypatch.setenv("TRANSLATABLE_DEFAULT_LOCALE", "   ")
    monkeypatch.setenv("TRANSLATABLE_TABLE_SUFFIX", "")
    refresh_settings_cache()
    settings = get_settings()
    assert settings.default_locale == "en"
    assert settings.table_suffix == "_locale"


@pytest.mark.parametrize(
    "raw,expected",
    [("false", False), ("0", False), ("off", False), ("yes", True), ("1", True), ("garbage", True)],
)
def test_strict_upsert_parsing(monkeypatch, raw, expected):
    monkeypatch.setenv("TRANSLATABLE_STRICT_UPSERT", raw)
    refresh_settings_cache()
    assert get_settings().strict_upsert is expected
