import pytest

from translatable.db import models
from translatable.db.database import create_engine_for_url
from translatable.utils.settings import refresh_settings_cache

from tests.fixtures.records import fixture_metadata

_SETTINGS_ENV = (
    "TRANSLATABLE_DEFAULT_LOCALE",
    "TRANSLATABLE_TABLE_SUFFIX",
    "TRANSLATABLE_STRICT_UPSERT",
)


@pytest.fixture(autouse=True)
def _reset_settings(monkeypatch):
    """Clear env + cached settings for each test to avoid cross-contamination."""
    for name in _SETTINGS_ENV:
        monkeypatch.delenv(name, raising=False)
    refresh_settings_cache()
    yield
    refresh_settings_cache()


@pytest.fixture
def engine(tmp_path):
    # File-backed: one database per test, pooled connections per thread
    eng = create_engine_for_url(f"sqlite+pysqlite:///{tmp_path / 'translatable.db'}")
    models.Base.metadata.create_all(bind=eng)
    fixture_metadata.create_all(bind=eng)
    try:
        yield eng
    finally:
        eng.dispose()


@pytest.fixture
def db(engine):
    from translatable.db.database import get_db

    session_gen = get_db(engine)
    session = next(session_gen)
    try:
        yield session
    finally:
        session_gen.close()
