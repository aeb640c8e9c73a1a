import logging
from pathlib import Path

import pytest

alembic = pytest.importorskip("alembic")
from alembic import command
from alembic.config import Config
from sqlalchemy import create_engine, inspect

ROOT = Path(__file__).resolve().parents[2]


def _config(url: str) -> Config:
    cfg = Config(str(ROOT / "alembic.ini"))
    cfg.set_main_option("script_location", str(ROOT / "migrations"))
    cfg.set_main_option("sqlalchemy.url", url)
    return cfg


@pytest.fixture
def library_logger():
    logger = logging.getLogger("translatable")
    previous = logger.level
    yield logger
    logger.setLevel(previous)


def test_upgrade_and_downgrade(tmp_path, monkeypatch, library_logger):
    url = f"sqlite:///{tmp_path / 'migrated.db'}"
    monkeypatch.delenv("DATABASE_URL", raising=False)
    monkeypatch.setenv("LOG_LEVEL", "warning")
    monkeypatch.setenv("TRANSLATABLE_TEST_DB", url)
    cfg = _config(url)

    command.upgrade(cfg, "head")
    assert library_logger.level == logging.WARNING
    engine = create_engine(url)
    try:
        inspector = inspect(engine)
        assert {"translatable_table", "translatable_table_locale"} <= set(inspector.get_table_names())
        uniques = inspector.get_unique_constraints("translatable_table_locale")
        assert [sorted(u["column_names"]) for u in uniques] == [["locale", "owner_id"]]
        fks = inspector.get_foreign_keys("translatable_table_locale")
        assert fks[0]["referred_table"] == "translatable_table"

        command.downgrade(cfg, "base")
        assert "translatable_table_locale" not in inspect(engine).get_table_names()
    finally:
        engine.dispose()
