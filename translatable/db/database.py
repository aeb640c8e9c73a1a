"""
Database engine and session management.

Builds the SQLAlchemy engine from environment configuration with a test
fallback (SQLite in-memory) and exposes a session dependency plus the executor
bridge used by the async record API.
"""
import asyncio
import functools
import logging
import os
import sys
import threading
import weakref
from functools import lru_cache
from typing import Any, Callable, Optional, TypeVar

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import SingletonThreadPool, StaticPool

logger = logging.getLogger(__name__)

T = TypeVar("T")

_MEMORY_SQLITE_URL = "sqlite+pysqlite:///:memory:"


def _is_pytest_runtime() -> bool:
    """Best-effort detection that we're executing under pytest."""
    if os.getenv("PYTEST_RUNNING") == "1":
        return True
    if "PYTEST_CURRENT_TEST" in os.environ:
        return True
    return "pytest" in sys.modules


def _get_database_url() -> str:
    # Explicit test database wins, then DATABASE_URL, then POSTGRES_* components
    if os.getenv("TRANSLATABLE_TEST_DB"):
        return os.getenv("TRANSLATABLE_TEST_DB")
    if os.getenv("DATABASE_URL"):
        return os.getenv("DATABASE_URL")

    db_user = os.getenv("POSTGRES_USER")
    db_password = os.getenv("POSTGRES_PASSWORD")
    db_host = os.getenv("POSTGRES_HOST")
    db_port = os.getenv("POSTGRES_PORT")
    db_name = os.getenv("POSTGRES_DB")

    if not all([db_user, db_password, db_host, db_port, db_name]):
        if _is_pytest_runtime():
            return _MEMORY_SQLITE_URL
        missing = []
        if not db_user: missing.append("POSTGRES_USER")
        if not db_password: missing.append("POSTGRES_PASSWORD")
        if not db_host: missing.append("POSTGRES_HOST")
        if not db_port: missing.append("POSTGRES_PORT")
        if not db_name: missing.append("POSTGRES_DB")
        raise ValueError(f"Missing required database environment variables: {', '.join(missing)}")

    return f"postgresql://{db_user}:{db_password}@{db_host}:{db_port}/{db_name}"


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):  # pragma: no cover - trivial
    # SQLite ignores ON DELETE CASCADE unless the pragma is on per connection
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def create_engine_for_url(url: str, **kwargs: Any) -> Engine:
    """Create an engine with the SQLite adjustments the record layer relies on."""
    if url.startswith("sqlite"):
        kwargs.setdefault("connect_args", {"check_same_thread": False})
        if ":memory:" in url:
            # In-memory SQLite with StaticPool so the schema persists across connections
            kwargs.setdefault("poolclass", StaticPool)
    eng = create_engine(url, **kwargs)
    if eng.dialect.name == "sqlite":
        event.listen(eng, "connect", _enable_sqlite_foreign_keys)
    logger.debug("engine_created: dialect=%s", eng.dialect.name)
    return eng


@lru_cache(maxsize=None)
def get_engine() -> Engine:
    """Return the process-wide engine built from the environment."""
    return create_engine_for_url(_get_database_url())


def reset_engine() -> None:
    """Dispose the cached engine (useful for tests switching databases)."""
    if get_engine.cache_info().currsize:
        get_engine().dispose()
    get_engine.cache_clear()


def get_session_factory(bind: Engine | None = None) -> sessionmaker:
    return sessionmaker(autocommit=False, autoflush=False, bind=bind or get_engine())


def get_db(bind: Engine | None = None):
    """Yield a database session and close it when finished."""
    db = get_session_factory(bind)()
    try:
        yield db
    finally:
        db.close()


async def run_in_executor(fn: Callable[..., T], *args: Any, **kwargs: Any) -> T:
    """Run blocking database work on the loop's default executor."""
    loop = asyncio.get_running_loop()
    return await loop.run_in_executor(None, functools.partial(fn, *args, **kwargs))


# Pools that hand every thread the same DBAPI connection (StaticPool) or pin
# one connection per thread (SingletonThreadPool). Work against them is
# serialized so transactions from executor threads never interleave.
_SHARED_CONNECTION_POOLS = (StaticPool, SingletonThreadPool)
_engine_locks: "weakref.WeakKeyDictionary[Engine, threading.RLock]" = weakref.WeakKeyDictionary()
_engine_locks_guard = threading.Lock()


def shares_connection(bind: Any) -> bool:
    return isinstance(getattr(bind, "pool", None), _SHARED_CONNECTION_POOLS)


def engine_lock(bind: Any) -> Optional[threading.RLock]:
    """Return the lock guarding ``bind``, or None when its pool needs none."""
    if not shares_connection(bind):
        return None
    with _engine_locks_guard:
        lock = _engine_locks.get(bind)
        if lock is None:
            lock = _engine_locks[bind] = threading.RLock()
        return lock


async def run_on_engine(bind: Any, fn: Callable[..., T], *args: Any, **kwargs: Any) -> T:
    """Like :func:`run_in_executor`, holding the engine lock when one applies."""
    lock = engine_lock(bind)
    if lock is None:
        return await run_in_executor(fn, *args, **kwargs)

    def _locked() -> T:
        with lock:
            return fn(*args, **kwargs)

    return await run_in_executor(_locked)
