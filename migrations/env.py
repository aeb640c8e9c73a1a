import os
from logging.config import fileConfig

from sqlalchemy import create_engine
from sqlalchemy import pool
from sqlalchemy.engine.url import make_url

from alembic import context

# this is the Alembic Config object, which provides
# access to the values within the .ini file in use.
config = context.config

# Interpret the config file for Python logging.
if config.config_file_name is not None:
    fileConfig(config.config_file_name, disable_existing_loggers=False)

from translatable.db.models import Base
from translatable.utils.log_config import configure_logging

# LOG_LEVEL overrides the ini levels for the library loggers
configure_logging()
target_metadata = Base.metadata


def _database_url() -> str:
    return (
        os.getenv("TRANSLATABLE_TEST_DB")
        or os.getenv("DATABASE_URL")
        or config.get_main_option("sqlalchemy.url")
    )


def run_migrations_offline() -> None:
    """Run migrations in 'offline' mode, emitting SQL to the script output."""
    context.configure(
        url=_database_url(),
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
    )

    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    """Run migrations in 'online' mode against a live connection."""
    url = _database_url()

    # ALEMBIC_USE_CREATOR=1 builds psycopg2 connections directly from the URL,
    # bypassing SQLAlchemy's URL handling for libpq auth setups it can't express.
    if os.getenv("ALEMBIC_USE_CREATOR") == "1":
        import psycopg2

        u = make_url(url)

        def _creator():
            return psycopg2.connect(
                host=u.host,
                port=u.port or 5432,
                user=u.username,
                password=u.password,
                dbname=u.database,
            )

        connectable = create_engine("postgresql+psycopg2://", poolclass=pool.NullPool, creator=_creator)
    else:
        connectable = create_engine(url, poolclass=pool.NullPool)

    with connectable.connect() as connection:
        context.configure(
            connection=connection, target_metadata=target_metadata
        )

        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
