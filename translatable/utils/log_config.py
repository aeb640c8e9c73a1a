"""Apply `LOG_LEVEL` to the library loggers; called by the migration environment."""
import logging
import os


def configure_logging(level_name: str | None = None) -> int:
    """Configure root logging from ``LOG_LEVEL`` and return the numeric level."""
    name = (level_name or os.getenv("LOG_LEVEL", "INFO")).upper()
    level = getattr(logging, name, logging.INFO)
    logging.basicConfig(level=level)
    logging.getLogger("translatable").setLevel(level)
    return level
