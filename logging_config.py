from __future__ import annotations

import logging
from logging.config import dictConfig

from settings import get_settings

_CONTEXT_KEYS = (
    "station",
    "timestamp",
    "path",
    "record_number",
    "reason",
    "stored",
    "error_count",
)

_configured = False


class ContextualFormatter(logging.Formatter):
    """Append ``key=value`` pairs for the ingest context carried in ``extra``."""

    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)
        context = [
            f"{key}={getattr(record, key)}" for key in _CONTEXT_KEYS if getattr(record, key, None) is not None
        ]
        if context:
            return f"{message} | {' '.join(context)}"
        return message


def configure_logging(level: str | int | None = None) -> None:
    """Configure process-wide logging once, appending record context to each line."""
    global _configured
    if _configured:
        return

    log_level = level if level is not None else get_settings().log_level
    dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "contextual": {
                    "()": ContextualFormatter,
                    "fmt": "%(asctime)s %(levelname)s [%(name)s] %(message)s",
                    "datefmt": "%Y-%m-%dT%H:%M:%S",
                }
            },
            "handlers": {
                "stderr": {
                    "class": "logging.StreamHandler",
                    "stream": "ext://sys.stderr",
                    "formatter": "contextual",
                }
            },
            "root": {"handlers": ["stderr"], "level": log_level},
        }
    )
    _configured = True
