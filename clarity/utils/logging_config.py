"""Logging for the clarity CLI.

Log lines go to stderr so that the rendered paper list on stdout stays
clean. ``--json-logs`` switches to one JSON object per line, carrying the
search token and query attached by the state machine and the arXiv client.
"""

import json
import logging
import sys
from typing import Any

from clarity.utils.config import get_settings

_TEXT_FORMAT = "[%(asctime)s] %(levelname)s - %(name)s - %(message)s"
_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

_logging_configured = False


class JsonFormatter(logging.Formatter):
    """One JSON object per record, tagged with app name and environment.

    Keys passed as ``extra={"extra_fields": {...}}`` are merged into the
    object; values that are not JSON types are written with ``str``.
    """

    def format(self, record: logging.LogRecord) -> str:
        settings = get_settings()

        log_data: dict[str, Any] = {
            "timestamp": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "name": record.name,
            "message": record.getMessage(),
            "app_name": settings.APP_NAME,
            "environment": settings.ENVIRONMENT,
        }

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        if hasattr(record, "extra_fields"):
            log_data.update(record.extra_fields)

        return json.dumps(log_data, default=str)


class StandardFormatter(logging.Formatter):
    """Single-line text records for a terminal."""

    def __init__(self) -> None:
        super().__init__(fmt=_TEXT_FORMAT, datefmt=_DATE_FORMAT)


def setup_logging(use_json: bool = False, force_reconfigure: bool = False) -> None:
    """Attach the stderr handler at ``LOG_LEVEL``.

    Repeated calls are no-ops unless ``force_reconfigure`` is set. Above
    DEBUG the ``arxiv`` library's per-page request logs are silenced.
    """
    global _logging_configured

    if _logging_configured and not force_reconfigure:
        return

    settings = get_settings()
    root_logger = logging.getLogger()

    # Only our stderr handler is replaced; pytest's caplog handler stays
    for handler in [
        h for h in root_logger.handlers
        if isinstance(h, logging.StreamHandler) and h.stream == sys.stderr
    ]:
        root_logger.removeHandler(handler)

    log_level = getattr(logging, settings.LOG_LEVEL)
    root_logger.setLevel(log_level)

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(log_level)
    console_handler.setFormatter(JsonFormatter() if use_json else StandardFormatter())
    root_logger.addHandler(console_handler)

    if log_level > logging.DEBUG:
        logging.getLogger("arxiv").setLevel(logging.WARNING)

    _logging_configured = True

    logging.getLogger(__name__).debug(
        f"Logging configured: level={settings.LOG_LEVEL}, "
        f"format={'json' if use_json else 'standard'}"
    )


def get_logger(name: str) -> logging.Logger:
    """Logger for ``name``, configuring text logging on first use."""
    if not _logging_configured:
        setup_logging()
    return logging.getLogger(name)


def reset_logging() -> None:
    """Drop all root handlers and restore library levels (used by tests)."""
    global _logging_configured

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.setLevel(logging.WARNING)
    logging.getLogger("arxiv").setLevel(logging.NOTSET)

    _logging_configured = False
