"""
Structured JSON logging.
Outputs JSON lines in production, human-readable in development.
"""
import logging
import sys
from typing import Any, Optional

import json_log_formatter


class JsonFormatter(json_log_formatter.JSONFormatter):
    """JSON lines carrying level and logger name next to the extra fields."""

    def json_record(self, message: str, extra: dict[str, Any], record: logging.LogRecord) -> dict[str, Any]:
        payload = super().json_record(message, extra, record)
        payload["level"] = record.levelname
        payload["logger"] = record.name
        return payload


def setup_logging(level: Optional[str] = None) -> None:
    from tracker.config.settings import settings

    root_logger = logging.getLogger()
    level = level or settings.LOG_LEVEL
    root_logger.setLevel(getattr(logging, level.upper(), logging.INFO))

    handler = logging.StreamHandler(sys.stdout)

    if settings.ENV == "production":
        handler.setFormatter(JsonFormatter())
    else:
        handler.setFormatter(
            logging.Formatter(
                fmt="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
                datefmt="%Y-%m-%d %H:%M:%S",
            )
        )

    root_logger.handlers.clear()
    root_logger.addHandler(handler)

    # Quiet noisy libraries
    for lib in ("aiogram", "aiohttp", "urllib3"):
        logging.getLogger(lib).setLevel(logging.WARNING)
