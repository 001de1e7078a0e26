"""
Logging setup for the DailyPulse backend.

Four named loggers, all under the "dailypulse" namespace:
- api: HTTP layer and exception handlers
- services: Report, remark, device token and in-app notification services
- push: Report notification pipeline (recipients, tokens, multicast delivery)
- db: Database errors and migrations

Production (DAILYPULSE_ENV=production) writes one JSON object per line to
a rotating file per logger. Anything else logs readable lines to stdout and
lets records propagate to the root logger.
"""

import json
import logging
import logging.handlers
import os
import sys
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Optional


LOGGER_PREFIX = "dailypulse"
LOGGER_NAMES = ("api", "services", "push", "db")

ROTATE_MAX_BYTES = 10 * 1024 * 1024
ROTATE_BACKUPS = 5

# Attributes present on every LogRecord; anything else came from extra={...}
_RESERVED_RECORD_ATTRS = set(
    logging.LogRecord("", 0, "", 0, "", (), None).__dict__.keys()
) | {"message", "asctime"}


class JSONFormatter(logging.Formatter):
    """
    One JSON object per record.

    Fixed keys are timestamp (UTC, ISO 8601), level, logger, message,
    module, function and line, plus exception when exc_info is set.
    Fields passed with extra={...} are merged in at the top level.
    """

    def format(self, record: logging.LogRecord) -> str:
        entry: Dict[str, Any] = {
            "timestamp": f"{datetime.utcnow().isoformat()}Z",
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)

        entry.update(
            (key, value)
            for key, value in record.__dict__.items()
            if key not in _RESERVED_RECORD_ATTRS and not key.startswith("_")
        )
        return json.dumps(entry, default=str)


class ConsoleFormatter(logging.Formatter):
    """
    Readable single-line format for development.

    Example: [2026-10-17 10:30:45] INFO - dailypulse.push - Found 2 admin(s).
    """

    def __init__(self):
        super().__init__(
            fmt="[%(asctime)s] %(levelname)s - %(name)s - %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )


def _level_from_env() -> int:
    name = os.environ.get("DAILYPULSE_LOG_LEVEL", "INFO").upper()
    return getattr(logging, name, logging.INFO)


def _production() -> bool:
    return os.environ.get("DAILYPULSE_ENV", "development").lower() == "production"


def _build_handler(short_name: str, level: int, production: bool) -> logging.Handler:
    """Rotating JSON file handler in production, stdout console handler otherwise."""
    if production:
        log_dir = Path(os.environ.get("DAILYPULSE_LOG_DIR", "logs"))
        log_dir.mkdir(parents=True, exist_ok=True)
        handler: logging.Handler = logging.handlers.RotatingFileHandler(
            log_dir / f"{short_name}.log",
            maxBytes=ROTATE_MAX_BYTES,
            backupCount=ROTATE_BACKUPS,
            encoding="utf-8",
        )
        handler.setFormatter(JSONFormatter())
    else:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(ConsoleFormatter())
    handler.setLevel(level)
    return handler


def configure_logging() -> Dict[str, logging.Logger]:
    """
    (Re)configure every DailyPulse logger from the environment.

    Environment:
        DAILYPULSE_ENV: "production" enables JSON file logging
        DAILYPULSE_LOG_LEVEL: Level name (default: INFO)
        DAILYPULSE_LOG_DIR: Log file directory in production (default: logs)

    Returns:
        Mapping of short logger name to Logger
    """
    level = _level_from_env()
    production = _production()

    configured: Dict[str, logging.Logger] = {}
    for short_name in LOGGER_NAMES:
        logger = logging.getLogger(f"{LOGGER_PREFIX}.{short_name}")
        logger.setLevel(level)
        logger.handlers.clear()
        logger.addHandler(_build_handler(short_name, level, production))
        # Propagate outside production so pytest's caplog sees pipeline records
        logger.propagate = not production
        configured[short_name] = logger
    return configured


_loggers: Optional[Dict[str, logging.Logger]] = None


def get_logger(name: str) -> logging.Logger:
    """
    Look up a DailyPulse logger by short name, configuring logging on first use.

    Args:
        name: One of api, services, push, db

    Raises:
        ValueError: If the name is not one of the configured loggers

    Example:
        >>> logger = get_logger("push")
        >>> logger.info("Found tokens", extra={"token_count": 3})
    """
    global _loggers
    if _loggers is None:
        _loggers = configure_logging()

    try:
        return _loggers[name]
    except KeyError:
        raise ValueError(
            f"Unknown logger '{name}'; expected one of: {', '.join(LOGGER_NAMES)}"
        ) from None


def init_logging() -> Dict[str, logging.Logger]:
    """Configure logging at application startup and return the loggers."""
    global _loggers
    _loggers = configure_logging()
    return _loggers
