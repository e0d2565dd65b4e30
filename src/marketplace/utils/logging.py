"""Logging configuration for the marketplace.

structlog sits on top of the standard library so protean's own loggers and
ours end up in the same handlers. Request-scoped keys (method, path, the
calling profile) are bound with ``add_context`` and merged into every line.

Supplier phone numbers reach the logs through the SMS relay; ``mask_phone``
keeps only their last four digits.
"""

import logging
import logging.handlers
import os
import sys
from pathlib import Path
from typing import Any

import structlog

_LEVELS = {
    "production": "INFO",
    "staging": "INFO",
    "development": "DEBUG",
    "test": "WARNING",
}

# Environments that ship JSON lines to the log collector
_STRUCTURED_ENVIRONMENTS = ("production", "staging")

_QUIET_LOGGERS = ("protean", "asyncio", "sqlalchemy.engine")

_MAX_LOG_BYTES = 10 * 1024 * 1024


def current_environment() -> str:
    return (os.getenv("ENVIRONMENT") or os.getenv("PROTEAN_ENV") or "development").lower()


def get_log_level() -> str:
    """``LOG_LEVEL`` wins; otherwise the level follows the environment."""
    return os.getenv("LOG_LEVEL", _LEVELS.get(current_environment(), "INFO"))


def mask_phone(logger, method_name, event_dict):
    """structlog processor: ``+251911234567`` is logged as ``*********4567``."""
    phone = event_dict.get("phone")
    if isinstance(phone, str) and len(phone) > 4:
        event_dict["phone"] = "*" * (len(phone) - 4) + phone[-4:]
    return event_dict


def _rotating_file(path: Path, level) -> logging.Handler:
    handler = logging.handlers.RotatingFileHandler(
        filename=path, maxBytes=_MAX_LOG_BYTES, backupCount=5, encoding="utf-8"
    )
    handler.setLevel(level)
    return handler


def setup_stdlib_logging() -> None:
    """Send everything to stdout, and to rotating files when ``LOG_DIR`` is set."""
    log_level = get_log_level()

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)
    root_logger.handlers = [logging.StreamHandler(sys.stdout)]

    if log_dir := os.getenv("LOG_DIR"):
        log_dir = Path(log_dir)
        log_dir.mkdir(parents=True, exist_ok=True)
        root_logger.addHandler(_rotating_file(log_dir / "hertrade.log", log_level))
        root_logger.addHandler(_rotating_file(log_dir / "hertrade_error.log", logging.ERROR))

    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def build_processors(environment: str) -> list:
    processors = [
        structlog.stdlib.filter_by_level,
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        mask_phone,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        structlog.processors.CallsiteParameterAdder(
            [
                structlog.processors.CallsiteParameter.MODULE,
                structlog.processors.CallsiteParameter.FUNC_NAME,
                structlog.processors.CallsiteParameter.LINENO,
            ]
        ),
    ]

    if environment in _STRUCTURED_ENVIRONMENTS:
        processors.append(structlog.processors.JSONRenderer())
    else:
        formatter = structlog.dev.RichTracebackFormatter(show_locals=False, max_frames=2)
        processors.append(structlog.dev.ConsoleRenderer(colors=False, exception_formatter=formatter))
    return processors


def setup_structlog() -> None:
    structlog.configure(
        processors=build_processors(current_environment()),
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def configure_logging() -> None:
    setup_stdlib_logging()
    setup_structlog()


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    return structlog.get_logger(name)


def add_context(**kwargs: Any) -> None:
    """Bind keys that every later log line in this request carries."""
    structlog.contextvars.bind_contextvars(**kwargs)


def clear_context() -> None:
    structlog.contextvars.clear_contextvars()
