"""Logging configuration."""

import logging
import sys

from pythonjsonlogger.json import JsonFormatter

from storefront.config import get_settings

settings = get_settings()

NOISY_LOGGERS = ("uvicorn", "httpx", "httpcore", "stripe", "pymongo")


class RequestIdFilter(logging.Filter):
    """Give every record a ``request_id`` so formats can always reference it.

    ``LoggingMiddleware`` passes the real id through ``extra``; records logged
    outside a request (startup, scripts, background sweeps) get ``-``.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        if not hasattr(record, "request_id"):
            record.request_id = "-"
        return True


def setup_logging() -> None:
    """Configure application logging."""
    log_level = getattr(logging, settings.log_level.upper(), logging.INFO)

    root = logging.getLogger()
    root.setLevel(log_level)
    root.handlers.clear()

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(log_level)
    console_handler.addFilter(RequestIdFilter())

    if settings.log_format == "json":
        formatter = JsonFormatter(
            "%(asctime)s %(name)s %(levelname)s %(request_id)s %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
            rename_fields={"levelname": "level"},
        )
    else:
        formatter = logging.Formatter(
            "%(asctime)s - %(name)s - %(levelname)s - [%(request_id)s] %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )

    console_handler.setFormatter(formatter)
    root.addHandler(console_handler)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    root.info(
        "Logging configured: level=%s, format=%s, environment=%s",
        settings.log_level,
        settings.log_format,
        settings.environment,
    )
