"""Logging configuration for Push Relay."""

import logging
import logging.config
import sys

from push_relay.config.base import BaseSettings

FORMATS = {
    "plain": "%(asctime)s %(levelname)s [%(name)s] %(message)s",
    "debug": "%(asctime)s %(levelname)s [%(name)s:%(lineno)d] %(message)s",
    "json": (
        '{"time": "%(asctime)s", "logger": "%(name)s", '
        '"level": "%(levelname)s", "message": "%(message)s"}'
    ),
}

# Client libraries that log every request at INFO
NOISY_LOGGERS = ("httpx", "httpcore", "google.auth", "sqlalchemy.engine")


def _formatter_name(settings: BaseSettings) -> str:
    if settings.ENVIRONMENT == "production":
        return "json"
    return "debug" if settings.DEBUG else "plain"


def setup_logging(settings: BaseSettings) -> None:
    """Route all logs to stdout at the configured level."""
    level = settings.LOG_LEVEL.upper()

    logging.config.dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                name: {"format": fmt, "datefmt": "%Y-%m-%dT%H:%M:%S"}
                for name, fmt in FORMATS.items()
            },
            "handlers": {
                "console": {
                    "class": "logging.StreamHandler",
                    "formatter": _formatter_name(settings),
                    "stream": sys.stdout,
                },
            },
            "root": {"level": level, "handlers": ["console"]},
            "loggers": {name: {"level": "WARNING"} for name in NOISY_LOGGERS},
        }
    )

    def log_uncaught(exc_type, exc_value, exc_traceback):
        if issubclass(exc_type, KeyboardInterrupt):
            sys.__excepthook__(exc_type, exc_value, exc_traceback)
            return
        logging.getLogger("push_relay").critical(
            "Uncaught exception", exc_info=(exc_type, exc_value, exc_traceback)
        )

    sys.excepthook = log_uncaught


def mask_token(token: str | None, visible: int = 20) -> str:
    """Shorten a device token for log output."""
    if not token:
        return "<empty>"
    if len(token) <= visible:
        return token
    return f"{token[:visible]}..."
