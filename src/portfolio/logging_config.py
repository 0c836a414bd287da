import logging
from logging import config as logging_config

from portfolio.settings import LoggingSettings, get_logging_settings

# botocore logs every retry and credential lookup at INFO
LIBRARY_LOGGERS = ("botocore", "boto3", "aiobotocore", "urllib3", "httpx", "httpcore")

APP_FORMAT = "%(asctime)s %(levelname)-5s [%(name)s] %(message)s"
ACCESS_FORMAT = "%(asctime)s %(levelname)-5s %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


class ColoredFormatter(logging.Formatter):
    """Prefixes the level name with an ANSI color for terminal output."""

    LEVEL_COLORS = {
        logging.DEBUG: "\x1b[36m",
        logging.INFO: "\x1b[32m",
        logging.WARNING: "\x1b[33m",
        logging.ERROR: "\x1b[31m",
        logging.CRITICAL: "\x1b[41m",
    }
    RESET = "\x1b[0m"

    def format(self, record: logging.LogRecord) -> str:
        plain = record.levelname
        color = self.LEVEL_COLORS.get(record.levelno)
        if color:
            record.levelname = f"{color}{plain}{self.RESET}"
        try:
            return super().format(record)
        finally:
            record.levelname = plain


def build_logging_config(settings: LoggingSettings, level: str | None = None) -> dict:
    """dictConfig schema for the app, uvicorn and third-party loggers.

    ``level`` overrides ``settings.level`` (the CLI's --verbose flag).
    """
    level = (level or settings.level).upper()
    formatter_class = ColoredFormatter if settings.colored else logging.Formatter

    def formatter(fmt: str) -> dict:
        return {"()": formatter_class, "fmt": fmt, "datefmt": DATE_FORMAT}

    loggers = {
        "uvicorn": {"handlers": ["app"], "level": level, "propagate": False},
        "uvicorn.error": {"handlers": ["app"], "level": level, "propagate": False},
        "uvicorn.access": {"handlers": ["access"], "level": level, "propagate": False},
    }
    if settings.quiet_libraries:
        loggers.update({name: {"level": "WARNING"} for name in LIBRARY_LOGGERS})

    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {"app": formatter(APP_FORMAT), "access": formatter(ACCESS_FORMAT)},
        "handlers": {
            "app": {"class": "logging.StreamHandler", "formatter": "app", "stream": "ext://sys.stdout"},
            "access": {"class": "logging.StreamHandler", "formatter": "access", "stream": "ext://sys.stdout"},
        },
        "loggers": loggers,
        "root": {"handlers": ["app"], "level": level},
    }


def configure_logging(settings: LoggingSettings | None = None, level: str | None = None) -> None:
    """Apply the LOG_* settings to the logging system."""
    logging_config.dictConfig(build_logging_config(settings or get_logging_settings(), level))


__all__ = ["build_logging_config", "configure_logging", "ColoredFormatter"]
