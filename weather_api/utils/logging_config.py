"""
Logging setup for the InEvent Weather API.

Everything goes to stdout; ``weather_api.log`` under ``LOG_DIR`` keeps INFO
and above, ``weather_api_errors.log`` keeps errors only.
"""

import logging
import sys
from pathlib import Path
from logging.handlers import RotatingFileHandler
from weather_api.config import settings

LOG_FILE_MAX_BYTES = 10 * 1024 * 1024
LOG_FILE_BACKUPS = 5

# Third-party loggers and the lowest level they may emit
QUIET_LOGGERS = {
    "uvicorn.access": logging.WARNING,
    "sqlalchemy.engine": logging.WARNING,
    "httpx": logging.WARNING,
    "passlib": logging.ERROR,
}


def _formatter() -> logging.Formatter:
    if settings.DEBUG:
        fmt = "%(asctime)s - %(name)s - %(levelname)s - %(funcName)s:%(lineno)d - %(message)s"
    else:
        fmt = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
    return logging.Formatter(fmt=fmt, datefmt="%Y-%m-%d %H:%M:%S")


def _file_handler(path: Path, level: int, formatter: logging.Formatter) -> RotatingFileHandler:
    handler = RotatingFileHandler(
        path,
        maxBytes=LOG_FILE_MAX_BYTES,
        backupCount=LOG_FILE_BACKUPS,
        encoding="utf-8",
    )
    handler.setLevel(level)
    handler.setFormatter(formatter)
    return handler


def setup_logging() -> logging.Logger:
    """
    Configure the root logger.

    Safe to call more than once: existing root handlers are replaced.
    """
    log_dir = Path(settings.LOG_DIR)
    log_dir.mkdir(parents=True, exist_ok=True)
    formatter = _formatter()

    root = logging.getLogger()
    root.setLevel(settings.LOG_LEVEL)
    root.handlers.clear()

    console = logging.StreamHandler(sys.stdout)
    console.setLevel(logging.DEBUG if settings.DEBUG else logging.INFO)
    console.setFormatter(formatter)
    root.addHandler(console)

    root.addHandler(_file_handler(log_dir / "weather_api.log", logging.INFO, formatter))
    root.addHandler(_file_handler(log_dir / "weather_api_errors.log", logging.ERROR, formatter))

    for name, level in QUIET_LOGGERS.items():
        logging.getLogger(name).setLevel(level)

    root.debug(f"Logging to {log_dir.resolve()} at level {settings.LOG_LEVEL}")
    return root


def get_logger(name: str) -> logging.Logger:
    """Module logger; pass ``__name__``."""
    return logging.getLogger(name)
