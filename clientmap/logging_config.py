"""
Logging setup for Client Map.

Everything logs under the 'clientmap' logger into logs/clientmap.log
(rotated at 5 MB, 3 backups). LOG_LEVEL picks the level, INFO by default.
The configured SHEETS_SCRIPT_URL never reaches the file: it is written as <sheets-url>.

Lines look like:
    2026-10-19 14:32:01 | DEBUG    | CALL clients_list | args=(search='sol')
    2026-10-19 14:32:01 | INFO     | OK   clients_list | 412ms
    2026-10-19 14:32:01 | ERROR    | FAIL clients_list | RemoteError: timed out | 3ms
"""

import functools
import logging
import logging.handlers
import os
import time
from pathlib import Path

LOGGER_NAME = "clientmap"

_LOG_DIR = Path(__file__).parent.parent / "logs"
_LOG_FILE = _LOG_DIR / "clientmap.log"
_FORMAT = "%(asctime)s | %(levelname)-8s | %(message)s"
_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
_MAX_BYTES = 5 * 1024 * 1024
_BACKUP_COUNT = 3
_MAX_ARG_CHARS = 120
_URL_MASK = "<sheets-url>"


class _MaskScriptUrl(logging.Filter):
    """Rewrites any message containing the live SHEETS_SCRIPT_URL."""

    def filter(self, record: logging.LogRecord) -> bool:
        url = os.environ.get("SHEETS_SCRIPT_URL")
        if not url:
            return True
        message = record.getMessage()
        if url in message:
            record.msg, record.args = message.replace(url, _URL_MASK), ()
        return True


def _file_handler() -> logging.Handler:
    handler = logging.handlers.RotatingFileHandler(
        _LOG_FILE, maxBytes=_MAX_BYTES, backupCount=_BACKUP_COUNT, encoding="utf-8",
    )
    handler.setFormatter(logging.Formatter(_FORMAT, datefmt=_DATE_FORMAT))
    handler.addFilter(_MaskScriptUrl())
    return handler


def configure_logging() -> logging.Logger:
    """Attach the file handler once; later calls return the logger untouched."""
    logger = logging.getLogger(LOGGER_NAME)
    if logger.handlers:
        return logger

    _LOG_DIR.mkdir(parents=True, exist_ok=True)
    level = getattr(logging, os.environ.get("LOG_LEVEL", "INFO").upper(), None)
    logger.setLevel(level if isinstance(level, int) else logging.INFO)
    logger.addHandler(_file_handler())
    return logger


def _format_arg(value) -> str:
    text = repr(value)
    if len(text) <= _MAX_ARG_CHARS:
        return text
    return text[:_MAX_ARG_CHARS - 3] + "..."


def _signature(args, kwargs) -> str:
    parts = [_format_arg(a) for a in args]
    parts += [f"{key}={_format_arg(value)}" for key, value in kwargs.items()]
    return ", ".join(parts) or "-"


def log_call(func):
    """Trace a call: CALL at DEBUG, OK with elapsed ms at INFO, FAIL at ERROR (re-raised)."""

    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        logger = logging.getLogger(LOGGER_NAME)
        logger.debug(f"CALL {func.__name__} | args=({_signature(args, kwargs)})")
        started = time.perf_counter()

        def elapsed() -> int:
            return int((time.perf_counter() - started) * 1000)

        try:
            result = func(*args, **kwargs)
        except Exception as exc:
            logger.error(f"FAIL {func.__name__} | {type(exc).__name__}: {exc} | {elapsed()}ms")
            raise
        logger.info(f"OK   {func.__name__} | {elapsed()}ms")
        return result

    return wrapper
