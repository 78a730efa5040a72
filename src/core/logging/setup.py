"""Root logger configuration for command-line runs."""

import logging
import secrets
import sys
from datetime import datetime
from logging.handlers import TimedRotatingFileHandler
from pathlib import Path
from typing import TextIO

from core.logging.context import set_log_context
from core.logging.formatters import ConsoleFormatter, JSONFormatter

PLAIN_FILE_FORMAT = "%(asctime)s %(levelname)-8s %(name)s [%(filename)s:%(lineno)d] %(message)s"

# Third-party loggers that are too chatty below WARNING
QUIET_LOGGERS = ("aiohttp", "aiohttp.client", "aiohttp.access", "asyncio")


def get_log_file_path(log_dir: Path, name: str = "ishremote") -> Path:
    """
    Log file for one invocation, grouped in a folder per day:
    ``<log_dir>/2026-01-05/ishremote_0105_1430.log``.
    """
    started = datetime.now()
    day_dir = Path(log_dir) / f"{started:%Y-%m-%d}"
    return day_dir / f"{name}_{started:%m%d_%H%M}.log"


def _console_handler(stream: TextIO, level: int) -> logging.Handler:
    handler = logging.StreamHandler(stream)
    handler.setLevel(level)
    handler.setFormatter(ConsoleFormatter(stream=stream))
    return handler


def _file_handler(
    path: Path, level: int, json_format: bool, backup_count: int
) -> logging.Handler:
    path.parent.mkdir(parents=True, exist_ok=True)
    handler = TimedRotatingFileHandler(
        path, when="midnight", backupCount=backup_count, encoding="utf-8"
    )
    handler.setLevel(level)
    handler.setFormatter(JSONFormatter() if json_format else logging.Formatter(PLAIN_FILE_FORMAT))
    return handler


def setup_logging(
    name: str = "ishremote",
    session: str | None = None,
    log_dir: Path | None = None,
    json_format: bool = True,
    console_level: int = logging.WARNING,
    file_level: int = logging.DEBUG,
    backup_count: int = 7,
    suppress_noisy: bool = True,
    stream: TextIO | None = None,
) -> logging.Logger:
    """
    Replace the root logger's handlers with a console handler and, when
    ``log_dir`` is given, a file handler rotated at midnight.

    The console handler writes to stderr unless ``stream`` is given: stdout
    carries the command's results.

    Args:
        name: Name of the returned logger and prefix of the log file
        session: Session name put into the log context
        log_dir: Directory for log files, or None for console only
        json_format: JSON lines in the log file instead of plain text
        console_level: Minimum level shown on the console
        file_level: Minimum level written to the log file
        backup_count: Rotated log files kept
        suppress_noisy: Raise HTTP client loggers to WARNING
        stream: Console stream
    """
    if session:
        set_log_context(session=session)

    handlers = [_console_handler(sys.stderr if stream is None else stream, console_level)]
    log_file = None
    if log_dir is not None:
        log_file = get_log_file_path(Path(log_dir), name=name)
        handlers.append(_file_handler(log_file, file_level, json_format, backup_count))

    root = logging.getLogger()
    root.handlers.clear()
    root.setLevel(logging.DEBUG)
    for handler in handlers:
        root.addHandler(handler)

    if suppress_noisy:
        for quiet in QUIET_LOGGERS:
            logging.getLogger(quiet).setLevel(logging.WARNING)

    logger = logging.getLogger(name)
    logger.debug(f"Logging configured: file={log_file or '-'}")
    return logger


def generate_trace_id() -> str:
    """Trace id for one invocation: ``t-YYYYMMDD-HHMMSS-xxxx``."""
    return f"t-{datetime.now():%Y%m%d-%H%M%S}-{secrets.token_hex(2)}"
