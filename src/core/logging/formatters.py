"""JSON (file) and human-readable (console) log formatters."""

import json
import logging
import re
import sys
from datetime import UTC, datetime
from typing import Any, Callable, Dict, Optional

from core.logging.context import get_log_context
from core.utils.json_serializers import json_serializer

# Structured fields copied from ``extra={...}``; the value is the type the
# field is coerced to, or None to keep it as given.
STRUCTURED_FIELDS: Dict[str, Optional[Callable[[Any], Any]]] = {
    "trace_id": None,
    "duration_seconds": float,
    # remote API
    "http_status": int,
    "api_endpoint": None,
    "api_method": None,
    "api_url": None,
    "base_url": None,
    "timeout_seconds": float,
    "response_body": None,
    # failures
    "error_type": None,
    "error_category": None,
    "error_message": None,
    "is_retryable": None,
    # folder location
    "logical_id": None,
    "lng_ref": None,
    "base_folder": None,
    "folder_path": None,
    "segment_count": int,
    "position": int,
    "total": int,
    "max_concurrent": int,
    "records_processed": int,
    "records_succeeded": int,
    "records_failed": int,
    "config_path": None,
}

REDACTED_URL_FIELDS = frozenset({"api_url", "base_url"})

_SECRET_QUERY_PARAM = re.compile(
    r"([?&])(token|access_token|key|secret|password|sig)=[^&#]*", re.IGNORECASE
)


def redact_url(url: str) -> str:
    """Blank out credentials carried in query parameters."""
    return _SECRET_QUERY_PARAM.sub(r"\1\2=[REDACTED]", url)


def _coerce(converter: Optional[Callable[[Any], Any]], value: Any) -> Any:
    if converter is None:
        return value
    try:
        return converter(value)
    except (TypeError, ValueError):
        return None


class JSONFormatter(logging.Formatter):
    """
    One JSON object per line, for log files read by jq or a log shipper.

    Every entry carries the timestamp, level, logger name and message, the
    current log context (session, operation, trace id) and whatever known
    structured fields the caller passed through ``extra``. Source location is
    added for DEBUG and ERROR records.
    """

    SOURCE_LEVELS = frozenset({logging.DEBUG, logging.ERROR, logging.CRITICAL})

    def format(self, record: logging.LogRecord) -> str:
        created = datetime.fromtimestamp(record.created, UTC)
        entry: Dict[str, Any] = {
            "ts": created.isoformat(timespec="milliseconds").replace("+00:00", "Z"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        entry.update({key: value for key, value in get_log_context().items() if value})

        if record.levelno in self.SOURCE_LEVELS:
            entry["file"] = f"{record.filename}:{record.lineno}"

        for name, converter in STRUCTURED_FIELDS.items():
            raw = getattr(record, name, None)
            if raw is None:
                continue
            value = _coerce(converter, raw)
            if name in REDACTED_URL_FIELDS and isinstance(value, str):
                value = redact_url(value)
            entry[name] = value

        if record.exc_info:
            error_type, error, _ = record.exc_info
            entry["exception"] = {
                "type": getattr(error_type, "__name__", None),
                "message": None if error is None else str(error),
                "stacktrace": self.formatException(record.exc_info),
            }

        return json.dumps(entry, default=json_serializer, ensure_ascii=False)


class ConsoleFormatter(logging.Formatter):
    """
    Single-line console output: ``time - LEVEL - [session] - [operation] - message``.

    Levels are colored only when the target stream is a terminal.
    """

    LEVEL_COLORS = {
        "DEBUG": "36",
        "INFO": "32",
        "WARNING": "33",
        "ERROR": "31",
        "CRITICAL": "35",
    }

    def __init__(self, *args, stream=None, **kwargs):
        super().__init__(*args, **kwargs)
        target = sys.stderr if stream is None else stream
        isatty = getattr(target, "isatty", None)
        self._colored = bool(isatty and isatty())

    def _level(self, levelname: str) -> str:
        code = self.LEVEL_COLORS.get(levelname)
        if self._colored and code:
            return f"\033[{code}m{levelname}\033[0m"
        return levelname

    def format(self, record: logging.LogRecord) -> str:
        context = get_log_context()

        stamp = datetime.fromtimestamp(record.created).strftime("%Y-%m-%d %H:%M:%S")
        fields = [stamp, self._level(record.levelname)]
        fields.extend(f"[{context[key]}]" for key in ("session", "operation") if context[key])

        trace_id = getattr(record, "trace_id", None) or context["trace_id"]
        logical_id = getattr(record, "logical_id", None)
        tags = []
        if trace_id:
            tags.append(f"[{trace_id}]")
        if logical_id:
            tags.append(f"[{logical_id}]")
        tags.append(record.getMessage())
        fields.append(" ".join(tags))

        line = " - ".join(fields)
        if record.exc_info:
            line += "\n" + self.formatException(record.exc_info)
        return line
