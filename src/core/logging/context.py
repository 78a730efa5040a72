"""Context variables for structured logging."""

from contextvars import ContextVar
from typing import Dict, Optional

_session_name: ContextVar[str] = ContextVar("session_name", default="")
_operation: ContextVar[str] = ContextVar("operation", default="")
_trace_id: ContextVar[str] = ContextVar("trace_id", default="")


def set_log_context(
    session: Optional[str] = None,
    operation: Optional[str] = None,
    trace_id: Optional[str] = None,
) -> None:
    if session is not None:
        _session_name.set(session)
    if operation is not None:
        _operation.set(operation)
    if trace_id is not None:
        _trace_id.set(trace_id)


def get_log_context() -> Dict[str, str]:
    return {
        "session": _session_name.get(),
        "operation": _operation.get(),
        "trace_id": _trace_id.get(),
    }


def clear_log_context() -> None:
    _session_name.set("")
    _operation.set("")
    _trace_id.set("")
