"""``json.dumps(default=...)`` hook for values that show up in log records."""

from datetime import date, datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel


def json_serializer(obj: Any) -> Any:
    """
    Convert ``obj`` to something the json module can encode.

    Timestamps become ISO 8601 strings, enums their value, pydantic models a
    dict keyed by wire names, and sets or tuples a list. Anything else, paths
    included, falls back to ``str(obj)``.
    """
    if isinstance(obj, BaseModel):
        return obj.model_dump(mode="json", by_alias=True)
    if isinstance(obj, (datetime, date)):
        return obj.isoformat()
    if isinstance(obj, Enum):
        return obj.value
    if isinstance(obj, (set, frozenset, tuple)):
        return list(obj)
    return str(obj)


__all__ = ["json_serializer"]
