"""
Unified exception hierarchy for ishremote.

Provides typed exceptions with an error category so callers can tell an
invalid identifier from a failed remote lookup or a base folder this client
does not know how to label.
"""

from typing import Any

# Import ErrorCategory from canonical source to avoid duplicate enum issues
from core.types import ErrorCategory


class IshRemoteError(Exception):
    """
    Base exception for all ishremote errors.

    Attributes:
        message: Human-readable error description
        category: Error classification
        cause: Original exception if wrapping
        context: Additional context dict for debugging
    """

    category: ErrorCategory = ErrorCategory.UNKNOWN

    def __init__(
        self,
        message: str,
        cause: Exception | None = None,
        context: dict | None = None,
    ):
        self.message = message
        self.cause = cause
        self.context = context or {}
        super().__init__(message)

    @property
    def is_retryable(self) -> bool:
        return self.category in (ErrorCategory.TRANSIENT, ErrorCategory.UNKNOWN)

    def __str__(self) -> str:
        parts = [self.message]
        if self.cause:
            parts.append(f"Caused by: {self.cause}")
        return " | ".join(parts)


# =============================================================================
# Category Bases
# =============================================================================


class AuthError(IshRemoteError):
    """Base class for authentication errors."""

    category = ErrorCategory.AUTH


class TransientError(IshRemoteError):
    """Base class for transient errors."""

    category = ErrorCategory.TRANSIENT


class PermanentError(IshRemoteError):
    """Base class for permanent errors."""

    category = ErrorCategory.PERMANENT


# =============================================================================
# Domain-Specific Errors
# =============================================================================


class InvalidInputError(PermanentError):
    """Logical identifier missing or empty. Raised before any remote call."""

    def __init__(self, message: str, value: Any = None):
        super().__init__(message, context={"value": value})
        self.value = value


class SessionNotFoundError(PermanentError):
    """No session was passed and none is registered as the current session."""

    def __init__(self, message: str = "No IshSession available"):
        super().__init__(
            f"{message}. Pass a session explicitly or register one with "
            "set_current_session()."
        )


class RemoteLookupError(IshRemoteError):
    """
    The folder-location lookup could not be completed.

    Covers network errors, remote-side rejections and malformed or absent
    responses. The category comes from the transport classification, so it is
    set per instance rather than per class.
    """

    def __init__(
        self,
        message: str,
        logical_id: str | None = None,
        status_code: int | None = None,
        category: ErrorCategory = ErrorCategory.TRANSIENT,
        cause: Exception | None = None,
    ):
        super().__init__(
            message,
            cause=cause,
            context={"logical_id": logical_id, "status_code": status_code},
        )
        self.logical_id = logical_id
        self.status_code = status_code
        self.category = category


class UnmappedCategoryError(PermanentError):
    """
    The remote service returned a base folder with no known display label.

    Signals a version mismatch between this client's label table and the
    repository, not a transport problem.
    """

    def __init__(self, base_folder: str, logical_id: str | None = None):
        self.base_folder = base_folder
        self.logical_id = logical_id
        super().__init__(
            f"No label configured for base folder {base_folder!r}",
            context={"base_folder": base_folder, "logical_id": logical_id},
        )


def error_logical_id(exc: BaseException) -> str | None:
    """Return the logical identifier an error refers to, when it carries one."""
    if isinstance(exc, IshRemoteError):
        return getattr(exc, "logical_id", None) or exc.context.get("logical_id")
    return None


__all__ = [
    "ErrorCategory",
    "IshRemoteError",
    "AuthError",
    "TransientError",
    "PermanentError",
    "InvalidInputError",
    "SessionNotFoundError",
    "RemoteLookupError",
    "UnmappedCategoryError",
    "error_logical_id",
]
