"""
Core types shared across modules.

This module provides the enums used by the error hierarchy and the transport
error classification so every layer reports failures the same way.
"""

from enum import Enum


class ErrorCategory(Enum):
    """
    Classification of error types for handling decisions.

    Categories:
        TRANSIENT: Temporary failures that may succeed if the caller tries again
                   (e.g., network timeouts, 429/503 errors)
        AUTH: Authentication failures requiring new credentials
              (e.g., 401 errors, expired tokens)
        PERMANENT: Failures that won't succeed on another attempt
                   (e.g., 404, empty identifiers, unknown base folders)
        UNKNOWN: Unclassified errors
    """

    TRANSIENT = "transient"
    AUTH = "auth"
    PERMANENT = "permanent"
    UNKNOWN = "unknown"


__all__ = [
    "ErrorCategory",
]
