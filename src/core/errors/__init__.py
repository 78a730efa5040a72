"""
Exception hierarchy.

Provides:
- ErrorCategory enum for classifying errors
- IshRemoteError hierarchy for typed exceptions
"""

from core.errors.exceptions import (
    AuthError,
    ErrorCategory,
    InvalidInputError,
    IshRemoteError,
    PermanentError,
    RemoteLookupError,
    SessionNotFoundError,
    TransientError,
    UnmappedCategoryError,
    error_logical_id,
)

__all__ = [
    # Enums
    "ErrorCategory",
    # Base classes
    "IshRemoteError",
    "AuthError",
    "TransientError",
    "PermanentError",
    # Folder-location errors
    "InvalidInputError",
    "SessionNotFoundError",
    "RemoteLookupError",
    "UnmappedCategoryError",
    # Utilities
    "error_logical_id",
]
