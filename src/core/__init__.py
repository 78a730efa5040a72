"""
Core library: reusable, repository-agnostic components.

Modules:
    logging     - Structured JSON logging with context propagation
    errors      - Exception hierarchy with error categories

Design Principles:
    - No knowledge of specific repository operations
    - All modules are independently testable
"""

from .types import ErrorCategory

__version__ = "0.1.0"

__all__ = [
    "ErrorCategory",
]
