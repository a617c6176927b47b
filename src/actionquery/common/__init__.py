"""Common module for shared utilities and error handling.

Key Components:
- App errors: Application-specific error types with structured error codes
- Exceptions: Shared error types mapped onto HTTP status codes
- Router: Root and health endpoints
"""

from .app_error import AppError
from .exceptions import (
    InvalidInputError,
    NotFoundError,
    UnsupportedOperationError,
)

__all__ = [
    "AppError",
    "InvalidInputError",
    "NotFoundError",
    "UnsupportedOperationError",
]
