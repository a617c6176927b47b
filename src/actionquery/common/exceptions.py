"""Common exceptions."""

from fastapi import status

from actionquery.common.app_error import AppError
from actionquery.config.errors import ErrorCode

__all__ = [
    "InvalidInputError",
    "NotFoundError",
    "UnsupportedOperationError",
]


class NotFoundError(AppError):
    """Exception raised when something is not found."""

    error_code = ErrorCode.NOT_FOUND
    message = "Resource not found"
    status_code = status.HTTP_404_NOT_FOUND


class InvalidInputError(AppError):
    """Exception raised when a request is structurally invalid."""

    error_code = ErrorCode.INVALID_INPUT
    message = "Invalid input"
    status_code = status.HTTP_400_BAD_REQUEST


class UnsupportedOperationError(AppError):
    """Exception raised when the storage engine cannot perform an operation."""

    error_code = ErrorCode.UNSUPPORTED_OPERATION
    message = "Operation not supported"
    status_code = status.HTTP_501_NOT_IMPLEMENTED
