"""Exceptions for action operations."""

from typing import Self

from fastapi import status

from actionquery.common.app_error import AppError
from actionquery.common.exceptions import NotFoundError
from actionquery.config.errors import ErrorCode, ErrorNames

__all__ = ["ActionNotFoundError", "InvalidActionError"]


class ActionNotFoundError(NotFoundError):
    """Exception raised when the action is not found."""

    def __init__(self, action_id: int) -> None:
        """Initialize with the action ID."""
        super().__init__(f"Action with ID {action_id} not found")


class InvalidActionError(AppError):
    """Exception raised when a stored action row cannot be turned into an action."""

    error_code = ErrorCode.INVALID_ACTION
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(
        self, action_id: int, message: str, payload: object = None, cause: str = ""
    ) -> None:
        """Initialize with the offending action ID, raw payload and cause."""
        self.action_id = action_id
        self.cause = cause
        self.payload = payload
        super().__init__(message)

    @classmethod
    def from_decoding_args(cls, action_id: int, args: object = None) -> Self:
        """Args column did not decode to a mapping."""
        return cls(
            action_id,
            ErrorNames.ARGS_DECODING_FAILED.format(value=action_id),
            args,
            cause="args",
        )

    @classmethod
    def from_schedule(cls, action_id: int, schedule: object = None) -> Self:
        """Schedule column is missing or not a known schedule type."""
        return cls(
            action_id,
            ErrorNames.SCHEDULE_INVALID.format(value=action_id),
            schedule,
            cause="schedule",
        )
