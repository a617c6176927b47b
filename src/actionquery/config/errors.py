"""Text constants for consistent error handling."""

from enum import StrEnum

__all__ = ["ErrorCode", "ErrorNames"]


class ErrorCode(StrEnum):
    """Error codes for standardized error handling."""

    # General errors
    SERVER_ERROR = "SERVER_ERROR"
    NOT_FOUND = "NOT_FOUND"
    INVALID_INPUT = "INVALID_INPUT"
    UNSUPPORTED_OPERATION = "UNSUPPORTED_OPERATION"

    # Action errors
    INVALID_ACTION = "INVALID_ACTION"


class ErrorNames(StrEnum):
    """Error names for standardized error handling."""

    INTERNAL_SERVER_ERROR = "Internal server error"

    # Query errors
    INVALID_QUERY_TYPE = (
        "Invalid value for select or count parameter. Cannot query actions."
    )
    UNKNOWN_ARGS_MATCHING = "Unknown partial args matching value: {value}"
    UNSUPPORTED_JSON_VALUE = (
        "The value type for the JSON partial matching is not supported. "
        "Must be either integer, boolean, double or string. {value} type provided."
    )
    JSON_MATCHING_UNAVAILABLE = (
        "JSON partial matching not supported in your environment. "
        "Please check your MySQL/MariaDB version."
    )

    # Action errors
    ARGS_DECODING_FAILED = "Unexpected args for action ID {value}"
    SCHEDULE_INVALID = "Invalid schedule for action ID {value}"
