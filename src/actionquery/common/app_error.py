"""Base error of the service."""

from fastapi import status

from actionquery.config.errors import ErrorCode

__all__ = ["AppError"]


class AppError(Exception):
    """Error with an error code and HTTP status, rendered as a JSON body."""

    error_code = ErrorCode.SERVER_ERROR
    message = "An unexpected error occurred"
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str | None = None) -> None:
        """Initialize with an optional message replacing the class default."""
        if message:
            self.message = message
        super().__init__(self.message)

    def to_body(self) -> dict[str, str]:
        """JSON error body returned to API clients."""
        return {"code": self.error_code, "message": self.message}
