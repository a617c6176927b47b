"""Central exception handling for the application."""

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from loguru import logger

from actionquery.common.app_error import AppError
from actionquery.config.errors import ErrorCode, ErrorNames

from .error_path import get_error_path

__all__ = ["register_exception_handlers"]


def register_exception_handlers(app: FastAPI) -> None:
    """Map application errors onto JSON error responses.

    ``AppError`` subclasses keep their status code and error code, any other
    exception becomes a 500 Internal Server Error.

    Args:
        app: FastAPI application instance.
    """

    @app.exception_handler(AppError)
    async def _handle_app_error(_: Request, exc: AppError) -> JSONResponse:
        logger.warning(
            "Application exception: {} - {}",
            exc.error_code,
            exc.message,
            path=get_error_path(exc),
        )
        return JSONResponse(
            status_code=exc.status_code,
            content=exc.to_body(),
        )

    @app.exception_handler(Exception)
    async def _handle_unexpected(_: Request, exc: Exception) -> JSONResponse:
        logger.error(
            "Unhandled exception: {} - {}",
            type(exc).__name__,
            str(exc),
            path=get_error_path(exc),
        )
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={
                "code": ErrorCode.SERVER_ERROR,
                "message": ErrorNames.INTERNAL_SERVER_ERROR,
            },
        )
