"""Notifications emitted while loading actions."""

from collections.abc import Callable

from loguru import logger

from actionquery.utils.prometheus import FAILED_FETCHES

from .exceptions import InvalidActionError

__all__ = ["FailedFetchHook", "log_failed_fetch", "notify_failed_fetch"]


FailedFetchHook = Callable[[int, InvalidActionError], None]


def log_failed_fetch(action_id: int, error: InvalidActionError) -> None:
    """Default sink for rows that failed validation."""
    FAILED_FETCHES.labels(error.cause or "unknown").inc()
    logger.warning(
        "Failed to fetch action",
        action_id=action_id,
        cause=error.cause,
        reason=error.message,
    )


def notify_failed_fetch(
    hook: FailedFetchHook, action_id: int, error: InvalidActionError
) -> None:
    """Call ``hook`` without letting its failure reach the caller."""
    try:
        hook(action_id, error)
    except Exception:
        logger.exception("Failed fetch hook raised", action_id=action_id)
