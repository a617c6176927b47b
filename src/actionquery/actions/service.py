"""Actions service."""

from datetime import UTC, datetime
from typing import Any

from loguru import logger
from sqlmodel.ext.asyncio.session import AsyncSession

from .action_status import ActionStatus
from .domain import Action
from .events import FailedFetchHook, log_failed_fetch
from .hydrator import hydrate_actions
from .repository import (
    cancel_action_db,
    cancel_actions_db,
    count_actions_db,
    query_action_ids_db,
    schedule_single_action_db,
)
from .schemas import ActionFilters, OrderBy

__all__ = [
    "add_action",
    "cancel_action",
    "cancel_action_by_id",
    "cancel_action_by_params",
    "cancel_all",
    "count_actions_svc",
    "run_action",
    "search_actions_svc",
]


async def search_actions_svc(
    db: AsyncSession,
    filters: ActionFilters,
    *,
    on_failed_fetch: FailedFetchHook = log_failed_fetch,
) -> dict[int, Action]:
    """Find the actions matching the filters.

    The compiled query yields the matching IDs, each ID is then loaded on
    its own so a broken row only removes itself from the result.

    Args:
        db: Database session for executing queries.
        filters: Filter specification.
        on_failed_fetch: Called for each matching row that fails validation.

    Returns:
        Actions keyed by ID in query order.
    """
    action_ids = await query_action_ids_db(db, filters)
    actions = await hydrate_actions(db, action_ids, on_failed_fetch=on_failed_fetch)
    logger.debug("Actions searched", matched=len(action_ids), returned=len(actions))
    return actions


async def count_actions_svc(db: AsyncSession, filters: ActionFilters) -> int:
    """Count the actions matching the filters, pagination is ignored."""
    return await count_actions_db(db, filters)


async def add_action(  # noqa: PLR0913, PLR0917
    db: AsyncSession,
    timestamp: int,
    hook: str,
    args: dict[str, Any] | None = None,
    group: str = "",
    unique: bool = False,
    priority: int = 10,
) -> bool:
    """Schedule a single action at a unix timestamp.

    Returns:
        True if the action was scheduled.
    """
    scheduled_at = datetime.fromtimestamp(timestamp, tz=UTC).replace(tzinfo=None)
    action_id = await schedule_single_action_db(
        db, scheduled_at, hook, args or {}, group, unique, priority
    )
    return action_id != 0


async def run_action(  # noqa: PLR0913, PLR0917
    db: AsyncSession,
    hook: str,
    args: dict[str, Any] | None = None,
    group: str = "",
    unique: bool = False,
    priority: int = 10,
) -> bool:
    """Schedule a single action to run as soon as possible.

    Returns:
        True if the action was scheduled.
    """
    return await add_action(
        db, int(datetime.now(tz=UTC).timestamp()), hook, args, group, unique, priority
    )


async def cancel_action(db: AsyncSession, action: Action) -> int | None:
    """Cancel the next pending action with the same hook, args and group."""
    return await cancel_action_by_params(db, action.hook, action.args, action.group)


async def cancel_action_by_params(
    db: AsyncSession,
    hook: str,
    args: dict[str, Any] | None = None,
    group: str = "",
) -> int | None:
    """Cancel the next pending action matching hook, args and group.

    Args:
        db: Database session for executing queries.
        hook: Hook of the action.
        args: Exact args of the action, None stands for empty args.
        group: Group slug, empty matches any group.

    Returns:
        ID of the canceled action, None if nothing matched.
    """
    action_ids = await query_action_ids_db(
        db,
        ActionFilters(
            hook=hook,
            args=args or {},
            group=group,
            status=ActionStatus.PENDING,
            orderby=OrderBy.DATE,
            order="ASC",
            per_page=1,
        ),
    )
    if not action_ids:
        return None

    await cancel_action_db(db, action_ids[0])
    return action_ids[0]


async def cancel_action_by_id(db: AsyncSession, action_id: int) -> None:
    """Cancel an action by its ID.

    Raises:
        ActionNotFoundError: If no action with ``action_id`` exists.
    """
    await cancel_action_db(db, action_id)


async def cancel_all(
    db: AsyncSession,
    hook: str,
    args: dict[str, Any] | None = None,
    group: str = "",
) -> None:
    """Cancel every pending action matching hook, args and group.

    Empty or missing args cancel the hook's actions whatever their args.
    """
    action_ids = await query_action_ids_db(
        db,
        ActionFilters(
            hook=hook,
            args=args or None,
            group=group,
            status=ActionStatus.PENDING,
            orderby=OrderBy.NONE,
            per_page=0,
        ),
    )
    await cancel_actions_db(db, action_ids)
