"""Actions repository."""

from collections.abc import Sequence
from datetime import datetime
from typing import Any

from loguru import logger
from sqlalchemy import select as sa_select
from sqlmodel import col, select, text
from sqlmodel.ext.asyncio.session import AsyncSession

from actionquery.config.config import settings

from .action_status import ActionStatus
from .capabilities import ServerInfo
from .exceptions import ActionNotFoundError
from .models import ActionGroup, ActionRecord
from .query_builder import build_query, encode_args, get_args_for_query
from .schedules import Schedule, SimpleSchedule, dump_schedule
from .schemas import ActionFilters, ArgsMatching, QueryType

__all__ = [
    "cancel_action_db",
    "cancel_actions_db",
    "count_actions_db",
    "get_action_record_db",
    "get_or_create_group_id_db",
    "get_server_info_db",
    "query_action_ids_db",
    "schedule_single_action_db",
]


async def get_server_info_db(db: AsyncSession) -> ServerInfo:
    """Report the dialect and raw version string of the connected engine.

    Args:
        db: Database session for executing queries.

    Returns:
        ServerInfo used for capability checks.
    """
    conn = await db.connection()
    dialect = conn.dialect.name
    version_query = (
        "SELECT sqlite_version()" if dialect == "sqlite" else "SELECT VERSION()"
    )
    result = await db.exec(text(version_query))  # type: ignore[call-overload]
    version = str(result.scalar_one())
    logger.debug("Storage engine reported", dialect=dialect, version=version)
    return ServerInfo(dialect=dialect, version=version)


async def query_action_ids_db(db: AsyncSession, filters: ActionFilters) -> list[int]:
    """Retrieve the IDs of all actions matching the filters, ordered and paged.

    Args:
        db: Database session for executing queries.
        filters: Filter specification.

    Returns:
        Action IDs in query order.
    """
    query = build_query(
        filters, QueryType.SELECT, server_info=await _server_info_for(db, filters)
    )
    result = await db.exec(query)
    action_ids = list(result.all())
    logger.debug("Action IDs fetched from DB", count=len(action_ids))
    return action_ids


async def count_actions_db(db: AsyncSession, filters: ActionFilters) -> int:
    """Count the actions matching the filters, ignoring pagination.

    Args:
        db: Database session for executing queries.
        filters: Filter specification.

    Returns:
        Number of matching actions.
    """
    query = build_query(
        filters, QueryType.COUNT, server_info=await _server_info_for(db, filters)
    )
    result = await db.exec(query)
    return int(result.one())


async def get_action_record_db(
    db: AsyncSession, action_id: int
) -> dict[str, Any] | None:
    """Load one raw action row together with its group slug.

    Args:
        db: Database session for executing queries.
        action_id: ID of the action row.

    Returns:
        Column values keyed by column name plus ``group``, or None if missing.
    """
    actions_table = ActionRecord.__table__  # type: ignore[attr-defined]
    query = (
        sa_select(actions_table, col(ActionGroup.slug).label("group"))
        .outerjoin(
            ActionGroup, col(ActionRecord.group_id) == col(ActionGroup.group_id)
        )
        .where(col(ActionRecord.action_id) == action_id)
    )
    result = await db.exec(query)  # type: ignore[call-overload]
    row = result.first()
    if row is None:
        return None
    return dict(row._mapping)  # noqa: SLF001


async def get_or_create_group_id_db(db: AsyncSession, slug: str) -> int:
    """Return the ID of the group with ``slug``, creating it when missing."""
    result = await db.exec(select(ActionGroup).where(ActionGroup.slug == slug))
    group = result.one_or_none()
    if group is None:
        group = ActionGroup(slug=slug)
        db.add(group)
        await db.flush()
        logger.debug("Action group created", slug=slug, group_id=group.group_id)
    return group.group_id  # type: ignore[return-value]


async def schedule_single_action_db(  # noqa: PLR0913, PLR0917
    db: AsyncSession,
    scheduled_at: datetime,
    hook: str,
    args: dict[str, Any],
    group: str = "",
    unique: bool = False,
    priority: int = 10,
    schedule: Schedule | None = None,
) -> int:
    """Store a new pending action.

    Args are written with the same canonical encoding the query compiler
    uses, so exact args filters match rows stored here.

    Args:
        db: Database session for executing queries.
        scheduled_at: Naive UTC time the action should run at.
        hook: Hook the action triggers.
        args: Argument mapping passed to the hook.
        group: Optional group slug.
        unique: Refuse to schedule when a pending or running action with the
            same hook and group exists.
        priority: Action priority, lower runs first.
        schedule: Schedule to store, a single run at ``scheduled_at`` by default.

    Returns:
        ID of the new action, or 0 if it was not scheduled.
    """
    if unique:
        duplicates = await count_actions_db(
            db,
            ActionFilters(
                hook=hook,
                group=group,
                status=[ActionStatus.PENDING, ActionStatus.RUNNING],
            ),
        )
        if duplicates:
            logger.debug("Unique action already scheduled", hook=hook, group=group)
            return 0

    encoded = encode_args(args)
    record = ActionRecord(
        hook=hook,
        status=ActionStatus.PENDING,
        scheduled_date_gmt=scheduled_at,
        scheduled_date_local=scheduled_at,
        priority=priority,
        args=get_args_for_query(args),
        extended_args=encoded if len(encoded) > settings.max_index_length else None,
        schedule=dump_schedule(schedule or SimpleSchedule(timestamp=scheduled_at)),
        group_id=await get_or_create_group_id_db(db, group) if group else 0,
    )
    db.add(record)
    await db.commit()
    await db.refresh(record)
    logger.debug("Action scheduled", action_id=record.action_id, hook=hook)
    return record.action_id  # type: ignore[return-value]


async def cancel_action_db(db: AsyncSession, action_id: int) -> None:
    """Mark an action as canceled.

    Raises:
        ActionNotFoundError: If no action with ``action_id`` exists.
    """
    record = await db.get(ActionRecord, action_id)
    if record is None:
        raise ActionNotFoundError(action_id)

    record.status = ActionStatus.CANCELED
    await db.commit()
    logger.debug("Action canceled", action_id=action_id)


async def cancel_actions_db(db: AsyncSession, action_ids: Sequence[int]) -> None:
    """Mark several actions as canceled, skipping IDs that no longer exist."""
    for action_id in action_ids:
        record = await db.get(ActionRecord, action_id)
        if record is not None:
            record.status = ActionStatus.CANCELED
    await db.commit()
    logger.debug("Actions canceled", count=len(action_ids))


async def _server_info_for(
    db: AsyncSession, filters: ActionFilters
) -> ServerInfo | None:
    # Only JSON args matching depends on engine capabilities.
    if filters.args is not None and filters.partial_args_matching == ArgsMatching.JSON:
        return await get_server_info_db(db)
    return None
