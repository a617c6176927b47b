"""Helpers for writing action rows in tests."""

from datetime import datetime
from typing import Any

from sqlmodel.ext.asyncio.session import AsyncSession

from actionquery.actions.models import ActionGroup, ActionRecord
from actionquery.actions.schedules import SimpleSchedule, dump_schedule

BASE_DATE = datetime(2026, 1, 1, 12, 0, 0)


async def add_group(session: AsyncSession, slug: str) -> int:
    """Insert a group and return its ID."""
    group = ActionGroup(slug=slug)
    session.add(group)
    await session.commit()
    return group.group_id  # type: ignore[return-value]


async def add_record(session: AsyncSession, **fields: Any) -> int:  # noqa: ANN401
    """Insert a raw action row, defaults describe a valid pending action."""
    scheduled = fields.get("scheduled_date_gmt") or BASE_DATE
    values: dict[str, Any] = {
        "hook": "send_email",
        "status": "pending",
        "args": "{}",
        "schedule": dump_schedule(SimpleSchedule(timestamp=scheduled)),
        "scheduled_date_gmt": scheduled,
        "scheduled_date_local": scheduled,
    }
    values.update(fields)
    record = ActionRecord(**values)
    session.add(record)
    await session.commit()
    return record.action_id  # type: ignore[return-value]
