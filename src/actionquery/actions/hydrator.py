"""Turn stored action rows into action objects.

A single corrupt or unreadable row never fails a whole batch: rows that
cannot be fetched are skipped, rows that fail validation are reported to the
failed fetch hook and dropped.
"""

import json
from collections.abc import Iterable, Mapping
from datetime import datetime
from typing import Any

from loguru import logger
from pydantic import ValidationError
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel.ext.asyncio.session import AsyncSession

from .domain import Action, NullAction, get_stored_action
from .events import FailedFetchHook, log_failed_fetch, notify_failed_fetch
from .exceptions import InvalidActionError
from .repository import get_action_record_db
from .schedules import NullSchedule, Schedule, load_schedule

__all__ = [
    "DEFAULT_DATE",
    "decode_args",
    "decode_schedule",
    "fetch_action",
    "hydrate_actions",
    "make_action_from_db_record",
    "normalize_record",
]


DEFAULT_DATE = datetime.min

_DATE_FIELDS = (
    "scheduled_date_gmt",
    "scheduled_date_local",
    "last_attempt_gmt",
    "last_attempt_local",
)

_FETCH_ERRORS = (SQLAlchemyError, OSError)


async def hydrate_actions(
    db: AsyncSession,
    action_ids: Iterable[int],
    *,
    on_failed_fetch: FailedFetchHook = log_failed_fetch,
) -> dict[int, Action]:
    """Load the actions for the given IDs.

    Args:
        db: Database session for executing queries.
        action_ids: Action IDs in the order results should keep.
        on_failed_fetch: Called for each row that fails validation.

    Returns:
        Actions keyed by ID in input order. Missing, unreadable and invalid
        rows are left out.
    """
    actions: dict[int, Action] = {}
    for action_id in action_ids:
        try:
            action = await fetch_action(db, action_id, on_failed_fetch=on_failed_fetch)
        except _FETCH_ERRORS:
            logger.opt(exception=True).warning(
                "Skipping action, row could not be read", action_id=action_id
            )
            continue

        if isinstance(action, NullAction):
            continue

        actions[action_id] = action

    return actions


async def fetch_action(
    db: AsyncSession,
    action_id: int,
    *,
    on_failed_fetch: FailedFetchHook = log_failed_fetch,
) -> Action | NullAction:
    """Load a single action.

    Args:
        db: Database session for executing queries.
        action_id: ID of the action row.
        on_failed_fetch: Called when the row fails validation.

    Returns:
        The action, or a NullAction if the row is missing or invalid.
    """
    record = await get_action_record_db(db, action_id)
    if record is None:
        return NullAction()

    try:
        return make_action_from_db_record(normalize_record(record))
    except InvalidActionError as e:
        notify_failed_fetch(on_failed_fetch, action_id, e)
        return NullAction()


def normalize_record(record: Mapping[str, Any]) -> dict[str, Any]:
    """Prefer extended args and replace missing dates with ``DEFAULT_DATE``."""
    data = dict(record)

    extended_args = data.pop("extended_args", None)
    if extended_args:
        data["args"] = extended_args

    for field in _DATE_FIELDS:
        if data.get(field) is None:
            data[field] = DEFAULT_DATE

    return data


def make_action_from_db_record(data: Mapping[str, Any]) -> Action:
    """Build an action from a normalized row.

    Raises:
        InvalidActionError: If the args or the schedule do not decode.
    """
    action_id = data["action_id"]
    args = decode_args(data.get("args"), action_id)
    schedule = decode_schedule(data.get("schedule"), action_id)

    return get_stored_action(
        data["status"],
        data["hook"],
        args,
        schedule or NullSchedule(),
        data.get("group") or "",
        data["priority"],
    )


def decode_args(raw: str | None, action_id: int) -> dict[str, Any]:
    """Decode the args column, which must hold a JSON object.

    Raises:
        InvalidActionError: If the column is not valid JSON or not an object.
    """
    try:
        args = json.loads(raw)  # type: ignore[arg-type]
    except (TypeError, ValueError, RecursionError):
        raise InvalidActionError.from_decoding_args(action_id, raw) from None

    if not isinstance(args, dict):
        raise InvalidActionError.from_decoding_args(action_id, args)
    return args


def decode_schedule(raw: str | None, action_id: int) -> Schedule | None:
    """Decode the schedule column.

    A JSON ``null`` or empty object stands for "no schedule" and yields None.

    Raises:
        InvalidActionError: If the column is missing, is not JSON or does not
            describe a known schedule type.
    """
    if not raw:
        raise InvalidActionError.from_schedule(action_id, raw)

    try:
        data = json.loads(raw)
    except (ValueError, RecursionError):
        raise InvalidActionError.from_schedule(action_id, raw) from None

    if not data:
        return None

    try:
        return load_schedule(data)
    except (ValidationError, RecursionError):
        raise InvalidActionError.from_schedule(action_id, data) from None
