"""Hydrated action objects."""

from typing import Any

from pydantic import BaseModel, Field

from .action_status import ActionStatus
from .schedules import NullSchedule, Schedule

__all__ = [
    "Action",
    "CanceledAction",
    "FinishedAction",
    "NullAction",
    "get_stored_action",
]


class Action(BaseModel):
    """A scheduled action as loaded from storage."""

    hook: str
    args: dict[str, Any] = Field(default_factory=dict)
    schedule: Schedule = Field(default_factory=NullSchedule)
    group: str = ""
    priority: int = 10
    status: str = ActionStatus.PENDING

    @property
    def is_finished(self) -> bool:
        """Whether the action will not run again."""
        return False


class FinishedAction(Action):
    """An action that completed, failed or is otherwise no longer pending."""

    @property
    def is_finished(self) -> bool:
        """Whether the action will not run again."""
        return True


class CanceledAction(FinishedAction):
    """An action that was canceled before it ran."""


class NullAction(BaseModel):
    """Stands in for a missing or unreadable action."""


def get_stored_action(  # noqa: PLR0913, PLR0917
    status: str,
    hook: str,
    args: dict[str, Any],
    schedule: Schedule,
    group: str = "",
    priority: int = 10,
) -> Action:
    """Build the action type matching a stored status.

    Args:
        status: Status column of the stored row.
        hook: Hook name the action triggers.
        args: Decoded argument mapping.
        schedule: Decoded schedule.
        group: Group slug, empty when the action has no group.
        priority: Action priority.

    Returns:
        ``Action`` for pending rows, ``CanceledAction`` for canceled rows and
        ``FinishedAction`` for everything else.
    """
    action_cls: type[Action]
    match status:
        case ActionStatus.PENDING:
            action_cls = Action
        case ActionStatus.CANCELED:
            action_cls = CanceledAction
        case _:
            action_cls = FinishedAction

    return action_cls(
        hook=hook,
        args=args,
        schedule=schedule,
        group=group,
        priority=priority,
        status=status,
    )
