"""ActionStatus values stored in the actions table."""

from enum import StrEnum

__all__ = ["ActionStatus"]


class ActionStatus(StrEnum):
    """Lifecycle status of a scheduled action."""

    PENDING = "pending"
    RUNNING = "in-progress"
    COMPLETE = "complete"
    FAILED = "failed"
    CANCELED = "canceled"
