"""Schedule types persisted in the schedule column."""

from datetime import datetime
from typing import Annotated, Literal

from pydantic import BaseModel, Field, TypeAdapter

__all__ = [
    "CronSchedule",
    "IntervalSchedule",
    "NullSchedule",
    "Schedule",
    "SimpleSchedule",
    "dump_schedule",
    "load_schedule",
]


class SimpleSchedule(BaseModel):
    """Runs once at the given time."""

    type: Literal["simple"] = "simple"
    timestamp: datetime

    @property
    def is_recurring(self) -> bool:
        """Whether the schedule repeats."""
        return False


class IntervalSchedule(BaseModel):
    """Runs every ``interval`` seconds starting at ``start``."""

    type: Literal["interval"] = "interval"
    start: datetime
    interval: int = Field(gt=0)

    @property
    def is_recurring(self) -> bool:
        """Whether the schedule repeats."""
        return True


class CronSchedule(BaseModel):
    """Runs according to a cron expression starting at ``start``."""

    type: Literal["cron"] = "cron"
    start: datetime
    expression: str = Field(min_length=1)

    @property
    def is_recurring(self) -> bool:
        """Whether the schedule repeats."""
        return True


class NullSchedule(BaseModel):
    """Placeholder for actions without a schedule."""

    type: Literal["null"] = "null"

    @property
    def is_recurring(self) -> bool:
        """Whether the schedule repeats."""
        return False


Schedule = Annotated[
    SimpleSchedule | IntervalSchedule | CronSchedule | NullSchedule,
    Field(discriminator="type"),
]

_schedule_adapter: TypeAdapter[Schedule] = TypeAdapter(Schedule)


def load_schedule(data: object) -> Schedule:
    """Validate decoded JSON into one of the known schedule types.

    Raises:
        pydantic.ValidationError: If ``data`` is not a known schedule.
    """
    return _schedule_adapter.validate_python(data)


def dump_schedule(schedule: Schedule) -> str:
    """Serialize a schedule for the schedule column."""
    return _schedule_adapter.dump_json(schedule).decode()
