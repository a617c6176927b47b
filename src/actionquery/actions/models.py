"""Action and group tables."""

from datetime import datetime

from sqlmodel import Column, Field, SQLModel, Text

from .action_status import ActionStatus

__all__ = ["UNCLAIMED", "ActionGroup", "ActionRecord"]


UNCLAIMED = 0


class ActionGroup(SQLModel, table=True):
    """Named group an action can belong to."""

    __tablename__ = "actionscheduler_groups"

    group_id: int | None = Field(
        default=None, primary_key=True, description="Unique identifier of the group."
    )

    slug: str = Field(
        max_length=255,
        unique=True,
        index=True,
        description="Human readable group identifier.",
    )


class ActionRecord(SQLModel, table=True):
    """Persisted scheduled action row."""

    __tablename__ = "actionscheduler_actions"

    action_id: int | None = Field(
        default=None, primary_key=True, description="Unique identifier of the action."
    )

    hook: str = Field(
        max_length=191, index=True, description="Name of the callback to trigger."
    )

    status: str = Field(
        default=ActionStatus.PENDING,
        max_length=20,
        index=True,
        description="Current status of the action.",
    )

    scheduled_date_gmt: datetime | None = Field(
        default=None, index=True, description="Next run time in UTC."
    )

    scheduled_date_local: datetime | None = Field(
        default=None, description="Next run time in site local time."
    )

    priority: int = Field(default=10, description="Lower values run first.")

    args: str | None = Field(
        default=None,
        max_length=191,
        index=True,
        description="Canonical JSON args, or their hash when they overflow.",
    )

    schedule: str | None = Field(
        default=None,
        sa_column=Column(Text, nullable=True),
        description="JSON encoded schedule.",
    )

    group_id: int = Field(default=0, index=True, description="Group of the action.")

    attempts: int = Field(default=0, description="Number of run attempts.")

    last_attempt_gmt: datetime | None = Field(
        default=None, index=True, description="Last attempt time in UTC."
    )

    last_attempt_local: datetime | None = Field(
        default=None, description="Last attempt time in site local time."
    )

    claim_id: int = Field(
        default=UNCLAIMED, index=True, description="Claim holding the action."
    )

    extended_args: str | None = Field(
        default=None,
        max_length=8000,
        description="Full JSON args when they exceed the indexed args column.",
    )
