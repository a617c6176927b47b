"""Query and filter schemas for actions."""

from datetime import datetime
from enum import StrEnum
from typing import Any, Literal

from pydantic import BaseModel, Field, field_validator

from actionquery.config.config import settings

from .schedules import Schedule

__all__ = ["ActionFilters", "ActionsModel", "ArgsMatching", "OrderBy", "QueryType"]


class QueryType(StrEnum):
    """Projection of a compiled action query."""

    SELECT = "select"
    COUNT = "count"


class ArgsMatching(StrEnum):
    """Strategy used to compare the args filter with stored args."""

    OFF = "off"
    LIKE = "like"
    JSON = "json"


class OrderBy(StrEnum):
    """Sortable action columns."""

    HOOK = "hook"
    GROUP = "group"
    MODIFIED = "modified"
    ACTION_ID = "action_id"
    DATE = "date"
    NONE = "none"


class ActionFilters(BaseModel):
    """Parameters for filtering actions."""

    hook: list[str] = Field(
        default_factory=list, description="Hooks to match, any of them"
    )
    args: dict[str, Any] | None = Field(None, description="Args to match")
    partial_args_matching: str = Field(
        ArgsMatching.OFF, description="Args matching strategy: off, like or json"
    )
    date: datetime | None = Field(None, description="Scheduled date to compare with")
    date_compare: str = Field("<=", description="Comparator for the scheduled date")
    modified: datetime | None = Field(
        None, description="Last attempt date to compare with"
    )
    modified_compare: str = Field(
        "<=", description="Comparator for the last attempt date"
    )
    group: str = Field("", description="Group slug to match")
    status: list[str] = Field(
        default_factory=list, description="Statuses to match, any of them"
    )
    claimed: bool | int | None = Field(
        None, description="Claimed state or a specific claim ID"
    )
    search: str = Field("", description="Free text matched against hook and args")
    per_page: int = Field(
        default_factory=lambda: settings.default_per_page,
        description="Page size, zero or less returns every match",
    )
    offset: int = Field(0, ge=0, description="Number of records to skip")
    orderby: OrderBy = Field(OrderBy.DATE, description="Column to order by")
    order: Literal["ASC", "DESC"] = Field("ASC", description="Sort direction")

    @field_validator("hook", "status", mode="before")
    @classmethod
    def _as_list(cls, value: Any) -> Any:  # noqa: ANN401
        if value is None or value == "":
            return []
        if isinstance(value, str):
            return [value]
        if isinstance(value, set | frozenset):
            return sorted(value)
        return value

    @field_validator("orderby", mode="before")
    @classmethod
    def _known_orderby(cls, value: Any) -> Any:  # noqa: ANN401
        if not isinstance(value, str) or value not in {o.value for o in OrderBy}:
            return OrderBy.DATE
        return value

    @field_validator("order", mode="before")
    @classmethod
    def _normalize_order(cls, value: Any) -> str:  # noqa: ANN401
        return "ASC" if str(value).upper() == "ASC" else "DESC"


class ActionsModel(BaseModel):
    """Pydantic model for action responses."""

    id: int
    hook: str
    status: str
    args: dict[str, Any]
    schedule: Schedule
    group: str
    priority: int
