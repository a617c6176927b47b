# ruff: noqa: S101

"""Tests for turning stored rows into actions."""

import json
from typing import Any

import pytest
from sqlalchemy.exc import OperationalError
from sqlmodel.ext.asyncio.session import AsyncSession

from actionquery.actions import hydrator
from actionquery.actions.domain import Action, CanceledAction, FinishedAction
from actionquery.actions.exceptions import InvalidActionError
from actionquery.actions.hydrator import (
    DEFAULT_DATE,
    decode_args,
    decode_schedule,
    hydrate_actions,
    normalize_record,
)
from actionquery.actions.schedules import (
    IntervalSchedule,
    NullSchedule,
    SimpleSchedule,
)
from tests.utils import BASE_DATE, add_group, add_record

_DEEP_ARGS = '{"a":' + "[" * 100_000 + "]" * 100_000 + "}"
_DEEP_SCHEDULE = '{"type":' + "[" * 100_000 + "]" * 100_000 + "}"


class _Recorder:
    def __init__(self) -> None:
        self.calls: list[tuple[int, InvalidActionError]] = []

    def __call__(self, action_id: int, error: InvalidActionError) -> None:
        self.calls.append((action_id, error))


@pytest.mark.hydrator
class TestDecoding:
    """Tests for decoding the args and schedule columns."""

    @classmethod
    def test_decode_args(cls) -> None:
        """A JSON object decodes to a dict."""
        assert decode_args('{"user_id":5}', 1) == {"user_id": 5}

    @classmethod
    @pytest.mark.parametrize("raw", [None, "", "{not json", "[1, 2]", '"text"', "5"])
    def test_decode_args_invalid(cls, raw: str | None) -> None:
        """Anything other than a JSON object is rejected."""
        with pytest.raises(InvalidActionError) as exc_info:
            decode_args(raw, 7)

        assert exc_info.value.action_id == 7  # noqa: PLR2004
        assert exc_info.value.cause == "args"

    @classmethod
    def test_decode_args_too_deep(cls) -> None:
        """Args nested past the recursion limit are rejected, not raised."""
        with pytest.raises(InvalidActionError) as exc_info:
            decode_args(_DEEP_ARGS, 7)

        assert exc_info.value.cause == "args"

    @classmethod
    def test_decode_schedule_too_deep(cls) -> None:
        """Schedules nested past the recursion limit are rejected."""
        with pytest.raises(InvalidActionError) as exc_info:
            decode_schedule(_DEEP_SCHEDULE, 7)

        assert exc_info.value.cause == "schedule"

    @classmethod
    def test_decode_schedule(cls) -> None:
        """Known schedule types are validated into their models."""
        raw = json.dumps(
            {"type": "interval", "start": "2026-01-01T12:00:00", "interval": 60}
        )

        schedule = decode_schedule(raw, 1)

        assert isinstance(schedule, IntervalSchedule)
        assert schedule.interval == 60  # noqa: PLR2004
        assert schedule.is_recurring

    @classmethod
    @pytest.mark.parametrize("raw", ["null", "{}"])
    def test_decode_empty_schedule(cls, raw: str) -> None:
        """A JSON null or empty object means no schedule."""
        assert decode_schedule(raw, 1) is None

    @classmethod
    @pytest.mark.parametrize(
        "raw",
        [None, "", "{broken", '{"type": "lunar"}', '{"type": "simple"}', "[1]"],
    )
    def test_decode_schedule_invalid(cls, raw: str | None) -> None:
        """Missing columns, bad JSON and unknown types are rejected."""
        with pytest.raises(InvalidActionError) as exc_info:
            decode_schedule(raw, 3)

        assert exc_info.value.cause == "schedule"


@pytest.mark.hydrator
class TestNormalizeRecord:
    """Tests for row normalization."""

    @classmethod
    def test_extended_args_supersede_args(cls) -> None:
        """Extended args replace the hashed args column."""
        data = normalize_record(
            {"args": "0" * 32, "extended_args": '{"big":"x"}', "action_id": 1}
        )

        assert data["args"] == '{"big":"x"}'
        assert "extended_args" not in data

    @classmethod
    def test_empty_extended_args_are_ignored(cls) -> None:
        """Args are kept when extended args are empty."""
        assert normalize_record({"args": "{}", "extended_args": None})["args"] == "{}"

    @classmethod
    def test_missing_dates_get_default(cls) -> None:
        """Every null date column becomes the default date."""
        data = normalize_record(
            {
                "scheduled_date_gmt": BASE_DATE,
                "scheduled_date_local": None,
                "last_attempt_gmt": None,
            }
        )

        assert data["scheduled_date_gmt"] == BASE_DATE
        assert data["scheduled_date_local"] == DEFAULT_DATE
        assert data["last_attempt_gmt"] == DEFAULT_DATE
        assert data["last_attempt_local"] == DEFAULT_DATE


@pytest.mark.asyncio
@pytest.mark.hydrator
class TestHydrateActions:
    """Tests for loading batches of actions."""

    @classmethod
    async def test_valid_rows_keep_order(cls, session: AsyncSession) -> None:
        """Actions come back keyed by ID in the requested order."""
        group_id = await add_group(session, "mail")
        first = await add_record(session, args='{"user_id":1}', group_id=group_id)
        second = await add_record(session, hook="send_sms", priority=5)

        actions = await hydrate_actions(session, [second, first])

        assert list(actions) == [second, first]
        assert actions[first].args == {"user_id": 1}
        assert actions[first].group == "mail"
        assert actions[second].group == ""
        assert actions[second].priority == 5  # noqa: PLR2004
        assert isinstance(actions[first].schedule, SimpleSchedule)

    @classmethod
    async def test_invalid_row_is_dropped_and_reported(
        cls, session: AsyncSession
    ) -> None:
        """One undecodable row leaves the rest of the batch intact."""
        ids = [
            await add_record(session),
            await add_record(session, args="{not json"),
            await add_record(session),
        ]
        recorder = _Recorder()

        actions = await hydrate_actions(session, ids, on_failed_fetch=recorder)

        assert list(actions) == [ids[0], ids[2]]
        assert len(recorder.calls) == 1
        assert recorder.calls[0][0] == ids[1]
        assert recorder.calls[0][1].cause == "args"

    @classmethod
    async def test_deeply_nested_row_is_dropped_and_reported(
        cls, session: AsyncSession
    ) -> None:
        """Deeply nested args fail only their own row."""
        good = await add_record(session)
        bad = await add_record(session, args="0" * 32, extended_args=_DEEP_ARGS)
        recorder = _Recorder()

        actions = await hydrate_actions(session, [good, bad], on_failed_fetch=recorder)

        assert list(actions) == [good]
        assert [action_id for action_id, _ in recorder.calls] == [bad]
        assert recorder.calls[0][1].cause == "args"

    @classmethod
    async def test_invalid_schedule_is_reported(cls, session: AsyncSession) -> None:
        """Unknown schedule types are reported with the schedule cause."""
        action_id = await add_record(session, schedule='{"type": "lunar"}')
        recorder = _Recorder()

        actions = await hydrate_actions(session, [action_id], on_failed_fetch=recorder)

        assert actions == {}
        assert recorder.calls[0][1].cause == "schedule"

    @classmethod
    async def test_failing_hook_does_not_break_batch(
        cls, session: AsyncSession
    ) -> None:
        """An exception in the failed fetch hook is contained."""
        bad = await add_record(session, args="[]")
        good = await add_record(session)

        def _raise(action_id: int, error: InvalidActionError) -> None:
            raise RuntimeError(f"sink down for {action_id}: {error.message}")

        actions = await hydrate_actions(session, [bad, good], on_failed_fetch=_raise)

        assert list(actions) == [good]

    @classmethod
    async def test_missing_row_is_skipped(cls, session: AsyncSession) -> None:
        """IDs without a row are left out without a notification."""
        action_id = await add_record(session)
        recorder = _Recorder()

        actions = await hydrate_actions(
            session, [action_id, 9999], on_failed_fetch=recorder
        )

        assert list(actions) == [action_id]
        assert recorder.calls == []

    @classmethod
    async def test_unreadable_row_is_skipped(
        cls, session: AsyncSession, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """A storage error while reading one row skips only that row."""
        schedule = json.dumps({"type": "simple", "timestamp": "2026-01-01T12:00:00"})

        async def _fake_record(_: AsyncSession, action_id: int) -> dict[str, Any]:
            if action_id == 9:  # noqa: PLR2004
                raise OperationalError("SELECT", {}, Exception("disk I/O error"))
            return {
                "action_id": action_id,
                "hook": "send_email",
                "status": "pending",
                "args": "{}",
                "schedule": schedule,
                "priority": 10,
                "group": None,
            }

        monkeypatch.setattr(hydrator, "get_action_record_db", _fake_record)
        recorder = _Recorder()

        actions = await hydrate_actions(session, [5, 9, 11], on_failed_fetch=recorder)

        assert list(actions) == [5, 11]
        assert recorder.calls == []

    @classmethod
    async def test_extended_args_are_used(cls, session: AsyncSession) -> None:
        """Rows with extended args expose the full args."""
        payload = {"payload": "x" * 300}
        action_id = await add_record(
            session, args="0" * 32, extended_args=json.dumps(payload)
        )

        actions = await hydrate_actions(session, [action_id])

        assert actions[action_id].args == payload

    @classmethod
    @pytest.mark.parametrize("schedule", ["null", "{}"])
    async def test_empty_schedule_becomes_null_schedule(
        cls, session: AsyncSession, schedule: str
    ) -> None:
        """Rows without a schedule get the null schedule."""
        action_id = await add_record(session, schedule=schedule)

        actions = await hydrate_actions(session, [action_id])

        assert isinstance(actions[action_id].schedule, NullSchedule)

    @classmethod
    async def test_null_dates_are_accepted(cls, session: AsyncSession) -> None:
        """Rows with missing dates still hydrate."""
        action_id = await add_record(
            session, scheduled_date_gmt=None, scheduled_date_local=None
        )

        assert action_id in await hydrate_actions(session, [action_id])

    @classmethod
    @pytest.mark.parametrize(
        ("status", "action_cls"),
        [
            ("pending", Action),
            ("canceled", CanceledAction),
            ("complete", FinishedAction),
            ("failed", FinishedAction),
            ("in-progress", FinishedAction),
        ],
    )
    async def test_status_selects_action_type(
        cls, session: AsyncSession, status: str, action_cls: type[Action]
    ) -> None:
        """The stored status decides the action type."""
        action_id = await add_record(
            session, status=status, last_attempt_gmt=BASE_DATE
        )

        action = (await hydrate_actions(session, [action_id]))[action_id]

        assert type(action) is action_cls
        assert action.status == status
        assert action.is_finished is (action_cls is not Action)
