"""Tests for session state data models."""

import pytest
from dataclasses import FrozenInstanceError
from datetime import datetime, timedelta, timezone

from cook_app.state.models import CookSession, SessionStatus, StageRuntime, StageStatus


NOW = datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc)


class TestStatuses:
    """Test status enum helpers."""

    @pytest.mark.parametrize("status,terminal", [
        (SessionStatus.NOT_STARTED, False),
        (SessionStatus.RUNNING, False),
        (SessionStatus.PAUSED, False),
        (SessionStatus.COMPLETED, True),
        (SessionStatus.ABANDONED, True),
    ])
    def test_session_terminal(self, status, terminal):
        assert status.is_terminal is terminal

    def test_stage_resolved(self):
        assert StageStatus.COMPLETED.is_resolved
        assert StageStatus.SKIPPED.is_resolved
        assert not StageStatus.PENDING.is_resolved
        assert not StageStatus.ACTIVE.is_resolved

    def test_string_values(self):
        assert SessionStatus("paused") == SessionStatus.PAUSED
        assert StageStatus.SKIPPED.value == "skipped"


class TestStageRuntime:
    """Test StageRuntime transitions."""

    def test_defaults(self):
        runtime = StageRuntime()
        assert runtime.status == StageStatus.PENDING
        assert runtime.started_at is None
        assert runtime.completed_at is None
        assert runtime.paused_seconds == 0.0

    def test_activated(self):
        runtime = StageRuntime().activated(NOW)
        assert runtime.status == StageStatus.ACTIVE
        assert runtime.started_at == NOW

    def test_resolved_adds_pause(self):
        runtime = StageRuntime().activated(NOW).with_pause(60)
        later = NOW + timedelta(minutes=10)

        resolved = runtime.resolved(StageStatus.COMPLETED, later, 30)

        assert resolved.status == StageStatus.COMPLETED
        assert resolved.completed_at == later
        assert resolved.paused_seconds == 90
        assert runtime.status == StageStatus.ACTIVE

    def test_immutable(self):
        with pytest.raises(FrozenInstanceError):
            StageRuntime().status = StageStatus.ACTIVE


class TestCookSession:
    """Test CookSession snapshot helpers."""

    def _session(self) -> CookSession:
        return CookSession(
            session_id="s1",
            plan_id="p1",
            status=SessionStatus.NOT_STARTED,
            stage_states={"a": StageRuntime(), "b": StageRuntime()},
            stage_order=("a", "b"),
        )

    def test_with_stage_copies_mapping(self):
        session = self._session()

        updated = session.with_stage("a", StageRuntime().activated(NOW))

        assert updated.runtime("a").status == StageStatus.ACTIVE
        assert session.runtime("a").status == StageStatus.PENDING
        assert updated.stage_states is not session.stage_states

    def test_with_status(self):
        session = self._session()

        updated = session.with_status(SessionStatus.RUNNING, first_started_at=NOW)

        assert updated.status == SessionStatus.RUNNING
        assert updated.first_started_at == NOW
        assert session.status == SessionStatus.NOT_STARTED
        assert not updated.is_terminal

    def test_stages_with_status_in_plan_order(self):
        session = self._session()
        session = session.with_stage("b", StageRuntime(status=StageStatus.SKIPPED))

        assert session.stages_with_status(StageStatus.PENDING) == ["a"]
        assert session.stages_with_status(StageStatus.SKIPPED) == ["b"]
