"""
Error handling tests for the cook session engine.

Covers the exception hierarchy, error context, and how misuse is downgraded
to a logged no-op while other failures surface to the caller.
"""

import pytest

from cook_app.errors import (
    AlreadyStartedError,
    InvalidPlanError,
    InvalidTransitionError,
    PersistenceError,
    PlanError,
    SessionError,
    SessionNotTerminalError,
    SystemFailureError,
    ValidationError,
)
from cook_app.state.runtime import SessionRuntime


class TestErrorClassification:
    """Test error classification system."""

    def test_plan_error_hierarchy(self):
        error = InvalidPlanError("cyclic", reason="cycle", stage_key="A", context={"stages": ["A"]})

        assert isinstance(error, PlanError)
        assert error.reason == "cycle"
        assert error.stage_key == "A"
        assert error.context == {"stages": ["A"]}
        assert error.recoverable is False
        assert str(error) == "cyclic"

    def test_session_error_hierarchy(self):
        for error in (
            AlreadyStartedError("again", current_status="running"),
            InvalidTransitionError("nope", current_status="paused", attempted="pause"),
            SessionNotTerminalError("still cooking", current_status="running"),
            ValidationError("bad rating", field="rating", value=6),
        ):
            assert isinstance(error, SessionError)
            assert error.recoverable is True
            assert error.context == {}

    def test_validation_error_fields(self):
        error = ValidationError("bad rating", field="rating", value=6)
        assert error.field == "rating"
        assert error.value == 6

    def test_persistence_error(self):
        error = PersistenceError("disk full", operation="sqlite", target="cook.db")

        assert isinstance(error, SystemFailureError)
        assert error.operation == "sqlite"
        assert error.target == "cook.db"
        assert error.recoverable is False


class TestMisuseRecovery:
    """Misuse leaves the prior snapshot intact."""

    @pytest.mark.parametrize("intent", ["pause", "resume", "abandon", "tick", "advance_manually"])
    def test_misuse_before_start(self, branching_plan, clock, intent):
        runtime = SessionRuntime(branching_plan, clock)
        before = runtime.session

        result = getattr(runtime, intent)()

        assert isinstance(result.rejected, InvalidTransitionError)
        assert runtime.session is before

    @pytest.mark.parametrize("intent", ["start", "pause", "resume", "abandon", "tick"])
    def test_misuse_after_completion(self, branching_plan, clock, intent):
        runtime = SessionRuntime(branching_plan, clock)
        runtime.start()
        runtime.skip("A")
        runtime.skip("B")
        runtime.record_temperature(205)
        completed = runtime.session

        result = getattr(runtime, intent)()

        assert not result.accepted
        assert runtime.session is completed
