"""Tests for logging integration in the session state machine."""

from unittest.mock import Mock, patch

from cook_app.config.defaults import LoggingParams
from cook_app.errors import InvalidTransitionError
from cook_app.logging.config import (
    configure_from_params, configure_logging, get_state_logger, get_store_logger,
    log_rejected_operation, log_state_transition
)
from cook_app.state.machine import new_session, start
from cook_app.state.runtime import SessionRuntime


class TestStateTransitionLogging:
    """Test that lifecycle transitions are logged."""

    def setup_method(self):
        configure_logging(level="DEBUG", format_json=True)

    def test_start_logs_transition(self, branching_plan, clock):
        session = new_session(branching_plan, session_id="s1")

        with patch("cook_app.state.machine.log_state_transition") as mock_log:
            start(session, branching_plan, clock)

        mock_log.assert_called_once()
        kwargs = mock_log.call_args.kwargs
        assert kwargs["session_id"] == "s1"
        assert kwargs["from_state"] == "not_started"
        assert kwargs["to_state"] == "running"
        assert kwargs["trigger"] == "start"
        assert kwargs["context"]["plan_id"] == "brisket-plan"

    def test_stage_activation_logged(self, branching_plan, clock):
        session = new_session(branching_plan, session_id="s1")

        with patch("cook_app.state.machine.state_logger") as mock_logger:
            start(session, branching_plan, clock)

        messages = [call.args[0] for call in mock_logger.info.call_args_list]
        assert "Stage activated" in messages

    def test_log_state_transition_binds_fields(self):
        logger = Mock()
        bound = logger.bind.return_value
        bound.bind.return_value = bound

        log_state_transition(logger, "s1", "running", "paused", "pause", {"plan_id": "p1"})

        logger.bind.assert_called_once_with(
            session_id="s1", from_state="running", to_state="paused", trigger="pause"
        )
        bound.bind.assert_called_once_with(context={"plan_id": "p1"})
        bound.info.assert_called_once_with("State transition")

    def test_state_logger_is_usable(self):
        logger = get_state_logger("cook_app.tests")
        logger.info("State logger ready", session_id="s1")


class TestRuntimeLogging:
    """Test runtime warnings for rejected intents."""

    def test_rejected_intent_logs_warning(self, branching_plan, clock):
        runtime = SessionRuntime(branching_plan, clock)

        with patch("cook_app.state.runtime.log_rejected_operation") as mock_log:
            result = runtime.pause()

        mock_log.assert_called_once_with(
            runtime.logger, runtime.session.session_id, "pause", "not_started", result.rejected
        )

    def test_log_rejected_operation_binds_error(self):
        logger = Mock()
        bound = logger.bind.return_value
        bound.bind.return_value = bound
        error = InvalidTransitionError("Cannot pause", context={"session_id": "s1"})

        log_rejected_operation(logger, "s1", "pause", "not_started", error)

        logger.bind.assert_called_once_with(
            session_id="s1",
            operation="pause",
            status="not_started",
            error_type="InvalidTransitionError",
            error="Cannot pause"
        )
        bound.bind.assert_called_once_with(context={"session_id": "s1"})
        bound.warning.assert_called_once_with("Rejected session operation")


class TestLoggingConfiguration:
    """Test configuration entry points."""

    def test_configure_from_params(self):
        with patch("cook_app.logging.config.configure_logging") as mock_configure:
            configure_from_params(LoggingParams(level="DEBUG", format_json=True))

        mock_configure.assert_called_once_with(level="DEBUG", format_json=True)

    def test_store_logger_is_usable(self):
        get_store_logger("cook_app.tests").debug("Store logger ready")
