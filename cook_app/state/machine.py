"""
Core cook session state machine logic.

Every operation takes the current CookSession snapshot, the plan it executes
and a SessionClock, and returns a new snapshot. Operations either apply a
complete transition or raise without touching their input, so a rejected
operation always leaves the prior snapshot intact.
"""

import math
import uuid
from datetime import datetime
from typing import Any, Optional

from ..errors import AlreadyStartedError, InvalidTransitionError, ValidationError
from ..logging.config import get_state_logger, log_state_transition
from ..plan.models import CookPlan, TriggerKind
from ..utils.time import SessionClock, elapsed_seconds, format_timestamp
from .models import CookSession, SessionStatus, StageRuntime, StageStatus
from .transitions import require_active_trigger, require_status, validate_transition

state_logger = get_state_logger(__name__)


def new_session(
    plan: CookPlan,
    session_id: Optional[str] = None,
    recipe_id: Optional[str] = None
) -> CookSession:
    """Create a NotStarted session with every stage Pending."""
    return CookSession(
        session_id=session_id or str(uuid.uuid4()),
        plan_id=plan.id,
        status=SessionStatus.NOT_STARTED,
        stage_states={stage.key: StageRuntime() for stage in plan.stages},
        stage_order=tuple(plan.stage_keys),
        recipe_id=recipe_id,
    )


def start(session: CookSession, plan: CookPlan, clock: SessionClock) -> CookSession:
    """
    Start the session and activate the first eligible stage.

    Raises:
        AlreadyStartedError: if the session is not NotStarted
    """
    _check_plan(session, plan, "start")
    if session.status != SessionStatus.NOT_STARTED:
        raise AlreadyStartedError(
            f"Session {session.session_id} is already {session.status.value}",
            current_status=session.status.value,
            context={"session_id": session.session_id}
        )

    now = clock.now()
    running = _transition(session, SessionStatus.RUNNING, "start", now, first_started_at=now)
    return _activate_next(running, plan, now, "start")


def tick(session: CookSession, plan: CookPlan, clock: SessionClock) -> CookSession:
    """
    Evaluate time-based completion for the active stage.

    Only TimeElapsed stages complete here. While Paused the snapshot is
    returned unchanged because no stage clock advances.

    Raises:
        InvalidTransitionError: if the session is NotStarted or terminal
    """
    _check_plan(session, plan, "tick")
    if session.status == SessionStatus.PAUSED:
        return session
    require_status(session, (SessionStatus.RUNNING,), "tick")

    now = clock.now()
    # Zero-length timed stages resolve in the same tick as their predecessor
    while session.status == SessionStatus.RUNNING and session.active_stage_key is not None:
        stage = plan.stage(session.active_stage_key)
        if stage.trigger != TriggerKind.TIME_ELAPSED:
            break

        elapsed = stage_elapsed_seconds(session, stage.key, now)
        if elapsed < stage.expected_duration_minutes * 60:
            break

        state_logger.info(
            "Timed stage elapsed",
            session_id=session.session_id,
            stage_key=stage.key,
            elapsed_seconds=elapsed,
            expected_minutes=stage.expected_duration_minutes
        )
        session = _resolve_active(session, plan, now, StageStatus.COMPLETED, "tick")

    return session


def record_temperature(
    session: CookSession,
    plan: CookPlan,
    clock: SessionClock,
    value: float
) -> CookSession:
    """
    Record a thermometer reading for the active TemperatureReached stage.

    A reading at or above the stage target completes it; a lower reading
    leaves the snapshot unchanged.

    Raises:
        InvalidTransitionError: if not Running or the active stage is not temperature triggered
        ValidationError: if value is not a number
    """
    _check_plan(session, plan, "record_temperature")
    require_status(session, (SessionStatus.RUNNING,), "record_temperature")
    stage = require_active_trigger(session, plan, TriggerKind.TEMPERATURE_REACHED, "record_temperature")

    if isinstance(value, bool) or not isinstance(value, (int, float)) or not math.isfinite(value):
        raise ValidationError(
            f"Temperature must be a number, got {value!r}",
            field="temperature",
            value=value
        )

    if not value >= stage.target_temperature_f:
        state_logger.debug(
            "Temperature below target",
            session_id=session.session_id,
            stage_key=stage.key,
            reading_f=value,
            target_f=stage.target_temperature_f
        )
        return session

    return _resolve_active(session, plan, clock.now(), StageStatus.COMPLETED, "temperature_reached")


def advance_manually(session: CookSession, plan: CookPlan, clock: SessionClock) -> CookSession:
    """
    Force-complete the active ManualAdvance stage.

    Raises:
        InvalidTransitionError: if not Running or the active stage is not manual
    """
    _check_plan(session, plan, "advance_manually")
    require_status(session, (SessionStatus.RUNNING,), "advance_manually")
    require_active_trigger(session, plan, TriggerKind.MANUAL_ADVANCE, "advance_manually")

    return _resolve_active(session, plan, clock.now(), StageStatus.COMPLETED, "manual_advance")


def skip(session: CookSession, plan: CookPlan, clock: SessionClock, stage_key: str) -> CookSession:
    """
    Mark a Pending or Active stage Skipped.

    Skipped satisfies dependency gating exactly like Completed, so skipping
    never blocks downstream stages. Skipping the active stage runs the
    activation cascade.

    Raises:
        InvalidTransitionError: if the session is not Running or Paused, the
            stage is unknown, or the stage is already resolved
    """
    _check_plan(session, plan, "skip")
    require_status(session, (SessionStatus.RUNNING, SessionStatus.PAUSED), "skip")

    if stage_key not in session.stage_states:
        raise InvalidTransitionError(
            f"Cannot skip unknown stage {stage_key}",
            current_status=session.status.value,
            attempted="skip",
            context={"session_id": session.session_id, "stage_key": stage_key}
        )

    runtime = session.runtime(stage_key)
    if runtime.status.is_resolved:
        raise InvalidTransitionError(
            f"Cannot skip stage {stage_key}: already {runtime.status.value}",
            current_status=session.status.value,
            attempted="skip",
            context={"session_id": session.session_id, "stage_key": stage_key}
        )

    now = clock.now()
    if runtime.status == StageStatus.ACTIVE:
        return _resolve_active(session, plan, now, StageStatus.SKIPPED, "skip")

    state_logger.info("Stage skipped", session_id=session.session_id, stage_key=stage_key)
    return session.with_stage(stage_key, runtime.resolved(StageStatus.SKIPPED, now))


def pause(session: CookSession, clock: SessionClock) -> CookSession:
    """
    Pause a running session.

    Raises:
        InvalidTransitionError: unless the session is Running
    """
    require_status(session, (SessionStatus.RUNNING,), "pause")
    now = clock.now()
    return _transition(session, SessionStatus.PAUSED, "pause", now, paused_at=now)


def resume(session: CookSession, clock: SessionClock) -> CookSession:
    """
    Resume a paused session, absorbing the paused interval.

    Raises:
        InvalidTransitionError: unless the session is Paused
    """
    require_status(session, (SessionStatus.PAUSED,), "resume")
    now = clock.now()
    closed = _close_pause(session, now)
    return _transition(closed, SessionStatus.RUNNING, "resume", now)


def abandon(session: CookSession, clock: SessionClock) -> CookSession:
    """
    Abandon a running or paused session, freezing its runtime state.

    Raises:
        InvalidTransitionError: unless the session is Running or Paused
    """
    require_status(session, (SessionStatus.RUNNING, SessionStatus.PAUSED), "abandon")
    now = clock.now()
    closed = _close_pause(session, now)
    return _transition(closed, SessionStatus.ABANDONED, "abandon", now, ended_at=now)


def eligible_stage_keys(session: CookSession, plan: CookPlan) -> list[str]:
    """Pending stages whose dependencies are all Completed or Skipped, in plan order."""
    eligible = []
    for stage in plan.stages:
        if session.runtime(stage.key).status != StageStatus.PENDING:
            continue
        if all(session.runtime(dep).status.is_resolved for dep in stage.depends_on):
            eligible.append(stage.key)
    return eligible


def stage_elapsed_seconds(session: CookSession, stage_key: str, now: datetime) -> float:
    """
    Effective elapsed time of a stage, excluding pauses that overlapped it.

    For a resolved stage this is its final duration; for the active stage it
    runs up to now (or the instant the session ended), excluding an open
    pause interval.
    """
    runtime = session.runtime(stage_key)
    if runtime.started_at is None:
        return 0.0

    end = runtime.completed_at or session.ended_at or now
    paused = runtime.paused_seconds
    if (runtime.status == StageStatus.ACTIVE and session.paused_at is not None
            and session.status == SessionStatus.PAUSED):
        paused += _pause_overlap(session.paused_at, runtime.started_at, end)

    return max(0.0, elapsed_seconds(runtime.started_at, end) - paused)


def stage_remaining_seconds(
    session: CookSession,
    plan: CookPlan,
    stage_key: str,
    now: datetime
) -> Optional[float]:
    """Seconds left on a timed stage, or None for stages without a duration."""
    stage = plan.stage(stage_key)
    if stage.expected_duration_minutes is None:
        return None
    elapsed = stage_elapsed_seconds(session, stage_key, now)
    return max(0.0, stage.expected_duration_minutes * 60 - elapsed)


def next_instruction(session: CookSession, plan: CookPlan) -> Optional[str]:
    """Instruction the cook should act on now, if a stage is active."""
    if session.active_stage_key is None or session.is_terminal:
        return None
    return plan.stage(session.active_stage_key).instruction


def progress(session: CookSession) -> dict[str, Any]:
    """Summary counts for display."""
    counts = {status.value: 0 for status in StageStatus}
    for runtime in session.stage_states.values():
        counts[runtime.status.value] += 1

    resolved = counts[StageStatus.COMPLETED.value] + counts[StageStatus.SKIPPED.value]
    return {
        "total": len(session.stage_states),
        "resolved": resolved,
        **counts,
    }


def _activate_next(session: CookSession, plan: CookPlan, now: datetime, trigger: str) -> CookSession:
    """Activation cascade: activate the lowest-index eligible stage or complete the session."""
    eligible = eligible_stage_keys(session, plan)

    if not eligible:
        closed = _close_pause(session, now)
        return _transition(
            closed,
            SessionStatus.COMPLETED,
            trigger,
            now,
            active_stage_key=None,
            ended_at=now
        )

    stage_key = eligible[0]
    state_logger.info(
        "Stage activated",
        session_id=session.session_id,
        stage_key=stage_key,
        stage_trigger=plan.stage(stage_key).trigger.value,
        eligible=eligible,
        started_at=format_timestamp(now)
    )
    activated = session.with_stage(stage_key, session.runtime(stage_key).activated(now))
    return activated.with_status(activated.status, active_stage_key=stage_key)


def _resolve_active(
    session: CookSession,
    plan: CookPlan,
    now: datetime,
    status: StageStatus,
    trigger: str
) -> CookSession:
    """Resolve the active stage as Completed or Skipped, then cascade."""
    stage_key = session.active_stage_key
    runtime = session.runtime(stage_key)

    overlap = 0.0
    if session.paused_at is not None:
        overlap = _pause_overlap(session.paused_at, runtime.started_at, now)

    state_logger.info(
        "Stage resolved",
        session_id=session.session_id,
        stage_key=stage_key,
        stage_status=status.value,
        trigger=trigger
    )
    resolved = session.with_stage(stage_key, runtime.resolved(status, now, overlap))
    resolved = resolved.with_status(resolved.status, active_stage_key=None)
    return _activate_next(resolved, plan, now, trigger)


def _close_pause(session: CookSession, now: datetime) -> CookSession:
    """Fold an open pause interval into the session and active stage totals."""
    if session.paused_at is None:
        return session

    interval = max(0.0, elapsed_seconds(session.paused_at, now))
    closed = session.with_status(
        session.status,
        paused_at=None,
        accumulated_pause_seconds=session.accumulated_pause_seconds + interval
    )

    if closed.active_stage_key is not None:
        runtime = closed.runtime(closed.active_stage_key)
        if runtime.status == StageStatus.ACTIVE:
            overlap = _pause_overlap(session.paused_at, runtime.started_at, now)
            closed = closed.with_stage(closed.active_stage_key, runtime.with_pause(overlap))

    return closed


def _pause_overlap(paused_at: datetime, stage_started_at: Optional[datetime], end: datetime) -> float:
    """Part of the pause interval [paused_at, end] that falls after the stage started."""
    if stage_started_at is None:
        return 0.0
    return max(0.0, elapsed_seconds(max(paused_at, stage_started_at), end))


def _transition(
    session: CookSession,
    to_status: SessionStatus,
    trigger: str,
    now: datetime,
    **changes
) -> CookSession:
    """Apply a validated lifecycle status change and log it."""
    validate_transition(session, to_status, trigger)

    log_state_transition(
        state_logger,
        session_id=session.session_id,
        from_state=session.status.value,
        to_state=to_status.value,
        trigger=trigger,
        context={
            "plan_id": session.plan_id,
            "active_stage_key": changes.get("active_stage_key", session.active_stage_key),
            "timestamp": format_timestamp(now)
        }
    )
    return session.with_status(to_status, **changes)


def _check_plan(session: CookSession, plan: CookPlan, operation: str) -> None:
    if session.plan_id != plan.id:
        raise InvalidTransitionError(
            f"Cannot {operation}: session {session.session_id} runs plan "
            f"{session.plan_id}, not {plan.id}",
            current_status=session.status.value,
            attempted=operation,
            context={"session_id": session.session_id}
        )
