"""
Session transition rules and guards.

The allowed lifecycle transitions live in one table so that every
operation in the state machine validates against the same rules before it
builds a new snapshot.
"""

from typing import Iterable

from ..errors import InvalidTransitionError
from ..plan.models import CookPlan, Stage, TriggerKind
from .models import CookSession, SessionStatus

ALLOWED_TRANSITIONS: dict[SessionStatus, frozenset] = {
    SessionStatus.NOT_STARTED: frozenset({SessionStatus.RUNNING}),
    SessionStatus.RUNNING: frozenset({
        SessionStatus.PAUSED,
        SessionStatus.COMPLETED,
        SessionStatus.ABANDONED,
    }),
    SessionStatus.PAUSED: frozenset({
        SessionStatus.RUNNING,
        SessionStatus.COMPLETED,
        SessionStatus.ABANDONED,
    }),
    SessionStatus.COMPLETED: frozenset(),
    SessionStatus.ABANDONED: frozenset(),
}


def can_transition(from_status: SessionStatus, to_status: SessionStatus) -> bool:
    """Check whether a lifecycle transition is defined."""
    return to_status in ALLOWED_TRANSITIONS[from_status]


def validate_transition(session: CookSession, to_status: SessionStatus, operation: str) -> None:
    """Raise InvalidTransitionError if the session cannot move to to_status."""
    if not can_transition(session.status, to_status):
        raise InvalidTransitionError(
            f"Cannot {operation}: transition from {session.status.value} "
            f"to {to_status.value} is not defined",
            current_status=session.status.value,
            attempted=operation,
            context={"session_id": session.session_id}
        )


def require_status(session: CookSession, allowed: Iterable[SessionStatus], operation: str) -> None:
    """Raise InvalidTransitionError unless the session is in one of the allowed states."""
    allowed = tuple(allowed)
    if session.status not in allowed:
        raise InvalidTransitionError(
            f"Cannot {operation} while session is {session.status.value}",
            current_status=session.status.value,
            attempted=operation,
            context={
                "session_id": session.session_id,
                "allowed": [status.value for status in allowed]
            }
        )


def require_active_trigger(
    session: CookSession,
    plan: CookPlan,
    trigger: TriggerKind,
    operation: str
) -> Stage:
    """Return the active stage if its trigger matches, else raise InvalidTransitionError."""
    if session.active_stage_key is None:
        raise InvalidTransitionError(
            f"Cannot {operation}: no stage is active",
            current_status=session.status.value,
            attempted=operation,
            context={"session_id": session.session_id}
        )

    stage = plan.stage(session.active_stage_key)
    if stage.trigger != trigger:
        raise InvalidTransitionError(
            f"Cannot {operation}: active stage {stage.key} is {stage.trigger.value}",
            current_status=session.status.value,
            attempted=operation,
            context={
                "session_id": session.session_id,
                "stage_key": stage.key,
                "stage_trigger": stage.trigger.value
            }
        )
    return stage
