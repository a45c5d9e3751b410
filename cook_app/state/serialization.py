"""
JSON-safe codecs for session snapshots.

Snapshots are persisted between process restarts, so every field must
round-trip through plain dicts, strings and numbers.
"""

from typing import Any

from ..utils.time import format_timestamp, parse_timestamp
from .models import CookSession, SessionStatus, StageRuntime, StageStatus


def stage_runtime_to_dict(runtime: StageRuntime) -> dict[str, Any]:
    return {
        "status": runtime.status.value,
        "started_at": format_timestamp(runtime.started_at),
        "completed_at": format_timestamp(runtime.completed_at),
        "paused_seconds": runtime.paused_seconds,
    }


def stage_runtime_from_dict(data: dict[str, Any]) -> StageRuntime:
    return StageRuntime(
        status=StageStatus(data["status"]),
        started_at=parse_timestamp(data.get("started_at")),
        completed_at=parse_timestamp(data.get("completed_at")),
        paused_seconds=float(data.get("paused_seconds", 0.0)),
    )


def session_to_dict(session: CookSession) -> dict[str, Any]:
    """Convert a session snapshot to a JSON-serializable dictionary."""
    return {
        "session_id": session.session_id,
        "plan_id": session.plan_id,
        "recipe_id": session.recipe_id,
        "status": session.status.value,
        "stage_order": list(session.stage_order),
        "stage_states": {
            key: stage_runtime_to_dict(session.stage_states[key])
            for key in session.stage_order
        },
        "active_stage_key": session.active_stage_key,
        "accumulated_pause_seconds": session.accumulated_pause_seconds,
        "first_started_at": format_timestamp(session.first_started_at),
        "paused_at": format_timestamp(session.paused_at),
        "ended_at": format_timestamp(session.ended_at),
    }


def session_from_dict(data: dict[str, Any]) -> CookSession:
    """Rebuild a session snapshot written by session_to_dict."""
    return CookSession(
        session_id=data["session_id"],
        plan_id=data["plan_id"],
        recipe_id=data.get("recipe_id"),
        status=SessionStatus(data["status"]),
        stage_order=tuple(data["stage_order"]),
        stage_states={
            key: stage_runtime_from_dict(value)
            for key, value in data["stage_states"].items()
        },
        active_stage_key=data.get("active_stage_key"),
        accumulated_pause_seconds=float(data.get("accumulated_pause_seconds", 0.0)),
        first_started_at=parse_timestamp(data.get("first_started_at")),
        paused_at=parse_timestamp(data.get("paused_at")),
        ended_at=parse_timestamp(data.get("ended_at")),
    )
