"""
Notification policy for cook session transitions.

The policy is a pure diff over two session snapshots. It never looks at the
clock or stored state, so evaluating the same pair twice yields the same
events and evaluating a snapshot against itself yields none.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from ..plan.models import CookPlan
from ..state.models import CookSession, SessionStatus, StageStatus


class NotificationKind(str, Enum):
    """Notification event types."""
    STAGE_STARTED = "stage_started"
    STAGE_COMPLETED = "stage_completed"
    STAGE_SKIPPED = "stage_skipped"
    ACTION_REQUIRED = "action_required"
    SESSION_COMPLETED = "session_completed"
    SESSION_ABANDONED = "session_abandoned"


@dataclass(frozen=True)
class Notification:
    """A single event for the presentation layer."""

    kind: NotificationKind
    session_id: str
    stage_key: Optional[str] = None
    instruction: Optional[str] = None
    trigger: Optional[str] = None                    # Set for ACTION_REQUIRED
    target_temperature_f: Optional[float] = None     # Set for temperature actions


class NotificationPolicy:
    """Derives notifications from consecutive snapshots of one plan's session."""

    def __init__(self, plan: CookPlan):
        self.plan = plan

    def evaluate(self, previous: CookSession, current: CookSession) -> list[Notification]:
        """
        Compare two snapshots and return the events between them.

        Order: resolved stages (plan order), newly active stages with their
        action prompts, then session-level events.
        """
        notifications: list[Notification] = []
        session_id = current.session_id

        # 1) Stages resolved in this step
        for stage in self.plan.stages:
            before = _status(previous, stage.key)
            after = _status(current, stage.key)
            if before == after:
                continue
            if after == StageStatus.COMPLETED:
                notifications.append(Notification(
                    kind=NotificationKind.STAGE_COMPLETED,
                    session_id=session_id,
                    stage_key=stage.key
                ))
            elif after == StageStatus.SKIPPED:
                notifications.append(Notification(
                    kind=NotificationKind.STAGE_SKIPPED,
                    session_id=session_id,
                    stage_key=stage.key
                ))

        # 2) Stages that became active
        for stage in self.plan.stages:
            before = _status(previous, stage.key)
            after = _status(current, stage.key)
            if after != StageStatus.ACTIVE or before == StageStatus.ACTIVE:
                continue

            notifications.append(Notification(
                kind=NotificationKind.STAGE_STARTED,
                session_id=session_id,
                stage_key=stage.key,
                instruction=stage.instruction
            ))
            if stage.requires_action:
                notifications.append(Notification(
                    kind=NotificationKind.ACTION_REQUIRED,
                    session_id=session_id,
                    stage_key=stage.key,
                    instruction=stage.instruction,
                    trigger=stage.trigger.value,
                    target_temperature_f=stage.target_temperature_f
                ))

        # 3) Session-level events
        if previous.status != current.status:
            if current.status == SessionStatus.COMPLETED:
                notifications.append(Notification(
                    kind=NotificationKind.SESSION_COMPLETED,
                    session_id=session_id
                ))
            elif current.status == SessionStatus.ABANDONED:
                notifications.append(Notification(
                    kind=NotificationKind.SESSION_ABANDONED,
                    session_id=session_id
                ))

        return notifications


def _status(session: CookSession, stage_key: str) -> Optional[StageStatus]:
    runtime = session.stage_states.get(stage_key)
    return runtime.status if runtime else None
