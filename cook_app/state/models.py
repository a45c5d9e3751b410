"""
Session state data models for the cook session lifecycle.

This module defines immutable data structures for a live cook session.
Every operation produces a new CookSession snapshot, so readers can hold
on to a snapshot without locking while the runtime commits the next one.
"""

from dataclasses import dataclass, field, replace
from datetime import datetime
from enum import Enum
from typing import Optional


class SessionStatus(str, Enum):
    """Session lifecycle states."""
    NOT_STARTED = "not_started"
    RUNNING = "running"
    PAUSED = "paused"
    COMPLETED = "completed"
    ABANDONED = "abandoned"

    @property
    def is_terminal(self) -> bool:
        return self in (SessionStatus.COMPLETED, SessionStatus.ABANDONED)


class StageStatus(str, Enum):
    """Per-stage runtime states."""
    PENDING = "pending"
    ACTIVE = "active"
    COMPLETED = "completed"
    SKIPPED = "skipped"

    @property
    def is_resolved(self) -> bool:
        """Completed and Skipped both satisfy dependency gating."""
        return self in (StageStatus.COMPLETED, StageStatus.SKIPPED)


@dataclass(frozen=True)
class StageRuntime:
    """Runtime record for a single stage."""

    status: StageStatus = StageStatus.PENDING
    started_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None
    paused_seconds: float = 0.0                      # Pause time overlapping this stage

    def activated(self, timestamp: datetime) -> 'StageRuntime':
        return replace(self, status=StageStatus.ACTIVE, started_at=timestamp)

    def resolved(self, status: StageStatus, timestamp: datetime,
                 extra_paused_seconds: float = 0.0) -> 'StageRuntime':
        return replace(
            self,
            status=status,
            completed_at=timestamp,
            paused_seconds=self.paused_seconds + extra_paused_seconds
        )

    def with_pause(self, seconds: float) -> 'StageRuntime':
        return replace(self, paused_seconds=self.paused_seconds + seconds)


@dataclass(frozen=True)
class CookSession:
    """Immutable snapshot of one live execution of a cook plan."""

    session_id: str
    plan_id: str
    status: SessionStatus
    stage_states: dict = field(default_factory=dict)  # stage key -> StageRuntime
    stage_order: tuple = ()                           # stage keys in plan order
    active_stage_key: Optional[str] = None
    accumulated_pause_seconds: float = 0.0
    recipe_id: Optional[str] = None

    # Key timestamps (session clock)
    first_started_at: Optional[datetime] = None
    paused_at: Optional[datetime] = None              # Start of the open pause interval
    ended_at: Optional[datetime] = None               # When a terminal state was reached

    @property
    def is_terminal(self) -> bool:
        return self.status.is_terminal

    def runtime(self, stage_key: str) -> StageRuntime:
        return self.stage_states[stage_key]

    def stages_with_status(self, status: StageStatus) -> list[str]:
        """Stage keys in plan order that currently have the given status."""
        return [key for key in self.stage_order if self.stage_states[key].status == status]

    def with_stage(self, stage_key: str, runtime: StageRuntime) -> 'CookSession':
        """Create a new snapshot with one stage runtime replaced."""
        stage_states = dict(self.stage_states)
        stage_states[stage_key] = runtime
        return replace(self, stage_states=stage_states)

    def with_status(self, status: SessionStatus, **changes) -> 'CookSession':
        """Create a new snapshot with an updated lifecycle status."""
        return replace(self, status=status, **changes)
