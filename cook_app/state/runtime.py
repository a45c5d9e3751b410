"""
Runtime state management for a live cook session.

SessionRuntime is the single writer for one session: it serializes every
mutating intent, commits the resulting snapshot, derives notifications and
hands both to registered listeners. Readers use the `session` property and
always see the latest committed snapshot without locking.
"""

import threading
from dataclasses import dataclass
from typing import TYPE_CHECKING, Callable, Optional

from ..errors import AlreadyStartedError, InvalidTransitionError, SessionError
from ..logging.config import get_logger, log_rejected_operation
from ..notifications.policy import Notification, NotificationPolicy
from ..plan.models import CookPlan
from ..utils.time import SessionClock
from . import machine
from .models import CookSession

if TYPE_CHECKING:
    from ..persistence.session_store import SessionSnapshotStore

logger = get_logger(__name__)

SessionListener = Callable[[CookSession, tuple], None]


@dataclass(frozen=True)
class OperationResult:
    """Outcome of one intent: the committed snapshot and its notifications."""

    session: CookSession
    notifications: tuple[Notification, ...] = ()
    rejected: Optional[SessionError] = None

    @property
    def accepted(self) -> bool:
        return self.rejected is None


class SessionRuntime:
    """Owns the live snapshot for one cook session."""

    def __init__(
        self,
        plan: CookPlan,
        clock: SessionClock,
        session: Optional[CookSession] = None,
        snapshot_store: Optional["SessionSnapshotStore"] = None,
        recipe_id: Optional[str] = None
    ):
        self.logger = logger
        self.plan = plan
        self.clock = clock
        self.policy = NotificationPolicy(plan)
        self.snapshot_store = snapshot_store
        self.listeners: list[SessionListener] = []
        self._lock = threading.Lock()
        self._session = session or machine.new_session(plan, recipe_id=recipe_id)

        if session is None and snapshot_store is not None:
            snapshot_store.save(self._session, plan)

    @property
    def session(self) -> CookSession:
        """Latest committed snapshot."""
        return self._session

    def add_listener(self, listener: SessionListener) -> None:
        """Register a callback receiving (snapshot, notifications) after each commit."""
        self.listeners.append(listener)

    def start(self) -> OperationResult:
        return self._apply("start", lambda s: machine.start(s, self.plan, self.clock))

    def tick(self) -> OperationResult:
        return self._apply("tick", lambda s: machine.tick(s, self.plan, self.clock))

    def record_temperature(self, value: float) -> OperationResult:
        return self._apply(
            "record_temperature",
            lambda s: machine.record_temperature(s, self.plan, self.clock, value)
        )

    def advance_manually(self) -> OperationResult:
        return self._apply("advance_manually", lambda s: machine.advance_manually(s, self.plan, self.clock))

    def skip(self, stage_key: str) -> OperationResult:
        return self._apply("skip", lambda s: machine.skip(s, self.plan, self.clock, stage_key))

    def pause(self) -> OperationResult:
        return self._apply("pause", lambda s: machine.pause(s, self.clock))

    def resume(self) -> OperationResult:
        return self._apply("resume", lambda s: machine.resume(s, self.clock))

    def abandon(self) -> OperationResult:
        return self._apply("abandon", lambda s: machine.abandon(s, self.clock))

    def next_instruction(self) -> Optional[str]:
        return machine.next_instruction(self._session, self.plan)

    def remaining_seconds(self) -> Optional[float]:
        """Time left on the active stage, if it is timed."""
        session = self._session
        if session.active_stage_key is None or session.is_terminal:
            return None
        return machine.stage_remaining_seconds(
            session, self.plan, session.active_stage_key, self.clock.now()
        )

    def _apply(
        self,
        operation: str,
        transition: Callable[[CookSession], CookSession]
    ) -> OperationResult:
        """
        Run one transition under the write lock and commit the result.

        Misuse (already started, undefined transition) is logged and leaves
        the snapshot unchanged. Other errors propagate without committing.
        """
        with self._lock:
            previous = self._session
            try:
                current = transition(previous)
            except (AlreadyStartedError, InvalidTransitionError) as e:
                log_rejected_operation(
                    self.logger, previous.session_id, operation, previous.status.value, e
                )
                return OperationResult(session=previous, rejected=e)

            if current == previous:
                return OperationResult(session=previous)

            notifications = tuple(self.policy.evaluate(previous, current))

            if self.snapshot_store is not None:
                self.snapshot_store.save(current, self.plan)
            self._session = current

        self.logger.debug(
            "Committed session snapshot",
            session_id=current.session_id,
            operation=operation,
            status=current.status.value,
            active_stage_key=current.active_stage_key,
            notifications=[n.kind.value for n in notifications]
        )
        self._notify(current, notifications)
        return OperationResult(session=current, notifications=notifications)

    def _notify(self, session: CookSession, notifications: tuple) -> None:
        for listener in self.listeners:
            try:
                listener(session, notifications)
            except Exception as e:
                self.logger.error(
                    "Session listener failed",
                    session_id=session.session_id,
                    error=str(e)
                )
