"""
Main cook session engine coordinator.

Orchestrates the cook session pipeline, coordinating plan loading, the live
session runtime, notifications, finalization and history storage.
"""

from pathlib import Path
from typing import Any, Optional

import structlog

from .config.loader import ConfigLoader
from .config.validation import ConfigValidator
from .errors import InvalidPlanError, InvalidTransitionError
from .history.finalizer import SessionFinalizer
from .history.models import CookFeedback, CookLogEntry
from .history.stats import average_rating
from .logging.config import configure_from_params
from .persistence.log_store import CookLogStore
from .persistence.session_store import SessionSnapshotStore
from .plan.loader import load_plan
from .plan.models import CookPlan
from .plan.timeline import timeline_to_raw_plan
from .state.models import CookSession
from .state.runtime import OperationResult, SessionListener, SessionRuntime
from .utils.time import SessionClock, SystemClock

logger = structlog.get_logger(__name__)


class CookSessionEngine:
    """
    Main coordinator for one user's cook sessions.

    Manages the session pipeline:
    Raw Plan → Plan Model → Session Runtime → Notifications → Finalizer → History
    """

    def __init__(
        self,
        config_dir: Optional[str] = None,
        clock: Optional[SessionClock] = None,
        overrides: Optional[dict[str, Any]] = None
    ) -> None:
        """Initialize the cook session engine."""
        self.logger = logger

        self.config_loader = ConfigLoader.create(Path(config_dir) if config_dir else None)
        merged = self.config_loader.merge_config(overrides)
        errors = ConfigValidator.validate_config(merged)
        if errors:
            error_msgs = [f"{err.field}: {err.message} (got: {err.value})" for err in errors]
            self.logger.error("Engine configuration invalid", errors=error_msgs)
            raise ValueError(f"Invalid engine configuration: {'; '.join(error_msgs)}")
        self.config = self.config_loader.load(overrides)
        configure_from_params(self.config.logging)

        self.clock = clock or SystemClock()
        self.finalizer = SessionFinalizer(self.clock, self.config.session)

        if self.config.persistence.enabled:
            self.log_store: Optional[CookLogStore] = CookLogStore(self.config.persistence.db_path)
            self.snapshot_store: Optional[SessionSnapshotStore] = SessionSnapshotStore(
                self.config.persistence.db_path,
                clock=self.clock
            )
        else:
            self.log_store = None
            self.snapshot_store = None

        self.runtime: Optional[SessionRuntime] = None
        self.listeners: list[SessionListener] = []

        self.logger.info(
            "Cook session engine initialized",
            persistence=self.config.persistence.enabled,
            db_path=self.config.persistence.db_path
        )

    def add_listener(self, listener: SessionListener) -> None:
        """Register a presentation listener for current and future sessions."""
        self.listeners.append(listener)
        if self.runtime is not None:
            self.runtime.add_listener(listener)

    def create_session(
        self,
        raw_plan: Any,
        recipe_id: Optional[str] = None
    ) -> CookSession:
        """
        Load a raw plan and open a NotStarted session for it.

        Raises:
            InvalidPlanError: if the plan is malformed or cyclic
            InvalidTransitionError: if another session is still live
        """
        self._ensure_no_live_session()

        try:
            plan = load_plan(raw_plan)
        except InvalidPlanError as e:
            self.logger.error(
                "Could not start this plan",
                reason=e.reason,
                stage_key=e.stage_key,
                error=str(e)
            )
            raise

        return self._open(plan, recipe_id=recipe_id)

    def create_session_from_recipe(
        self,
        recipe_data: dict[str, Any],
        recipe_id: Optional[str] = None,
        sequential: bool = False
    ) -> CookSession:
        """Open a session from a recipe generator payload."""
        raw_plan = timeline_to_raw_plan(recipe_data, plan_id=recipe_id, sequential=sequential)
        return self.create_session(raw_plan, recipe_id=recipe_id)

    def resume_session(self, session_id: str) -> Optional[CookSession]:
        """Restore a session snapshot saved before a restart."""
        if self.snapshot_store is None:
            return None

        self._ensure_no_live_session()
        stored = self.snapshot_store.load(session_id)
        if stored is None:
            self.logger.warning("No stored snapshot for session", session_id=session_id)
            return None

        plan, session = stored
        self._attach(SessionRuntime(
            plan=plan,
            clock=self.clock,
            session=session,
            snapshot_store=self.snapshot_store
        ))
        self.logger.info(
            "Resumed cook session",
            session_id=session_id,
            status=session.status.value
        )
        return session

    @property
    def session(self) -> Optional[CookSession]:
        """Latest committed snapshot of the live session."""
        return self.runtime.session if self.runtime else None

    @property
    def plan(self) -> Optional[CookPlan]:
        return self.runtime.plan if self.runtime else None

    @property
    def tick_interval_seconds(self) -> int:
        """How often an external driver should call tick()."""
        return self.config.session.tick_interval_seconds

    def start(self) -> OperationResult:
        return self._require_runtime("start").start()

    def tick(self) -> OperationResult:
        return self._require_runtime("tick").tick()

    def pause(self) -> OperationResult:
        return self._require_runtime("pause").pause()

    def resume(self) -> OperationResult:
        return self._require_runtime("resume").resume()

    def skip(self, stage_key: str) -> OperationResult:
        return self._require_runtime("skip").skip(stage_key)

    def advance_manually(self) -> OperationResult:
        return self._require_runtime("advance_manually").advance_manually()

    def record_temperature(self, value: float) -> OperationResult:
        return self._require_runtime("record_temperature").record_temperature(value)

    def abandon(self) -> OperationResult:
        return self._require_runtime("abandon").abandon()

    def finalize(self, feedback: Optional[CookFeedback] = None) -> CookLogEntry:
        """
        Close the live session into a history entry and store it.

        Raises:
            SessionNotTerminalError: if the session has not completed or been abandoned
            ValidationError: if the feedback is out of range
        """
        runtime = self._require_runtime("finalize")
        entry = self.finalizer.finalize(runtime.session, feedback)

        if self.log_store is not None:
            self.log_store.append(entry)
        if self.snapshot_store is not None:
            self.snapshot_store.delete(entry.session_id)

        self.runtime = None
        return entry

    def history(self, recipe_id: Optional[str] = None) -> list[CookLogEntry]:
        """Stored cook logs, newest first, optionally for one recipe."""
        if self.log_store is None:
            return []
        if recipe_id is not None:
            return self.log_store.list_for_recipe(recipe_id)
        return self.log_store.list_entries()

    def recipe_rating(self, recipe_id: str) -> Optional[float]:
        """Average rating across a recipe's cooks."""
        return average_rating(self.history(recipe_id))

    def _open(self, plan: CookPlan, recipe_id: Optional[str]) -> CookSession:
        runtime = SessionRuntime(
            plan=plan,
            clock=self.clock,
            snapshot_store=self.snapshot_store,
            recipe_id=recipe_id
        )
        self._attach(runtime)
        self.logger.info(
            "Created cook session",
            session_id=runtime.session.session_id,
            plan_id=plan.id,
            recipe_id=recipe_id,
            stage_count=len(plan.stages)
        )
        return runtime.session

    def _attach(self, runtime: SessionRuntime) -> None:
        for listener in self.listeners:
            runtime.add_listener(listener)
        self.runtime = runtime

    def _ensure_no_live_session(self) -> None:
        if self.runtime is not None and not self.runtime.session.is_terminal:
            current = self.runtime.session
            raise InvalidTransitionError(
                f"Session {current.session_id} is still {current.status.value}; "
                "abandon or finish it first",
                current_status=current.status.value,
                attempted="create_session",
                context={"session_id": current.session_id}
            )

    def _require_runtime(self, operation: str) -> SessionRuntime:
        if self.runtime is None:
            raise InvalidTransitionError(
                f"Cannot {operation}: no session is open",
                attempted=operation
            )
        return self.runtime
