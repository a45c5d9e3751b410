"""Session snapshot persistence for resuming cooks across restarts."""

import json
from typing import Optional

from ..plan.loader import load_plan
from ..plan.models import CookPlan, plan_to_dict
from ..state.models import CookSession
from ..state.serialization import session_from_dict, session_to_dict
from ..utils.time import SessionClock, SystemClock, format_timestamp
from .base import SqliteStore


class SessionSnapshotStore(SqliteStore):
    """SQLite-backed store of the latest committed snapshot per session."""

    def __init__(self, db_path: str = "cook_sessions.db", clock: Optional[SessionClock] = None):
        self.clock = clock or SystemClock()
        super().__init__(db_path)

    def _init_database(self) -> None:
        """Initialize database schema."""
        with self._get_connection() as conn:
            conn.execute("""
                CREATE TABLE IF NOT EXISTS session_snapshots (
                    session_id TEXT PRIMARY KEY,
                    status TEXT NOT NULL,
                    plan_data TEXT NOT NULL,
                    session_data TEXT NOT NULL,
                    updated_at TEXT NOT NULL
                )
            """)
            conn.commit()

    def save(self, session: CookSession, plan: CookPlan) -> None:
        """Upsert the snapshot for a session together with its plan."""
        with self._lock:
            with self._get_connection() as conn:
                conn.execute("""
                    INSERT INTO session_snapshots (
                        session_id, status, plan_data, session_data, updated_at
                    ) VALUES (?, ?, ?, ?, ?)
                    ON CONFLICT(session_id) DO UPDATE SET
                        status = excluded.status,
                        plan_data = excluded.plan_data,
                        session_data = excluded.session_data,
                        updated_at = excluded.updated_at
                """, (
                    session.session_id,
                    session.status.value,
                    json.dumps(plan_to_dict(plan)),
                    json.dumps(session_to_dict(session)),
                    format_timestamp(self.clock.now())
                ))
                conn.commit()

        self.logger.debug(
            "Session snapshot saved",
            session_id=session.session_id,
            status=session.status.value
        )

    def load(self, session_id: str) -> Optional[tuple[CookPlan, CookSession]]:
        """Load the plan and latest snapshot for a session."""
        with self._get_connection() as conn:
            row = conn.execute("""
                SELECT plan_data, session_data FROM session_snapshots WHERE session_id = ?
            """, (session_id,)).fetchone()

        if row is None:
            return None

        plan = load_plan(json.loads(row["plan_data"]))
        session = session_from_dict(json.loads(row["session_data"]))
        return plan, session

    def delete(self, session_id: str) -> bool:
        """Drop a session snapshot once it has been finalized."""
        with self._lock:
            with self._get_connection() as conn:
                cursor = conn.execute("""
                    DELETE FROM session_snapshots WHERE session_id = ?
                """, (session_id,))
                conn.commit()
                return cursor.rowcount > 0

    def list_session_ids(self, status: Optional[str] = None) -> list[str]:
        """Stored session ids, optionally filtered by status."""
        with self._get_connection() as conn:
            if status is None:
                rows = conn.execute("""
                    SELECT session_id FROM session_snapshots ORDER BY updated_at, session_id
                """).fetchall()
            else:
                rows = conn.execute("""
                    SELECT session_id FROM session_snapshots WHERE status = ? ORDER BY updated_at, session_id
                """, (status,)).fetchall()

        return [row["session_id"] for row in rows]
