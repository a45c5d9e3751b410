"""Append-only cook log persistence."""

import json
import sqlite3
from datetime import datetime, timezone
from typing import Optional

from ..history.models import CookLogEntry
from .base import SqliteStore


class CookLogStore(SqliteStore):
    """
    SQLite-backed cook history.

    Entries are keyed by session_id and never updated: storing the same
    session twice keeps the first entry, so callers may safely retry a
    finalize-and-store sequence.
    """

    def __init__(self, db_path: str = "cook_sessions.db"):
        super().__init__(db_path)

    def _init_database(self) -> None:
        """Initialize database schema."""
        with self._get_connection() as conn:
            conn.execute("""
                CREATE TABLE IF NOT EXISTS cook_logs (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    session_id TEXT NOT NULL UNIQUE,
                    recipe_id TEXT,
                    cooked_at TEXT NOT NULL,
                    rating INTEGER,
                    entry_data TEXT NOT NULL,
                    created_at TEXT NOT NULL
                )
            """)

            conn.execute("""
                CREATE INDEX IF NOT EXISTS idx_cook_logs_recipe_id ON cook_logs(recipe_id)
            """)

            conn.execute("""
                CREATE INDEX IF NOT EXISTS idx_cook_logs_cooked_at ON cook_logs(cooked_at)
            """)

            conn.commit()

    def append(self, entry: CookLogEntry) -> bool:
        """
        Store a log entry.

        Args:
            entry: Finalized cook log entry

        Returns:
            True if stored, False if an entry for the session already existed
        """
        with self._lock:
            with self._get_connection() as conn:
                cursor = conn.execute("""
                    INSERT OR IGNORE INTO cook_logs (
                        session_id, recipe_id, cooked_at, rating, entry_data, created_at
                    ) VALUES (?, ?, ?, ?, ?, ?)
                """, (
                    entry.session_id,
                    entry.recipe_id,
                    entry.cooked_at.isoformat(),
                    entry.rating,
                    json.dumps(entry.to_dict()),
                    datetime.now(timezone.utc).isoformat()
                ))
                conn.commit()
                stored = cursor.rowcount > 0

        if stored:
            self.logger.info(
                "Cook log stored",
                session_id=entry.session_id,
                recipe_id=entry.recipe_id
            )
        else:
            self.logger.warning("Cook log already stored, skipping", session_id=entry.session_id)
        return stored

    def get(self, session_id: str) -> Optional[CookLogEntry]:
        """Get the entry for a session."""
        with self._get_connection() as conn:
            row = conn.execute("""
                SELECT entry_data FROM cook_logs WHERE session_id = ?
            """, (session_id,)).fetchone()

        return self._row_to_entry(row) if row else None

    def list_entries(self, limit: Optional[int] = None) -> list[CookLogEntry]:
        """All entries, newest first."""
        query = "SELECT entry_data FROM cook_logs ORDER BY cooked_at DESC, id DESC"
        params: tuple = ()
        if limit is not None:
            query += " LIMIT ?"
            params = (limit,)

        with self._get_connection() as conn:
            rows = conn.execute(query, params).fetchall()

        return [self._row_to_entry(row) for row in rows]

    def list_for_recipe(self, recipe_id: str) -> list[CookLogEntry]:
        """Entries for one recipe, newest first."""
        with self._get_connection() as conn:
            rows = conn.execute("""
                SELECT entry_data FROM cook_logs
                WHERE recipe_id = ?
                ORDER BY cooked_at DESC, id DESC
            """, (recipe_id,)).fetchall()

        return [self._row_to_entry(row) for row in rows]

    def delete(self, session_id: str) -> bool:
        """Remove an entry from history."""
        with self._lock:
            with self._get_connection() as conn:
                cursor = conn.execute("""
                    DELETE FROM cook_logs WHERE session_id = ?
                """, (session_id,))
                conn.commit()
                deleted = cursor.rowcount > 0

        self.logger.info("Cook log deleted", session_id=session_id, deleted=deleted)
        return deleted

    def _row_to_entry(self, row: sqlite3.Row) -> CookLogEntry:
        return CookLogEntry.from_dict(json.loads(row["entry_data"]))
