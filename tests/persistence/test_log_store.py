"""Tests for cook log persistence."""

import sqlite3
import tempfile
from datetime import datetime, timedelta, timezone
from pathlib import Path
from unittest.mock import patch

import pytest

from cook_app.errors import PersistenceError
from cook_app.history.models import CookLogEntry, WeatherConditions
from cook_app.persistence.base import SqliteStore
from cook_app.persistence.log_store import CookLogStore


BASE_TIME = datetime(2024, 1, 1, 18, 0, tzinfo=timezone.utc)


def make_entry(session_id: str, recipe_id: str = "brisket", days: int = 0, rating=5) -> CookLogEntry:
    return CookLogEntry(
        session_id=session_id,
        recipe_id=recipe_id,
        cooked_at=BASE_TIME + timedelta(days=days),
        actual_time_minutes=600,
        rating=rating,
        notes="Juicy",
        what_worked=None,
        what_to_improve="More smoke",
        final_status="completed",
        photos=("file:///flat.jpg",),
        weather_conditions=WeatherConditions(temperature=55.0, conditions="Clear", wind="5 mph"),
    )


class TestCookLogStore:
    """Test CookLogStore operations."""

    def setup_method(self):
        self.temp_dir = tempfile.TemporaryDirectory()
        self.db_path = str(Path(self.temp_dir.name) / "test_logs.db")
        self.store = CookLogStore(self.db_path)

    def teardown_method(self):
        self.temp_dir.cleanup()

    def test_init_creates_table(self):
        with sqlite3.connect(self.db_path) as conn:
            row = conn.execute(
                "SELECT name FROM sqlite_master WHERE type='table' AND name='cook_logs'"
            ).fetchone()
        assert row is not None

    def test_append_and_get(self):
        entry = make_entry("s1")

        assert self.store.append(entry) is True

        assert self.store.get("s1") == entry

    def test_append_is_idempotent_by_session(self):
        first = make_entry("s1", rating=5)
        retry = make_entry("s1", rating=2)

        assert self.store.append(first) is True
        assert self.store.append(retry) is False

        assert self.store.get("s1").rating == 5
        assert len(self.store.list_entries()) == 1

    def test_get_missing(self):
        assert self.store.get("missing") is None

    def test_list_entries_newest_first(self):
        self.store.append(make_entry("old", days=0))
        self.store.append(make_entry("new", days=2))
        self.store.append(make_entry("mid", days=1))

        assert [e.session_id for e in self.store.list_entries()] == ["new", "mid", "old"]
        assert [e.session_id for e in self.store.list_entries(limit=1)] == ["new"]

    def test_list_for_recipe(self):
        self.store.append(make_entry("b1", recipe_id="brisket"))
        self.store.append(make_entry("r1", recipe_id="ribs"))
        self.store.append(make_entry("b2", recipe_id="brisket", days=1))

        assert [e.session_id for e in self.store.list_for_recipe("brisket")] == ["b2", "b1"]
        assert self.store.list_for_recipe("chili") == []

    def test_delete(self):
        self.store.append(make_entry("s1"))

        assert self.store.delete("s1") is True
        assert self.store.delete("s1") is False
        assert self.store.get("s1") is None

    def test_database_error_raises_persistence_error(self):
        with patch("cook_app.persistence.base.sqlite3.connect",
                   side_effect=sqlite3.OperationalError("unable to open database file")):
            with pytest.raises(PersistenceError) as exc_info:
                self.store.get("s1")

        assert exc_info.value.target == self.db_path
        assert exc_info.value.recoverable is False

    def test_store_base_requires_schema(self):
        with pytest.raises(TypeError):
            SqliteStore(self.db_path)
