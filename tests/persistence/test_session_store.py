"""Tests for session snapshot persistence."""

import tempfile
from pathlib import Path

from cook_app.persistence.session_store import SessionSnapshotStore
from cook_app.state.machine import new_session, pause, start


class TestSessionSnapshotStore:
    """Test SessionSnapshotStore operations."""

    def setup_method(self):
        self.temp_dir = tempfile.TemporaryDirectory()
        self.store = SessionSnapshotStore(str(Path(self.temp_dir.name) / "test_sessions.db"))

    def teardown_method(self):
        self.temp_dir.cleanup()

    def test_save_and_load(self, branching_plan, clock):
        session = start(new_session(branching_plan, session_id="s1"), branching_plan, clock)

        self.store.save(session, branching_plan)
        plan, restored = self.store.load("s1")

        assert plan == branching_plan
        assert restored == session

    def test_save_overwrites_latest_snapshot(self, branching_plan, clock):
        session = start(new_session(branching_plan, session_id="s1"), branching_plan, clock)
        self.store.save(session, branching_plan)
        clock.advance(minutes=5)
        paused = pause(session, clock)

        self.store.save(paused, branching_plan)

        _, restored = self.store.load("s1")
        assert restored == paused
        assert self.store.list_session_ids() == ["s1"]

    def test_load_missing(self):
        assert self.store.load("missing") is None

    def test_list_by_status(self, branching_plan, clock):
        self.store.save(new_session(branching_plan, session_id="waiting"), branching_plan)
        running = start(new_session(branching_plan, session_id="cooking"), branching_plan, clock)
        self.store.save(running, branching_plan)

        assert self.store.list_session_ids("running") == ["cooking"]
        assert set(self.store.list_session_ids()) == {"waiting", "cooking"}

    def test_delete(self, branching_plan):
        self.store.save(new_session(branching_plan, session_id="s1"), branching_plan)

        assert self.store.delete("s1") is True
        assert self.store.delete("s1") is False
        assert self.store.load("s1") is None

    def test_list_orders_by_clock_time_of_last_save(self, branching_plan, clock):
        store = SessionSnapshotStore(str(Path(self.temp_dir.name) / "clocked.db"), clock=clock)
        first = new_session(branching_plan, session_id="first")
        second = new_session(branching_plan, session_id="second")

        store.save(first, branching_plan)
        clock.advance(minutes=1)
        store.save(second, branching_plan)
        assert store.list_session_ids() == ["first", "second"]

        clock.advance(minutes=1)
        store.save(start(first, branching_plan, clock), branching_plan)
        assert store.list_session_ids() == ["second", "first"]
