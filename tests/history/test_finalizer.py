"""Tests for the session finalizer."""

import math

import pytest

from cook_app.config.defaults import SessionParams
from cook_app.errors import SessionNotTerminalError, ValidationError
from cook_app.history.finalizer import SessionFinalizer
from cook_app.history.models import CookFeedback, WeatherConditions
from cook_app.state.machine import (
    abandon, advance_manually, new_session, pause, record_temperature, resume, start, tick
)


@pytest.fixture
def completed_session(branching_plan, clock):
    """Branching plan cooked with one 7.5 minute pause, finishing after 95 minutes."""
    session = start(new_session(branching_plan, session_id="s1", recipe_id="r1"), branching_plan, clock)
    clock.advance(minutes=10)
    session = pause(session, clock)
    clock.advance(minutes=7, seconds=30)
    session = resume(session, clock)
    clock.advance(minutes=20)
    session = tick(session, branching_plan, clock)
    clock.advance(minutes=15)
    session = advance_manually(session, branching_plan, clock)
    clock.advance(minutes=42, seconds=30)
    session = record_temperature(session, branching_plan, clock, 203)
    return session


class TestFinalize:
    """Test finalize on terminal sessions."""

    def test_rating_out_of_range_fails(self, completed_session, clock):
        finalizer = SessionFinalizer(clock)

        with pytest.raises(ValidationError) as exc_info:
            finalizer.finalize(completed_session, CookFeedback(rating=6))

        assert exc_info.value.field == "rating"
        assert exc_info.value.value == 6

    def test_valid_rating_succeeds(self, completed_session, clock):
        finalizer = SessionFinalizer(clock)

        entry = finalizer.finalize(completed_session, CookFeedback(rating=5, notes="  Great bark  "))

        assert entry.session_id == "s1"
        assert entry.recipe_id == "r1"
        assert entry.rating == 5
        assert entry.notes == "Great bark"
        assert entry.final_status == "completed"
        assert entry.cooked_at == clock.now()
        # 95 minutes of wall time minus a 7.5 minute pause, rounded down
        assert entry.actual_time_minutes == 87

    def test_time_measured_to_finalize_call(self, completed_session, clock):
        finalizer = SessionFinalizer(clock)
        clock.advance(minutes=3)

        entry = finalizer.finalize(completed_session)

        assert entry.actual_time_minutes == 90

    def test_abandoned_session_finalizes(self, branching_plan, clock):
        session = start(new_session(branching_plan), branching_plan, clock)
        clock.advance(minutes=12)
        session = abandon(session, clock)

        entry = SessionFinalizer(clock).finalize(session, CookFeedback(what_to_improve="Start earlier"))

        assert entry.final_status == "abandoned"
        assert entry.actual_time_minutes == 12
        assert entry.rating is None
        assert entry.what_to_improve == "Start earlier"

    def test_non_terminal_session_fails(self, branching_plan, clock):
        finalizer = SessionFinalizer(clock)
        session = new_session(branching_plan)

        with pytest.raises(SessionNotTerminalError):
            finalizer.finalize(session)

        running = start(session, branching_plan, clock)
        with pytest.raises(SessionNotTerminalError) as exc_info:
            finalizer.finalize(running)

        assert exc_info.value.current_status == "running"

        with pytest.raises(SessionNotTerminalError):
            finalizer.finalize(pause(running, clock))

    @pytest.mark.parametrize("rating", [0, -1, 4.5, "5", True, math.nan])
    def test_invalid_ratings(self, completed_session, clock, rating):
        with pytest.raises(ValidationError):
            SessionFinalizer(clock).finalize(completed_session, CookFeedback(rating=rating))

    def test_whole_float_rating_accepted(self, completed_session, clock):
        entry = SessionFinalizer(clock).finalize(completed_session, CookFeedback(rating=4.0))
        assert entry.rating == 4
        assert isinstance(entry.rating, int)

    def test_configured_rating_bounds(self, completed_session, clock):
        finalizer = SessionFinalizer(clock, SessionParams(rating_min=1, rating_max=10))

        entry = finalizer.finalize(completed_session, CookFeedback(rating=8))

        assert entry.rating == 8

    def test_blank_text_stored_as_none(self, completed_session, clock):
        entry = SessionFinalizer(clock).finalize(
            completed_session, CookFeedback(notes="   ", what_worked="")
        )

        assert entry.notes is None
        assert entry.what_worked is None

    def test_photos_and_weather(self, completed_session, clock):
        weather = WeatherConditions(temperature=48.0, conditions="Overcast", wind="10 mph NW")

        entry = SessionFinalizer(clock).finalize(
            completed_session,
            CookFeedback(photos=["file:///bark.jpg"], weather_conditions=weather)
        )

        assert entry.photos == ("file:///bark.jpg",)
        assert entry.weather_conditions == weather

    def test_blank_photo_rejected(self, completed_session, clock):
        with pytest.raises(ValidationError) as exc_info:
            SessionFinalizer(clock).finalize(completed_session, CookFeedback(photos=[" "]))

        assert exc_info.value.field == "photos"

    def test_non_text_notes_rejected(self, completed_session, clock):
        with pytest.raises(ValidationError):
            SessionFinalizer(clock).finalize(completed_session, CookFeedback(notes=42))
