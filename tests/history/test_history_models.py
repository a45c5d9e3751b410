"""Tests for cook history models and summaries."""

from datetime import datetime, timezone

import pytest

from cook_app.history.models import CookLogEntry, WeatherConditions
from cook_app.history.stats import average_rating, total_cook_minutes


def make_entry(session_id: str, rating=None, minutes: int = 60, recipe_id: str = "r1") -> CookLogEntry:
    return CookLogEntry(
        session_id=session_id,
        recipe_id=recipe_id,
        cooked_at=datetime(2024, 1, 1, 18, 0, tzinfo=timezone.utc),
        actual_time_minutes=minutes,
        rating=rating,
        notes=None,
        what_worked=None,
        what_to_improve=None,
        final_status="completed",
    )


class TestCookLogEntry:
    """Test CookLogEntry dict conversion."""

    def test_to_dict(self):
        entry = make_entry("s1", rating=4)

        data = entry.to_dict()

        assert data["session_id"] == "s1"
        assert data["cooked_at"] == "2024-01-01T18:00:00+00:00"
        assert data["photos"] == []
        assert data["weather_conditions"] is None

    def test_from_dict_with_weather(self):
        data = make_entry("s1", rating=4).to_dict()
        data["weather_conditions"] = {"temperature": 30.5, "conditions": "Snow", "wind": "calm"}
        data["photos"] = ["file:///a.jpg"]

        entry = CookLogEntry.from_dict(data)

        assert entry.weather_conditions == WeatherConditions(30.5, "Snow", "calm")
        assert entry.photos == ("file:///a.jpg",)
        assert entry.cooked_at.tzinfo is not None


class TestStats:
    """Test history summaries."""

    def test_average_rating_ignores_unrated(self):
        entries = [make_entry("a", 5), make_entry("b", None), make_entry("c", 4)]
        assert average_rating(entries) == pytest.approx(4.5)

    def test_average_rating_empty(self):
        assert average_rating([]) is None
        assert average_rating([make_entry("a")]) is None

    def test_total_cook_minutes(self):
        entries = [make_entry("a", minutes=90), make_entry("b", minutes=615)]
        assert total_cook_minutes(entries) == 705
