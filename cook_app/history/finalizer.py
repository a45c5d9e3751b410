"""
Session finalizer.

Converts a Completed or Abandoned session plus the cook's feedback into a
CookLogEntry. The finalizer enforces terminality and feedback ranges; it
does not deduplicate, which is the log store's job (keyed by session_id).
"""

import math
from numbers import Real
from typing import Optional

import structlog

from ..config.defaults import SessionParams
from ..errors import SessionNotTerminalError, ValidationError
from ..state.models import CookSession
from ..utils.time import SessionClock, elapsed_seconds
from .models import CookFeedback, CookLogEntry, WeatherConditions

logger = structlog.get_logger(__name__)


class SessionFinalizer:
    """Produces the permanent history record for a finished session."""

    def __init__(self, clock: SessionClock, params: Optional[SessionParams] = None):
        self.clock = clock
        self.params = params or SessionParams()
        self.logger = logger

    def finalize(self, session: CookSession, feedback: Optional[CookFeedback] = None) -> CookLogEntry:
        """
        Close a terminal session into a log entry.

        Args:
            session: Completed or Abandoned session snapshot
            feedback: Rating, notes and other cook feedback

        Returns:
            Immutable CookLogEntry

        Raises:
            SessionNotTerminalError: if the session is still NotStarted, Running or Paused
            ValidationError: if the rating or other feedback is out of range
        """
        if not session.is_terminal:
            raise SessionNotTerminalError(
                f"Session {session.session_id} is {session.status.value}; "
                "complete or abandon it before logging",
                current_status=session.status.value,
                context={"session_id": session.session_id}
            )

        feedback = feedback or CookFeedback()
        rating = self._validate_rating(feedback.rating)
        photos = self._validate_photos(feedback.photos)
        weather = self._validate_weather(feedback.weather_conditions)

        now = self.clock.now()
        entry = CookLogEntry(
            session_id=session.session_id,
            recipe_id=session.recipe_id,
            cooked_at=now,
            actual_time_minutes=self.actual_time_minutes(session, now),
            rating=rating,
            notes=_clean_text(feedback.notes, "notes"),
            what_worked=_clean_text(feedback.what_worked, "what_worked"),
            what_to_improve=_clean_text(feedback.what_to_improve, "what_to_improve"),
            final_status=session.status.value,
            photos=photos,
            weather_conditions=weather,
        )

        self.logger.info(
            "Finalized cook session",
            session_id=session.session_id,
            recipe_id=session.recipe_id,
            final_status=entry.final_status,
            actual_time_minutes=entry.actual_time_minutes,
            rating=entry.rating
        )
        return entry

    def actual_time_minutes(self, session: CookSession, now) -> int:
        """Wall time since the first stage started, minus pauses, floored to minutes."""
        if session.first_started_at is None:
            return 0
        active_seconds = elapsed_seconds(session.first_started_at, now) - session.accumulated_pause_seconds
        return max(0, math.floor(active_seconds / 60))

    def _validate_rating(self, rating) -> Optional[int]:
        if rating is None:
            return None
        if (isinstance(rating, bool) or not isinstance(rating, Real)
                or not math.isfinite(rating) or rating != int(rating)):
            raise ValidationError(
                f"Rating must be a whole number, got {rating!r}",
                field="rating",
                value=rating
            )
        if not self.params.rating_min <= rating <= self.params.rating_max:
            raise ValidationError(
                f"Rating must be between {self.params.rating_min} and {self.params.rating_max}",
                field="rating",
                value=rating
            )
        return int(rating)

    def _validate_photos(self, photos) -> tuple:
        photos = tuple(photos or ())
        for photo in photos:
            if not isinstance(photo, str) or not photo.strip():
                raise ValidationError("Photos must be non-empty URIs", field="photos", value=photo)
        return photos

    def _validate_weather(self, weather: Optional[WeatherConditions]) -> Optional[WeatherConditions]:
        if weather is None:
            return None
        if isinstance(weather.temperature, bool) or not isinstance(weather.temperature, Real):
            raise ValidationError(
                "Weather temperature must be a number",
                field="weather_conditions.temperature",
                value=weather.temperature
            )
        return weather


def _clean_text(value: Optional[str], field: str) -> Optional[str]:
    """Trim free text; empty strings are stored as None."""
    if value is None:
        return None
    if not isinstance(value, str):
        raise ValidationError(f"{field} must be text", field=field, value=value)
    value = value.strip()
    return value or None
