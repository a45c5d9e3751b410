"""
Cook history data models.

A CookLogEntry is created exactly once per session and never edited;
corrections are recorded as new entries so the history stays append-only.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Optional

from ..utils.time import format_timestamp, parse_timestamp


@dataclass(frozen=True)
class WeatherConditions:
    """Outdoor conditions during the cook."""
    temperature: float
    conditions: str
    wind: str


@dataclass(frozen=True)
class CookFeedback:
    """User feedback collected when a cook is logged."""
    rating: Optional[int] = None
    notes: Optional[str] = None
    what_worked: Optional[str] = None
    what_to_improve: Optional[str] = None
    photos: tuple = ()
    weather_conditions: Optional[WeatherConditions] = None


@dataclass(frozen=True)
class CookLogEntry:
    """Finalized record of one cook session."""
    session_id: str
    recipe_id: Optional[str]
    cooked_at: datetime
    actual_time_minutes: int
    rating: Optional[int]
    notes: Optional[str]
    what_worked: Optional[str]
    what_to_improve: Optional[str]
    final_status: str                                # "completed" or "abandoned"
    photos: tuple = ()
    weather_conditions: Optional[WeatherConditions] = None

    def to_dict(self) -> dict[str, Any]:
        """JSON-serializable representation for storage."""
        weather = self.weather_conditions
        return {
            "session_id": self.session_id,
            "recipe_id": self.recipe_id,
            "cooked_at": format_timestamp(self.cooked_at),
            "actual_time_minutes": self.actual_time_minutes,
            "rating": self.rating,
            "notes": self.notes,
            "what_worked": self.what_worked,
            "what_to_improve": self.what_to_improve,
            "final_status": self.final_status,
            "photos": list(self.photos),
            "weather_conditions": {
                "temperature": weather.temperature,
                "conditions": weather.conditions,
                "wind": weather.wind,
            } if weather else None,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "CookLogEntry":
        weather = data.get("weather_conditions")
        return cls(
            session_id=data["session_id"],
            recipe_id=data.get("recipe_id"),
            cooked_at=parse_timestamp(data["cooked_at"]),
            actual_time_minutes=int(data["actual_time_minutes"]),
            rating=data.get("rating"),
            notes=data.get("notes"),
            what_worked=data.get("what_worked"),
            what_to_improve=data.get("what_to_improve"),
            final_status=data["final_status"],
            photos=tuple(data.get("photos") or ()),
            weather_conditions=WeatherConditions(**weather) if weather else None,
        )
