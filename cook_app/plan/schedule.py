"""
Serving-time schedule helpers.

Timeline steps carry a relativeHours offset from the target eating time
(negative = before serving). These helpers turn offsets into wall-clock
step times and human-readable descriptions.
"""

import re
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Optional

DEFAULT_EATING_TIME = "6:00 PM"
MINUTES_PER_DAY = 24 * 60

TIME_12H = re.compile(r"^(\d{1,2}):(\d{2})\s*(AM|PM)$", re.IGNORECASE)
TIME_24H = re.compile(r"^(\d{1,2}):(\d{2})$")


@dataclass(frozen=True)
class TimeUntilStart:
    """Distance between now and the first step of a timeline."""
    hours: int
    minutes: int
    is_past: bool


def parse_time_string(value: str) -> Optional[tuple[int, int]]:
    """Parse "5:00 AM", "11:30 PM" or "17:00" into (hours, minutes)."""
    value = value.strip()

    match = TIME_12H.match(value)
    if match:
        hours = int(match.group(1))
        minutes = int(match.group(2))
        period = match.group(3).upper()
        if period == "PM" and hours != 12:
            hours += 12
        elif period == "AM" and hours == 12:
            hours = 0
        return hours, minutes

    match = TIME_24H.match(value)
    if match:
        return int(match.group(1)), int(match.group(2))

    return None


def format_time_12_hour(hours: float, minutes: float) -> str:
    """Format hours and minutes as "5:00 AM", wrapping across midnight."""
    hours = round(hours) % 24
    minutes = round(minutes)

    period = "PM" if hours >= 12 else "AM"
    display_hours = 12 if hours == 0 else hours - 12 if hours > 12 else hours
    return f"{display_hours}:{minutes:02d} {period}"


def time_to_minutes(hours: int, minutes: int) -> int:
    return hours * 60 + minutes


def minutes_to_time(total_minutes: float) -> tuple[int, int]:
    """Convert minutes from midnight to (hours, minutes), wrapping days."""
    total = round(total_minutes) % MINUTES_PER_DAY
    return total // 60, total % 60


def calculate_absolute_time(eating_hours: int, eating_minutes: int, relative_hours: float) -> str:
    """Wall-clock time of a step that is relative_hours from serving."""
    step_minutes = time_to_minutes(eating_hours, eating_minutes) + relative_hours * 60
    hours, minutes = minutes_to_time(step_minutes)
    return format_time_12_hour(hours, minutes)


def recalculate_timeline(timeline: list[dict[str, Any]], eating_time: str) -> list[dict[str, Any]]:
    """
    Recompute every step's "time" for a new target eating time.

    The timeline is returned unchanged when eating_time cannot be parsed.
    """
    parsed = parse_time_string(eating_time)
    if parsed is None:
        return timeline

    hours, minutes = parsed
    return [
        {**step, "time": calculate_absolute_time(hours, minutes, step.get("relativeHours", 0))}
        for step in timeline
    ]


def get_start_time(timeline: list[dict[str, Any]]) -> Optional[str]:
    """Time of the earliest step (most negative relativeHours)."""
    if not timeline:
        return None
    earliest = min(timeline, key=lambda step: step.get("relativeHours", 0))
    return earliest.get("time")


def time_until_start(
    eating_time: str,
    timeline: list[dict[str, Any]],
    now: datetime
) -> Optional[TimeUntilStart]:
    """How long until the first step should begin, relative to now."""
    if not timeline:
        return None

    parsed = parse_time_string(eating_time)
    if parsed is None:
        return None

    earliest = min(step.get("relativeHours", 0) for step in timeline)
    start_minutes = time_to_minutes(*parsed) + earliest * 60
    diff = round(start_minutes - time_to_minutes(now.hour, now.minute))

    return TimeUntilStart(hours=abs(diff) // 60, minutes=abs(diff) % 60, is_past=diff < 0)


def format_relative_time(relative_hours: float) -> str:
    """Describe an offset: -12 -> "12 hours before serving", 0 -> "Serving time"."""
    if relative_hours == 0:
        return "Serving time"

    absolute = abs(relative_hours)
    direction = "after" if relative_hours > 0 else "before"

    if absolute < 1:
        minutes = round(absolute * 60)
        text = f"{minutes} minute{'s' if minutes != 1 else ''}"
    elif absolute % 1 == 0:
        hours = int(absolute)
        text = f"{hours} hour{'s' if hours != 1 else ''}"
    else:
        text = f"{int(absolute)}h {round((absolute % 1) * 60)}m"

    return f"{text} {direction} serving"
