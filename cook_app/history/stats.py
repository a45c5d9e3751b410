"""History summary helpers."""

from typing import Iterable, Optional

from .models import CookLogEntry


def average_rating(entries: Iterable[CookLogEntry]) -> Optional[float]:
    """Mean rating across rated entries, or None when nothing is rated."""
    ratings = [entry.rating for entry in entries if entry.rating is not None]
    if not ratings:
        return None
    return sum(ratings) / len(ratings)


def total_cook_minutes(entries: Iterable[CookLogEntry]) -> int:
    """Total recorded cooking time across entries."""
    return sum(entry.actual_time_minutes for entry in entries)
