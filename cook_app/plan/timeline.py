"""
Recipe generator timeline adapter.

The recipe generator returns a RecipeData payload whose cookTimeline lists
human-oriented steps ("Smoke until internal temp hits 203°F", duration
"2 hours", temperature "225°F"). This module turns that payload into the raw
plan structure accepted by load_plan, inferring each stage's trigger from
the step's duration and temperature text.
"""

import re
import uuid
from typing import Any, Optional

from .loader import load_plan
from .models import CookPlan, TriggerKind

HOUR_UNITS = ("h", "hr", "hrs", "hour", "hours")
MINUTE_UNITS = ("m", "min", "mins", "minute", "minutes")

DURATION_PATTERN = re.compile(
    r"(\d+(?:\.\d+)?)(?:\s*(?:-|–|to)\s*\d+(?:\.\d+)?)?\s*"
    r"(hours|hour|hrs|hr|h|minutes|minute|mins|min|m)\b",
    re.IGNORECASE,
)
TEMPERATURE_PATTERN = re.compile(
    r"(\d+(?:\.\d+)?)(?:\s*(?:-|–|to)\s*\d+(?:\.\d+)?)?\s*°?\s*([FC])\b",
    re.IGNORECASE,
)
INTERNAL_MARKERS = ("internal", "probe", "pull at", "until it reaches")


def parse_duration_minutes(text: Optional[str]) -> Optional[float]:
    """
    Parse a free-text duration into minutes.

    Components are summed ("1 hour 30 minutes" -> 90). Ranges use their
    lower bound ("10-12 hours" -> 600).

    Returns:
        Minutes, or None when no duration can be read
    """
    if not text:
        return None

    total = 0.0
    found = False
    for amount, unit in DURATION_PATTERN.findall(text):
        found = True
        if unit.lower() in HOUR_UNITS:
            total += float(amount) * 60
        else:
            total += float(amount)

    return total if found else None


def parse_temperature_f(text: Optional[str]) -> Optional[float]:
    """
    Parse the first temperature in a string, converting Celsius to Fahrenheit.

    Ranges use their lower bound ("225-250°F" -> 225).
    """
    if not text:
        return None

    match = TEMPERATURE_PATTERN.search(text)
    if not match:
        return None

    value = float(match.group(1))
    if match.group(2).upper() == "C":
        value = round(value * 9 / 5 + 32, 1)
    return value


def infer_trigger(step: dict[str, Any]) -> tuple[TriggerKind, Optional[float], Optional[float]]:
    """
    Decide how a timeline step completes.

    A readable duration makes the step time triggered. Otherwise a step whose
    text names an internal/probe temperature waits on a thermometer reading.
    Everything else needs the cook to advance it by hand.

    Returns:
        (trigger, expected_duration_minutes, target_temperature_f)
    """
    duration = parse_duration_minutes(step.get("duration"))
    temperature_text = " ".join(
        str(step.get(name) or "") for name in ("temperature", "action", "details")
    )
    temperature = parse_temperature_f(step.get("temperature")) or parse_temperature_f(temperature_text)

    if duration is not None:
        return TriggerKind.TIME_ELAPSED, duration, temperature

    lowered = temperature_text.lower()
    if temperature is not None and any(marker in lowered for marker in INTERNAL_MARKERS):
        return TriggerKind.TEMPERATURE_REACHED, None, temperature

    return TriggerKind.MANUAL_ADVANCE, None, temperature


def timeline_to_raw_plan(
    recipe_data: dict[str, Any],
    plan_id: Optional[str] = None,
    sequential: bool = False
) -> dict[str, Any]:
    """
    Convert a generator RecipeData payload into a raw plan structure.

    Args:
        recipe_data: Payload with title, servings and cookTimeline
        plan_id: Plan identifier, typically the stored recipe id
        sequential: Chain each stage to the previous one via depends_on

    Returns:
        Raw plan dictionary for load_plan
    """
    timeline = recipe_data.get("cookTimeline") or recipe_data.get("cook_timeline") or []

    stages = []
    previous_key = None
    for index, step in enumerate(timeline):
        key = f"step-{index + 1}"
        trigger, duration, temperature = infer_trigger(step)

        action = (step.get("action") or "").strip()
        details = (step.get("details") or "").strip()
        instruction = f"{action}: {details}" if action and details else (action or details)

        stages.append({
            "key": key,
            "instruction": instruction,
            "trigger": trigger.value,
            "expected_duration_minutes": duration,
            "target_temperature_f": temperature,
            "depends_on": [previous_key] if sequential and previous_key else [],
            "checkpoints": list(step.get("checkpoints") or []),
        })
        previous_key = key

    return {
        "id": plan_id or str(uuid.uuid4()),
        "title": recipe_data.get("title"),
        "servings": recipe_data.get("servings"),
        "description": recipe_data.get("description"),
        "total_time_minutes": recipe_data.get("totalTimeMinutes"),
        "stages": stages,
    }


def plan_from_recipe(
    recipe_data: dict[str, Any],
    plan_id: Optional[str] = None,
    sequential: bool = False
) -> CookPlan:
    """Convert and validate a generator payload in one step."""
    return load_plan(timeline_to_raw_plan(recipe_data, plan_id=plan_id, sequential=sequential))
