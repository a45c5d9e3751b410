"""Pytest configuration and shared fixtures."""

import pytest
from datetime import datetime, timezone
from typing import Dict, Any

from cook_app.plan.loader import load_plan
from cook_app.plan.models import CookPlan
from cook_app.utils.time import FakeClock


@pytest.fixture
def clock() -> FakeClock:
    """Deterministic session clock starting at noon UTC on 2024-01-01."""
    return FakeClock(datetime(2024, 1, 1, 12, 0, 0, tzinfo=timezone.utc))


@pytest.fixture
def branching_plan_data() -> Dict[str, Any]:
    """Timed stage A unblocking a manual stage B and a temperature stage C."""
    return {
        "id": "brisket-plan",
        "title": "Texas Brisket",
        "servings": 8,
        "stages": [
            {
                "key": "A",
                "instruction": "Smoke at 225°F",
                "trigger": "TimeElapsed",
                "expectedDurationMinutes": 30,
                "dependsOn": [],
            },
            {
                "key": "B",
                "instruction": "Wrap in butcher paper",
                "trigger": "ManualAdvance",
                "dependsOn": ["A"],
            },
            {
                "key": "C",
                "instruction": "Cook until internal temp hits 203°F",
                "trigger": "TemperatureReached",
                "targetTemperatureF": 203,
                "dependsOn": ["A"],
            },
        ],
    }


@pytest.fixture
def branching_plan(branching_plan_data) -> CookPlan:
    return load_plan(branching_plan_data)


@pytest.fixture
def sequential_plan_data() -> Dict[str, Any]:
    """Three timed stages chained one after another."""
    return {
        "id": "ribs-plan",
        "title": "Spare Ribs",
        "servings": 4,
        "stages": [
            {
                "key": "smoke",
                "instruction": "Smoke unwrapped",
                "trigger": "time_elapsed",
                "expected_duration_minutes": 180,
            },
            {
                "key": "wrap",
                "instruction": "Wrap with butter and honey",
                "trigger": "time_elapsed",
                "expected_duration_minutes": 120,
                "depends_on": ["smoke"],
            },
            {
                "key": "glaze",
                "instruction": "Sauce and set the glaze",
                "trigger": "time_elapsed",
                "expected_duration_minutes": 60,
                "depends_on": ["wrap"],
            },
        ],
    }


@pytest.fixture
def sequential_plan(sequential_plan_data) -> CookPlan:
    return load_plan(sequential_plan_data)


@pytest.fixture
def sample_recipe_data() -> Dict[str, Any]:
    """Recipe generator payload with a cook timeline."""
    return {
        "title": "Smoked Pork Butt",
        "description": "Low and slow pulled pork",
        "servings": 10,
        "totalTimeMinutes": 720,
        "cookTimeline": [
            {
                "time": "6:00 AM",
                "relativeHours": -12,
                "action": "Trim and season",
                "details": "Apply rub generously",
            },
            {
                "time": "7:00 AM",
                "relativeHours": -11,
                "action": "Smoke",
                "details": "Smoke fat side up",
                "duration": "8 hours",
                "temperature": "225°F",
            },
            {
                "time": "3:00 PM",
                "relativeHours": -3,
                "action": "Finish",
                "details": "Cook until internal temp hits 203°F",
            },
            {
                "time": "5:00 PM",
                "relativeHours": -1,
                "action": "Rest",
                "details": "Rest in a cooler",
                "duration": "1 hour",
            },
        ],
    }
