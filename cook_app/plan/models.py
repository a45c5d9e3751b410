"""
Cook plan data models.

This module defines immutable data structures for a generated cook plan:
its ordered stages, the trigger that completes each stage and the
dependencies between stages.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional


class TriggerKind(str, Enum):
    """Condition class that completes a stage."""
    TIME_ELAPSED = "time_elapsed"
    MANUAL_ADVANCE = "manual_advance"
    TEMPERATURE_REACHED = "temperature_reached"


@dataclass(frozen=True)
class Stage:
    """One unit of a cook plan."""

    key: str
    instruction: str
    trigger: TriggerKind
    expected_duration_minutes: Optional[float] = None
    target_temperature_f: Optional[float] = None
    depends_on: frozenset = field(default_factory=frozenset)
    checkpoints: tuple = ()                          # "What to look for" hints

    @property
    def requires_action(self) -> bool:
        """True when the stage waits on the user rather than the clock."""
        return self.trigger in (TriggerKind.MANUAL_ADVANCE, TriggerKind.TEMPERATURE_REACHED)


@dataclass(frozen=True)
class CookPlan:
    """Validated, immutable cook plan."""

    id: str
    title: str
    servings: Optional[int]
    stages: tuple                                    # tuple[Stage, ...] in plan order
    description: Optional[str] = None
    total_time_minutes: Optional[float] = None

    def stage(self, key: str) -> Stage:
        """Look up a stage by key."""
        for stage in self.stages:
            if stage.key == key:
                return stage
        raise KeyError(key)

    def has_stage(self, key: str) -> bool:
        return any(stage.key == key for stage in self.stages)

    def index_of(self, key: str) -> int:
        """Original position of a stage in the plan sequence."""
        for index, stage in enumerate(self.stages):
            if stage.key == key:
                return index
        raise KeyError(key)

    @property
    def stage_keys(self) -> list[str]:
        return [stage.key for stage in self.stages]


def plan_to_dict(plan: CookPlan) -> dict[str, Any]:
    """Convert a plan back to the canonical raw shape accepted by load_plan."""
    return {
        "id": plan.id,
        "title": plan.title,
        "servings": plan.servings,
        "description": plan.description,
        "total_time_minutes": plan.total_time_minutes,
        "stages": [
            {
                "key": stage.key,
                "instruction": stage.instruction,
                "trigger": stage.trigger.value,
                "expected_duration_minutes": stage.expected_duration_minutes,
                "target_temperature_f": stage.target_temperature_f,
                "depends_on": sorted(stage.depends_on),
                "checkpoints": list(stage.checkpoints),
            }
            for stage in plan.stages
        ],
    }
