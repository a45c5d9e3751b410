"""
Raw plan validation and construction.

Converts the plan structure produced by the recipe generator into an
immutable CookPlan. Loading is pure: either a fully validated plan is
returned or InvalidPlanError is raised with a machine-readable reason.
"""

import math
from collections import deque
from typing import Any, Optional

import structlog

from ..errors import InvalidPlanError
from .models import CookPlan, Stage, TriggerKind

logger = structlog.get_logger(__name__)

# Generator payloads use camelCase, persisted plans use snake_case
FIELD_ALIASES = {
    "expected_duration_minutes": ("expected_duration_minutes", "expectedDurationMinutes"),
    "target_temperature_f": ("target_temperature_f", "targetTemperatureF"),
    "depends_on": ("depends_on", "dependsOn"),
    "total_time_minutes": ("total_time_minutes", "totalTimeMinutes"),
}

TRIGGER_NAMES = {
    "timeelapsed": TriggerKind.TIME_ELAPSED,
    "manualadvance": TriggerKind.MANUAL_ADVANCE,
    "temperaturereached": TriggerKind.TEMPERATURE_REACHED,
}


def load_plan(raw: Any) -> CookPlan:
    """
    Validate a raw plan structure and build a CookPlan.

    Args:
        raw: Mapping with id, title, servings and an ordered list of stages

    Returns:
        Immutable, validated CookPlan

    Raises:
        InvalidPlanError: if the shape is wrong, stage keys repeat, a
            dependency is unknown, the dependency graph has a cycle, or a
            stage lacks the data its trigger needs
    """
    if not isinstance(raw, dict):
        raise InvalidPlanError("Plan must be a mapping", reason="shape")

    for required in ("id", "title", "stages"):
        if raw.get(required) in (None, ""):
            raise InvalidPlanError(f"Missing required field: {required}", reason="shape")

    raw_stages = raw["stages"]
    if not isinstance(raw_stages, (list, tuple)) or not raw_stages:
        raise InvalidPlanError("stages must be a non-empty list", reason="shape")

    stages = [_build_stage(index, raw_stage) for index, raw_stage in enumerate(raw_stages)]

    # 1) Unique keys
    seen: set[str] = set()
    for stage in stages:
        if stage.key in seen:
            raise InvalidPlanError(
                f"Duplicate stage key: {stage.key}",
                reason="duplicate_key",
                stage_key=stage.key
            )
        seen.add(stage.key)

    # 2) Dependencies reference existing stages
    for stage in stages:
        for dependency in sorted(stage.depends_on):
            if dependency not in seen:
                raise InvalidPlanError(
                    f"Stage {stage.key} depends on unknown stage {dependency}",
                    reason="unknown_dependency",
                    stage_key=stage.key,
                    context={"dependency": dependency}
                )

    # 3) Acyclic dependency graph
    check_acyclic(stages)

    # 4) Trigger requirements
    for stage in stages:
        if stage.trigger == TriggerKind.TEMPERATURE_REACHED and stage.target_temperature_f is None:
            raise InvalidPlanError(
                f"Stage {stage.key} is temperature triggered but has no target temperature",
                reason="missing_target_temperature",
                stage_key=stage.key
            )
        if stage.trigger == TriggerKind.TIME_ELAPSED and stage.expected_duration_minutes is None:
            raise InvalidPlanError(
                f"Stage {stage.key} is time triggered but has no expected duration",
                reason="missing_duration",
                stage_key=stage.key
            )

    plan = CookPlan(
        id=str(raw["id"]),
        title=str(raw["title"]),
        servings=_optional_int(raw.get("servings"), "servings"),
        stages=tuple(stages),
        description=raw.get("description"),
        total_time_minutes=_optional_number(_lookup(raw, "total_time_minutes"), "total_time_minutes"),
    )

    logger.debug("Loaded cook plan", plan_id=plan.id, stage_count=len(plan.stages))
    return plan


def check_acyclic(stages: list[Stage]) -> list[str]:
    """
    Topologically sort stages by their dependencies (Kahn's algorithm).

    Returns:
        Stage keys in a dependency-respecting order, ties broken by plan index

    Raises:
        InvalidPlanError: with reason "cycle" if any stage is part of a cycle
    """
    order_index = {stage.key: index for index, stage in enumerate(stages)}
    remaining = {stage.key: len(stage.depends_on) for stage in stages}
    dependents: dict[str, list[str]] = {stage.key: [] for stage in stages}
    for stage in stages:
        for dependency in stage.depends_on:
            dependents[dependency].append(stage.key)

    ready = deque(sorted((key for key, count in remaining.items() if count == 0),
                         key=order_index.__getitem__))
    ordered: list[str] = []

    while ready:
        key = ready.popleft()
        ordered.append(key)
        for dependent in sorted(dependents[key], key=order_index.__getitem__):
            remaining[dependent] -= 1
            if remaining[dependent] == 0:
                ready.append(dependent)

    if len(ordered) != len(stages):
        processed = set(ordered)
        cyclic = [stage.key for stage in stages if stage.key not in processed]
        raise InvalidPlanError(
            "Stage dependencies contain a cycle",
            reason="cycle",
            stage_key=cyclic[0],
            context={"stages": cyclic}
        )

    return ordered


def parse_trigger(value: Any) -> TriggerKind:
    """Accept TimeElapsed, time_elapsed, time-elapsed and similar spellings."""
    if isinstance(value, TriggerKind):
        return value
    if not isinstance(value, str):
        raise InvalidPlanError(f"Invalid trigger: {value!r}", reason="shape")

    normalized = value.replace("_", "").replace("-", "").replace(" ", "").lower()
    trigger = TRIGGER_NAMES.get(normalized)
    if trigger is None:
        raise InvalidPlanError(f"Unknown trigger: {value}", reason="shape")
    return trigger


def _build_stage(index: int, raw_stage: Any) -> Stage:
    if not isinstance(raw_stage, dict):
        raise InvalidPlanError(f"stages[{index}] must be a mapping", reason="shape")

    key = raw_stage.get("key")
    if not isinstance(key, str) or not key.strip():
        raise InvalidPlanError(f"stages[{index}] is missing a key", reason="shape")

    instruction = raw_stage.get("instruction")
    if not isinstance(instruction, str):
        raise InvalidPlanError(
            f"Stage {key} is missing an instruction",
            reason="shape",
            stage_key=key
        )

    if "trigger" not in raw_stage:
        raise InvalidPlanError(f"Stage {key} is missing a trigger", reason="shape", stage_key=key)

    depends_on = _lookup(raw_stage, "depends_on") or []
    if isinstance(depends_on, str) or not isinstance(depends_on, (list, tuple, set, frozenset)):
        raise InvalidPlanError(
            f"Stage {key} dependencies must be a list",
            reason="shape",
            stage_key=key
        )
    if not all(isinstance(dependency, str) for dependency in depends_on):
        raise InvalidPlanError(
            f"Stage {key} dependencies must be stage keys",
            reason="shape",
            stage_key=key
        )

    duration = _optional_number(_lookup(raw_stage, "expected_duration_minutes"),
                                "expected_duration_minutes", key)
    if duration is not None and duration < 0:
        raise InvalidPlanError(
            f"Stage {key} has a negative duration",
            reason="shape",
            stage_key=key
        )

    checkpoints = raw_stage.get("checkpoints") or []
    if not isinstance(checkpoints, (list, tuple)):
        raise InvalidPlanError(f"Stage {key} checkpoints must be a list", reason="shape", stage_key=key)

    return Stage(
        key=key,
        instruction=instruction,
        trigger=parse_trigger(raw_stage["trigger"]),
        expected_duration_minutes=duration,
        target_temperature_f=_optional_number(_lookup(raw_stage, "target_temperature_f"),
                                              "target_temperature_f", key),
        depends_on=frozenset(depends_on),
        checkpoints=tuple(str(checkpoint) for checkpoint in checkpoints),
    )


def _lookup(data: dict, field_name: str) -> Any:
    for alias in FIELD_ALIASES[field_name]:
        if data.get(alias) is not None:
            return data[alias]
    return None


def _optional_number(value: Any, field_name: str, stage_key: Optional[str] = None) -> Optional[float]:
    if value is None:
        return None
    if isinstance(value, bool):
        raise InvalidPlanError(f"Invalid {field_name}: {value!r}", reason="shape", stage_key=stage_key)
    try:
        number = float(value)
    except (ValueError, TypeError) as e:
        raise InvalidPlanError(
            f"Invalid {field_name}: {e}",
            reason="shape",
            stage_key=stage_key
        ) from e
    if not math.isfinite(number):
        raise InvalidPlanError(f"Invalid {field_name}: {value!r}", reason="shape", stage_key=stage_key)
    return number


def _optional_int(value: Any, field_name: str) -> Optional[int]:
    number = _optional_number(value, field_name)
    return int(number) if number is not None else None
