"""Configuration validation utilities."""

import math
from dataclasses import dataclass
from typing import Any

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass(frozen=True)
class ConfigIssue:
    """Represents a configuration validation problem."""
    field: str
    message: str
    value: Any


class ConfigValidator:
    """Validates configuration parameters."""

    @staticmethod
    def validate_session_params(params: dict[str, Any]) -> list[ConfigIssue]:
        """Validate session parameters."""
        errors = []

        for name in ("rating_min", "rating_max"):
            if name in params:
                value = params[name]
                if not isinstance(value, int) or isinstance(value, bool) or value < 0:
                    errors.append(ConfigIssue(
                        field=f"session.{name}",
                        message="Must be a non-negative integer",
                        value=value
                    ))

        rating_min = params.get("rating_min")
        rating_max = params.get("rating_max")
        if (isinstance(rating_min, int) and isinstance(rating_max, int)
                and rating_min > rating_max):
            errors.append(ConfigIssue(
                field="session.rating_max",
                message="Must be greater than or equal to rating_min",
                value=rating_max
            ))

        if "tick_interval_seconds" in params:
            value = params["tick_interval_seconds"]
            if (not isinstance(value, (int, float)) or isinstance(value, bool)
                    or not math.isfinite(value) or value <= 0):
                errors.append(ConfigIssue(
                    field="session.tick_interval_seconds",
                    message="Must be a positive number",
                    value=value
                ))

        return errors

    @staticmethod
    def validate_persistence_params(params: dict[str, Any]) -> list[ConfigIssue]:
        """Validate persistence parameters."""
        errors = []

        if "enabled" in params and not isinstance(params["enabled"], bool):
            errors.append(ConfigIssue(
                field="persistence.enabled",
                message="Must be a boolean",
                value=params["enabled"]
            ))

        if "db_path" in params:
            value = params["db_path"]
            if not isinstance(value, str) or not value.strip():
                errors.append(ConfigIssue(
                    field="persistence.db_path",
                    message="Must be a non-empty string",
                    value=value
                ))

        return errors

    @staticmethod
    def validate_logging_params(params: dict[str, Any]) -> list[ConfigIssue]:
        """Validate logging parameters."""
        errors = []

        if "level" in params:
            value = params["level"]
            if not isinstance(value, str) or value.upper() not in LOG_LEVELS:
                errors.append(ConfigIssue(
                    field="logging.level",
                    message=f"Must be one of {', '.join(LOG_LEVELS)}",
                    value=value
                ))

        if "format_json" in params and not isinstance(params["format_json"], bool):
            errors.append(ConfigIssue(
                field="logging.format_json",
                message="Must be a boolean",
                value=params["format_json"]
            ))

        return errors

    @staticmethod
    def validate_config(config: dict[str, Any]) -> list[ConfigIssue]:
        """Validate complete configuration."""
        errors = []

        if "session" in config:
            errors.extend(ConfigValidator.validate_session_params(config["session"]))

        if "persistence" in config:
            errors.extend(ConfigValidator.validate_persistence_params(config["persistence"]))

        if "logging" in config:
            errors.extend(ConfigValidator.validate_logging_params(config["logging"]))

        return errors
