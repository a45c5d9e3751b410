"""Configuration loader with 3-tier parameter precedence."""

from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Any, Optional

import yaml

from .defaults import DefaultConfig, config_from_dict, get_default_config

CONFIG_FILENAME = "engine.yaml"
DEFAULT_CONFIG_DIR = Path(__file__).parent.parent.parent / "config"


@dataclass(frozen=True)
class ConfigLoader:
    """Resolves engine configuration from defaults, engine.yaml and call overrides."""

    config_dir: Path
    defaults: DefaultConfig

    @classmethod
    def create(cls, config_dir: Optional[Path] = None) -> "ConfigLoader":
        """Create a loader reading engine.yaml from config_dir (repository config/ by default)."""
        return cls(
            config_dir=Path(config_dir) if config_dir is not None else DEFAULT_CONFIG_DIR,
            defaults=get_default_config(),
        )

    @property
    def config_file(self) -> Path:
        return self.config_dir / CONFIG_FILENAME

    def load_file_config(self) -> dict[str, Any]:
        """Read engine.yaml; a missing or empty file contributes nothing."""
        if not self.config_file.exists():
            return {}

        with open(self.config_file) as f:
            return yaml.safe_load(f) or {}

    def merge_config(self, overrides: Optional[dict[str, Any]] = None) -> dict[str, Any]:
        """
        Merge configuration with 3-tier precedence.

        Priority order:
        1. Per-call overrides (highest priority)
        2. engine.yaml overrides
        3. Global defaults (lowest priority)
        """
        merged = _deep_merge(asdict(self.defaults), self.load_file_config())
        return _deep_merge(merged, overrides or {})

    def load(self, overrides: Optional[dict[str, Any]] = None) -> DefaultConfig:
        """Merge all tiers and return the typed configuration."""
        return config_from_dict(self.merge_config(overrides))


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Recursively overlay override onto a copy of base."""
    result = dict(base)
    for key, value in override.items():
        if isinstance(result.get(key), dict) and isinstance(value, dict):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value
    return result
