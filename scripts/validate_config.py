#!/usr/bin/env python3
"""Configuration validation script."""

import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

# Add the project root to the Python path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from cook_app.config.loader import ConfigLoader
from cook_app.config.validation import ConfigIssue, ConfigValidator


def validate_engine_config(overrides: Optional[Dict[str, Any]] = None,
                           config_dir: Optional[Path] = None) -> List[ConfigIssue]:
    """Validate the merged engine configuration."""
    loader = ConfigLoader.create(config_dir)
    config = loader.merge_config(overrides)
    return ConfigValidator.validate_config(config)


def main():
    """Main validation function."""
    config_dir = Path(sys.argv[1]) if len(sys.argv) > 1 else None
    loader = ConfigLoader.create(config_dir)
    print(f"🔍 Validating cook session engine configuration in {loader.config_dir}...")

    all_valid = True

    try:
        errors = validate_engine_config(config_dir=config_dir)

        if errors:
            print(f"❌ Found {len(errors)} validation errors:")
            for error in errors:
                print(f"  • {error.field}: {error.message} (value: {error.value})")
            all_valid = False
        else:
            config = loader.load()
            print("✅ engine.yaml configuration is valid")
            print(f"  • rating range: {config.session.rating_min}-{config.session.rating_max}")
            print(f"  • tick interval: {config.session.tick_interval_seconds}s")
            print(f"  • persistence: {'on' if config.persistence.enabled else 'off'} "
                  f"({config.persistence.db_path})")
            print(f"  • logging: {config.logging.level}")

    except Exception as e:
        print(f"❌ Error loading configuration: {e}")
        all_valid = False

    # Per-call overrides must also validate on top of the file
    print("\n📋 Testing per-call overrides...")
    test_overrides = {
        "session": {"rating_max": 10},
        "logging": {"level": "DEBUG", "format_json": True},
    }

    try:
        errors = validate_engine_config(test_overrides, config_dir)

        if errors:
            print("❌ Override validation failed:")
            for error in errors:
                print(f"  • {error.field}: {error.message}")
            all_valid = False
        else:
            print("✅ Override validation passed")

    except Exception as e:
        print(f"❌ Error testing overrides: {e}")
        all_valid = False

    if all_valid:
        print("\n🎉 All configuration validation passed!")
        sys.exit(0)
    else:
        print("\n❌ Configuration validation failed!")
        sys.exit(1)


if __name__ == "__main__":
    main()
