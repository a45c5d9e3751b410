"""Default configuration parameters for the cook session engine."""

from dataclasses import dataclass


@dataclass(frozen=True)
class SessionParams:
    """Live session and feedback parameters."""
    rating_min: int = 1                 # Lowest accepted cook rating
    rating_max: int = 5                 # Highest accepted cook rating
    tick_interval_seconds: int = 5      # Advisory period for the external tick driver


@dataclass(frozen=True)
class PersistenceParams:
    """SQLite persistence parameters."""
    enabled: bool = True
    db_path: str = "cook_sessions.db"


@dataclass(frozen=True)
class LoggingParams:
    """structlog output parameters."""
    level: str = "INFO"
    format_json: bool = False


@dataclass(frozen=True)
class DefaultConfig:
    """Complete default configuration."""
    session: SessionParams
    persistence: PersistenceParams
    logging: LoggingParams


def get_default_config() -> DefaultConfig:
    """Get the default configuration instance."""
    return DefaultConfig(
        session=SessionParams(),
        persistence=PersistenceParams(),
        logging=LoggingParams(),
    )


def config_from_dict(data: dict) -> DefaultConfig:
    """Build a typed configuration from a merged config dictionary."""
    return DefaultConfig(
        session=SessionParams(**data.get("session", {})),
        persistence=PersistenceParams(**data.get("persistence", {})),
        logging=LoggingParams(**data.get("logging", {})),
    )
