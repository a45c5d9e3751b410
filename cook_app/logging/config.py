"""
Centralized logging configuration for the cook session engine.

Every component logs through structlog. Loggers are created lazily with
get_logger and bound to a subsystem, so a single configure call (usually
driven by the `logging` section of engine.yaml) controls the whole engine.
"""
import logging
import sys
from typing import TYPE_CHECKING, Any, Optional

import structlog
from structlog.types import FilteringBoundLogger

if TYPE_CHECKING:
    from ..config.defaults import LoggingParams


def configure_logging(
    level: str = "INFO",
    format_json: bool = False,
    include_timestamp: bool = True,
    include_caller: bool = False,
    extra_processors: Optional[list] = None
) -> None:
    """
    Configure structlog for the entire application.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        format_json: If True, output JSON lines; otherwise console output
        include_timestamp: Include an ISO timestamp in each event
        include_caller: Include filename and line number
        extra_processors: Additional structlog processors, run before rendering
    """
    logging.basicConfig(
        level=getattr(logging, level.upper()),
        stream=sys.stdout,
        format="%(message)s"
    )

    structlog.configure(
        processors=_build_processors(format_json, include_timestamp, include_caller, extra_processors),
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def configure_from_params(params: "LoggingParams") -> None:
    """Apply the `logging` section of the engine configuration."""
    configure_logging(level=params.level, format_json=params.format_json)


def _build_processors(
    format_json: bool,
    include_timestamp: bool,
    include_caller: bool,
    extra_processors: Optional[list]
) -> list:
    processors: list = [
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
    ]

    if include_timestamp:
        processors.append(structlog.processors.TimeStamper(fmt="iso", utc=True))

    if include_caller:
        processors.append(structlog.processors.CallsiteParameterAdder(
            parameters=[structlog.processors.CallsiteParameter.FILENAME,
                        structlog.processors.CallsiteParameter.LINENO]
        ))

    processors.extend(extra_processors or [])

    if format_json:
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=sys.stdout.isatty()))
    return processors


def get_logger(name: str) -> FilteringBoundLogger:
    """
    Get a configured structlog logger instance.

    Args:
        name: Logger name (typically __name__)
    """
    return structlog.get_logger(name)


def get_state_logger(name: str) -> FilteringBoundLogger:
    """
    Get a logger bound for session state machine events.

    Transition and stage activation events carry audit_trail=True so they
    can be filtered out of the stream and replayed as a cook timeline.
    """
    return get_logger(name).bind(
        subsystem="session_machine",
        audit_trail=True
    )


def get_store_logger(name: str) -> FilteringBoundLogger:
    """Get a logger bound for the SQLite persistence layer."""
    return get_logger(name).bind(subsystem="persistence")


def log_state_transition(
    logger: FilteringBoundLogger,
    session_id: str,
    from_state: str,
    to_state: str,
    trigger: str,
    context: Optional[dict[str, Any]] = None
) -> None:
    """
    Log a session lifecycle transition with standardized format.

    Args:
        logger: Structlog logger instance
        session_id: ID of the session transitioning
        from_state: Current status
        to_state: Target status
        trigger: Operation that caused the transition
        context: Additional context data
    """
    bound_logger = logger.bind(
        session_id=session_id,
        from_state=from_state,
        to_state=to_state,
        trigger=trigger
    )

    if context:
        bound_logger = bound_logger.bind(context=context)

    bound_logger.info("State transition")


def log_rejected_operation(
    logger: FilteringBoundLogger,
    session_id: str,
    operation: str,
    status: str,
    error: Exception
) -> None:
    """
    Log an intent the state machine refused.

    Rejections leave the snapshot untouched, so they are warnings rather
    than errors.
    """
    bound_logger = logger.bind(
        session_id=session_id,
        operation=operation,
        status=status,
        error_type=type(error).__name__,
        error=str(error)
    )

    context = getattr(error, "context", None)
    if context:
        bound_logger = bound_logger.bind(context=context)

    bound_logger.warning("Rejected session operation")
