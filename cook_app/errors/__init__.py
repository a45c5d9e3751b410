"""
Error classification for the cook session engine.

This module provides the structured exception hierarchy used when loading
plans, driving a live session, validating cook feedback and persisting
history records.
"""

from .plan_errors import (
    PlanError,
    InvalidPlanError,
)
from .session_errors import (
    SessionError,
    AlreadyStartedError,
    InvalidTransitionError,
    SessionNotTerminalError,
    ValidationError,
)
from .system_failures import (
    SystemFailureError,
    PersistenceError,
)

__all__ = [
    # Plan Errors
    "PlanError",
    "InvalidPlanError",
    # Session Errors
    "SessionError",
    "AlreadyStartedError",
    "InvalidTransitionError",
    "SessionNotTerminalError",
    "ValidationError",
    # System Failures
    "SystemFailureError",
    "PersistenceError",
]
