"""
Session error classifications for the live cook state machine.

Misuse errors (already started, undefined transition) are raised by the pure
state machine and downgraded by the session runtime to a logged no-op. The
remaining errors are surfaced to the caller so the UI can react.
"""

from typing import Any, Dict, Optional


class SessionError(Exception):
    """Base class for rejected session operations."""

    def __init__(self, message: str, context: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.context = context or {}
        self.recoverable = True


class AlreadyStartedError(SessionError):
    """start() called on a session that is no longer NotStarted."""

    def __init__(self, message: str, current_status: Optional[str] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.current_status = current_status


class InvalidTransitionError(SessionError):
    """Operation is not defined for the session's current state."""

    def __init__(self, message: str, current_status: Optional[str] = None,
                 attempted: Optional[str] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.current_status = current_status
        self.attempted = attempted


class SessionNotTerminalError(SessionError):
    """Finalize attempted before the session completed or was abandoned."""

    def __init__(self, message: str, current_status: Optional[str] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.current_status = current_status


class ValidationError(SessionError):
    """Out-of-range or malformed cook feedback."""

    def __init__(self, message: str, field: Optional[str] = None,
                 value: Any = None, **kwargs):
        super().__init__(message, **kwargs)
        self.field = field
        self.value = value
