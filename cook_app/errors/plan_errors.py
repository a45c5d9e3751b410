"""
Plan error classifications for cook plan loading.

A plan that fails validation can never back a session, so these errors are
fatal to session creation and surface to the user as "could not start this
plan".
"""

from typing import Any, Dict, Optional


class PlanError(Exception):
    """Base class for problems with a cook plan."""

    def __init__(self, message: str, context: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.context = context or {}
        self.recoverable = False


class InvalidPlanError(PlanError):
    """Malformed, inconsistent or cyclic plan."""

    def __init__(self, message: str, reason: str = "shape",
                 stage_key: Optional[str] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.reason = reason
        self.stage_key = stage_key
