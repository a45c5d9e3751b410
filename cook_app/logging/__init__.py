"""
Logging configuration and utilities for the cook session engine.
"""
from .config import (
    configure_from_params,
    configure_logging,
    get_logger,
    get_state_logger,
    get_store_logger,
    log_rejected_operation,
    log_state_transition,
)

__all__ = [
    "configure_from_params",
    "configure_logging",
    "get_logger",
    "get_state_logger",
    "get_store_logger",
    "log_rejected_operation",
    "log_state_transition",
]
