"""
Utility functions module.

Time Semantics:
- Every instant the engine records comes from a SessionClock
- No component reads the system time directly
- All instants are timezone-aware UTC datetimes
- Paused intervals are excluded from elapsed-time calculations by the caller
"""
