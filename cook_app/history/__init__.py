"""
Cook history module.

Closes terminal sessions into immutable, append-only log entries.
"""
