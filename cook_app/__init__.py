"""
Cook App - Cook Session Engine

Turns a generated, equipment-aware cook plan into a live session: a
time-driven state machine with timers, pauses and temperature-driven
stage transitions, and records the finished cook as a history entry.
"""

__version__ = "0.1.0"
__author__ = "Cook App Team"
