"""
Cook session state machine and runtime module.

Manages the live session lifecycle NotStarted → Running ⇄ Paused → Completed
(with Abandoned as a side terminal), per-stage runtime records and the
single-writer runtime that commits each transition as a new snapshot.
"""
