"""
SQLite persistence collaborators for cook history and session snapshots.
"""
