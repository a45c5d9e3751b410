"""Shared SQLite connection handling for the persistence layer."""

import sqlite3
import threading
from abc import ABC, abstractmethod
from contextlib import contextmanager
from pathlib import Path

from ..errors import PersistenceError
from ..logging.config import get_store_logger


class SqliteStore(ABC):
    """Base class owning a database path, a write lock and connection setup."""

    def __init__(self, db_path: str):
        self.db_path = Path(db_path)
        self.logger = get_store_logger(self.__class__.__module__)
        self._lock = threading.Lock()

        self._init_database()

    @abstractmethod
    def _init_database(self) -> None:
        """Create the store's tables if they do not exist."""
        pass

    @contextmanager
    def _get_connection(self):
        """Get database connection with proper error handling."""
        conn = None
        try:
            conn = sqlite3.connect(self.db_path, timeout=30.0)
            conn.row_factory = sqlite3.Row
            yield conn
        except sqlite3.Error as e:
            if conn:
                conn.rollback()
            self.logger.error("Database error", db_path=str(self.db_path), error=str(e))
            raise PersistenceError(
                f"Database error: {e}",
                operation="sqlite",
                target=str(self.db_path)
            ) from e
        finally:
            if conn:
                conn.close()
