"""
SQLite progress store.

The whole UserProgress aggregate is persisted as one JSON blob in a small
key/value table, keyed by `kybalion_user_progress`.

Database location: ~/.kybalion/progress.db
"""

from __future__ import annotations

import json
import sqlite3
from pathlib import Path

from loguru import logger
from pydantic import ValidationError

from kybalion_path.content.models import Language

from .models import UserProgress

PROGRESS_KEY = "kybalion_user_progress"


class ProgressStore:
    """
    Best-effort persistence for user progress.

    Reads never fail: a missing or unreadable blob yields default progress.
    Writes never raise: failures are logged and the in-memory value stays
    authoritative for the running session.
    """

    DEFAULT_DB_PATH = Path.home() / ".kybalion" / "progress.db"

    def __init__(self, db_path: Path | None = None):
        """
        Initialize the progress store.

        Args:
            db_path: Custom database path (defaults to ~/.kybalion/progress.db)
        """
        self.db_path = Path(db_path) if db_path else self.DEFAULT_DB_PATH
        self.db_path.parent.mkdir(parents=True, exist_ok=True)

        self._conn: sqlite3.Connection | None = None
        self.available = self._init_schema()

        logger.info(f"ProgressStore initialized at {self.db_path}")

    @property
    def conn(self) -> sqlite3.Connection:
        """Get or create database connection."""
        if self._conn is None:
            self._conn = sqlite3.connect(str(self.db_path))
            self._conn.row_factory = sqlite3.Row
        return self._conn

    def _init_schema(self) -> bool:
        """Create the table. False if the file is not a usable database."""
        try:
            self.conn.execute("""
                CREATE TABLE IF NOT EXISTS kv_store (
                    key TEXT PRIMARY KEY,
                    value TEXT
                )
            """)
            self.conn.commit()
        except sqlite3.Error as e:
            logger.warning(f"Progress database at {self.db_path} is unusable, using defaults: {e}")
            self.close()
            return False
        return True

    def load(self, default_language: Language | str = Language.DE) -> UserProgress:
        """
        Load saved progress.

        Args:
            default_language: Language for a fresh profile

        Returns:
            Saved UserProgress, or defaults if absent or corrupt
        """
        fresh = UserProgress(language=Language(default_language))
        if not self.available:
            return fresh
        try:
            row = self.conn.execute(
                "SELECT value FROM kv_store WHERE key = ?", (PROGRESS_KEY,)
            ).fetchone()
        except sqlite3.Error as e:
            logger.warning(f"Could not read progress, using defaults: {e}")
            return fresh

        if row is None or not row["value"]:
            return fresh

        try:
            return UserProgress.model_validate(json.loads(row["value"]))
        except (json.JSONDecodeError, ValidationError) as e:
            logger.warning(f"Saved progress is corrupt, using defaults: {e}")
            return fresh

    def save(self, progress: UserProgress) -> bool:
        """
        Persist progress.

        Returns:
            True if the write was committed
        """
        blob = progress.model_dump_json(by_alias=True)
        if not self.available:
            logger.error(f"Failed to save progress: {self.db_path} is not a usable database")
            return False
        try:
            self.conn.execute(
                "INSERT OR REPLACE INTO kv_store (key, value) VALUES (?, ?)",
                (PROGRESS_KEY, blob),
            )
            self.conn.commit()
        except (sqlite3.Error, OSError) as e:
            logger.error(f"Failed to save progress: {e}")
            return False
        logger.debug(f"Saved progress ({len(blob)} bytes)")
        return True

    def reset(self) -> bool:
        """
        Delete saved progress.

        An unusable database file is removed so the next run starts fresh.

        Returns:
            True if progress was cleared
        """
        if not self.available:
            try:
                self.db_path.unlink(missing_ok=True)
            except OSError as e:
                logger.error(f"Could not remove {self.db_path}: {e}")
                return False
            self.available = self._init_schema()
            logger.info("Removed unusable progress database")
            return self.available

        self.conn.execute("DELETE FROM kv_store WHERE key = ?", (PROGRESS_KEY,))
        self.conn.commit()
        logger.info("Progress reset")
        return True

    def close(self) -> None:
        """Close database connection."""
        if self._conn:
            self._conn.close()
            self._conn = None
