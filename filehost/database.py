"""Database schema and connection management for SQLite."""

import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Generator, Optional

from common.logging_config import get_logger
from filehost.config import DATABASE_PATH, DB_TIMEOUT_SECONDS

logger = get_logger(__name__)


class Database:
    """
    Owns the database location and hands out short-lived connections.

    One instance is built at process start and shared by the repositories.
    """

    def __init__(self, path: Optional[str] = None, timeout: float = DB_TIMEOUT_SECONDS):
        self.path = path or DATABASE_PATH
        self.timeout = timeout

    @contextmanager
    def connection(self) -> Generator[sqlite3.Connection, None, None]:
        """
        Context manager for database connections.
        """
        conn = sqlite3.connect(self.path, timeout=self.timeout)
        conn.row_factory = sqlite3.Row
        try:
            yield conn
        finally:
            conn.close()

    def init_schema(self) -> None:
        """
        Create tables and indexes if they don't exist.
        """
        db_path = Path(self.path)
        db_path.parent.mkdir(parents=True, exist_ok=True)

        with self.connection() as conn:
            cursor = conn.cursor()

            cursor.execute("""
                CREATE TABLE IF NOT EXISTS files (
                    public_id TEXT NOT NULL,
                    private_id TEXT NOT NULL,
                    owner TEXT NOT NULL,
                    name TEXT NOT NULL,
                    size INTEGER NOT NULL,
                    saved_at TEXT NOT NULL,
                    expires_at TEXT NOT NULL,
                    email TEXT NOT NULL DEFAULT '',
                    PRIMARY KEY(public_id, owner),
                    UNIQUE(private_id, owner)
                )
            """)

            cursor.execute("""
                CREATE TABLE IF NOT EXISTS clients (
                    identity TEXT PRIMARY KEY,
                    files TEXT NOT NULL,
                    files_count INTEGER NOT NULL,
                    used_bytes INTEGER NOT NULL,
                    created_at TEXT NOT NULL,
                    expires_at TEXT NOT NULL,
                    call_count INTEGER NOT NULL,
                    last_call_at TEXT NOT NULL
                )
            """)

            cursor.execute("""
                CREATE INDEX IF NOT EXISTS idx_files_private_id ON files(private_id)
            """)

            cursor.execute("""
                CREATE INDEX IF NOT EXISTS idx_files_owner ON files(owner)
            """)

            conn.commit()

        logger.info(f"Database schema ready at {self.path}")

    def ping(self) -> bool:
        """
        Check that the database answers a trivial query.
        """
        try:
            with self.connection() as conn:
                conn.execute("SELECT 1").fetchone()
        except sqlite3.Error as e:
            logger.error(f"Database ping failed: {e}")
            return False
        return True


def row_to_dict(row: Optional[sqlite3.Row]) -> Optional[dict]:
    """
    Convert a sqlite3.Row into a plain dict.
    """
    if row is None:
        return None
    return {key: row[key] for key in row.keys()}
