"""File metadata catalog backed by SQLite."""

import sqlite3
from typing import List, Optional

from common.logging_config import get_logger, short_identity
from filehost.database import Database, row_to_dict
from filehost.types import FileRecord
from filehost.utils import parse_timestamp

logger = get_logger(__name__)

_COLUMNS = "public_id, private_id, owner, name, size, saved_at, expires_at, email"


def _row_to_record(row: Optional[sqlite3.Row]) -> Optional[FileRecord]:
    data = row_to_dict(row)
    if data is None:
        return None

    return FileRecord(
        public_id=data["public_id"],
        private_id=data["private_id"],
        name=data["name"],
        size=data["size"],
        saved_at=parse_timestamp(data["saved_at"]),
        expires_at=parse_timestamp(data["expires_at"]),
        owner=data["owner"],
        email=data["email"] or "",
    )


class FileRepository:
    def __init__(self, database: Database):
        self.database = database

    def insert(self, record: FileRecord) -> FileRecord:
        logger.debug(f"Inserting file record [public_id={record.public_id[:12]}] [owner={short_identity(record.owner)}]")

        with self.database.connection() as conn:
            cursor = conn.cursor()
            try:
                cursor.execute(
                    f"""
                    INSERT INTO files ({_COLUMNS})
                    VALUES (?, ?, ?, ?, ?, ?, ?, ?)
                    """,
                    (record.public_id, record.private_id, record.owner, record.name,
                     record.size, record.saved_at.isoformat(), record.expires_at.isoformat(),
                     record.email)
                )
                conn.commit()
                logger.info(f"File record saved [public_id={record.public_id[:12]}] size={record.size}")
            except Exception as e:
                logger.error(f"Failed to save file record [public_id={record.public_id[:12]}]: {e}", exc_info=True)
                raise

        return record

    def find_by_public_id(self, public_id: str, owner: Optional[str] = None) -> Optional[FileRecord]:
        """
        Resolve a public identifier; restricted to one owner's copy when given.
        """
        with self.database.connection() as conn:
            cursor = conn.cursor()
            if owner is None:
                cursor.execute(
                    f"SELECT {_COLUMNS} FROM files WHERE public_id = ? ORDER BY saved_at LIMIT 1",
                    (public_id,)
                )
            else:
                cursor.execute(
                    f"SELECT {_COLUMNS} FROM files WHERE public_id = ? AND owner = ?",
                    (public_id, owner)
                )
            return _row_to_record(cursor.fetchone())

    def find_by_private_id(self, private_id: str, owner: Optional[str] = None) -> Optional[FileRecord]:
        with self.database.connection() as conn:
            cursor = conn.cursor()
            if owner is None:
                cursor.execute(
                    f"SELECT {_COLUMNS} FROM files WHERE private_id = ? ORDER BY saved_at LIMIT 1",
                    (private_id,)
                )
            else:
                cursor.execute(
                    f"SELECT {_COLUMNS} FROM files WHERE private_id = ? AND owner = ?",
                    (private_id, owner)
                )
            return _row_to_record(cursor.fetchone())

    def delete_by_private_id(self, private_id: str, owner: str) -> Optional[FileRecord]:
        """
        Delete one owner's catalog entry and return what was removed.

        Returns None when there was nothing to delete.
        """
        logger.debug(f"Deleting file record [owner={short_identity(owner)}]")

        with self.database.connection() as conn:
            cursor = conn.cursor()
            try:
                cursor.execute(
                    f"SELECT {_COLUMNS} FROM files WHERE private_id = ? AND owner = ?",
                    (private_id, owner)
                )
                record = _row_to_record(cursor.fetchone())
                if record is None:
                    return None

                cursor.execute(
                    "DELETE FROM files WHERE private_id = ? AND owner = ?",
                    (private_id, owner)
                )
                conn.commit()
                logger.info(f"File record deleted [public_id={record.public_id[:12]}]")
                return record
            except Exception as e:
                conn.rollback()
                logger.error(f"Failed to delete file record [owner={short_identity(owner)}]: {e}", exc_info=True)
                raise

    def list_by_owner(self, owner: str) -> List[FileRecord]:
        with self.database.connection() as conn:
            cursor = conn.cursor()
            cursor.execute(
                f"SELECT {_COLUMNS} FROM files WHERE owner = ? ORDER BY saved_at",
                (owner,)
            )
            return [_row_to_record(row) for row in cursor.fetchall()]
