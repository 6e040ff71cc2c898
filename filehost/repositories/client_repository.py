"""Client record repository for database operations."""

import json
import sqlite3
from datetime import datetime
from typing import List, Optional

from common.logging_config import get_logger, short_identity
from filehost.database import Database, row_to_dict
from filehost.types import ClientRecord
from filehost.utils import parse_timestamp

logger = get_logger(__name__)

_COLUMNS = "identity, files, files_count, used_bytes, created_at, expires_at, call_count, last_call_at"


def _row_to_record(row: Optional[sqlite3.Row]) -> Optional[ClientRecord]:
    data = row_to_dict(row)
    if data is None:
        return None

    return ClientRecord(
        identity=data["identity"],
        files=json.loads(data["files"]),
        files_count=data["files_count"],
        used_bytes=data["used_bytes"],
        created_at=parse_timestamp(data["created_at"]),
        expires_at=parse_timestamp(data["expires_at"]),
        call_count=data["call_count"],
        last_call_at=parse_timestamp(data["last_call_at"]),
    )


class ClientRepository:
    def __init__(self, database: Database):
        self.database = database

    def exists(self, identity: str) -> bool:
        with self.database.connection() as conn:
            cursor = conn.cursor()
            cursor.execute("SELECT 1 FROM clients WHERE identity = ?", (identity,))
            return cursor.fetchone() is not None

    def get(self, identity: str) -> Optional[ClientRecord]:
        logger.debug(f"Fetching client record [identity={short_identity(identity)}]")
        with self.database.connection() as conn:
            cursor = conn.cursor()
            cursor.execute(f"SELECT {_COLUMNS} FROM clients WHERE identity = ?", (identity,))
            return _row_to_record(cursor.fetchone())

    def create(self, record: ClientRecord) -> ClientRecord:
        with self.database.connection() as conn:
            cursor = conn.cursor()
            try:
                cursor.execute(
                    f"""
                    INSERT INTO clients ({_COLUMNS})
                    VALUES (?, ?, ?, ?, ?, ?, ?, ?)
                    """,
                    (record.identity, json.dumps(record.files), record.files_count,
                     record.used_bytes, record.created_at.isoformat(),
                     record.expires_at.isoformat(), record.call_count,
                     record.last_call_at.isoformat())
                )
                conn.commit()
                logger.info(f"Client record created [identity={short_identity(record.identity)}]")
            except Exception as e:
                logger.error(f"Failed to create client record [identity={short_identity(record.identity)}]: {e}", exc_info=True)
                raise

        return record

    def update_usage(
        self,
        identity: str,
        files: List[str],
        files_count: int,
        used_bytes: int,
        expires_at: datetime,
    ) -> None:
        with self.database.connection() as conn:
            cursor = conn.cursor()
            try:
                cursor.execute(
                    """
                    UPDATE clients
                    SET files = ?, files_count = ?, used_bytes = ?, expires_at = ?
                    WHERE identity = ?
                    """,
                    (json.dumps(files), files_count, used_bytes, expires_at.isoformat(), identity)
                )
                if cursor.rowcount == 0:
                    raise LookupError(f"client record {short_identity(identity)} was not updated")
                conn.commit()
                logger.info(
                    f"Client usage updated [identity={short_identity(identity)}] "
                    f"files={files_count} used_bytes={used_bytes}"
                )
            except Exception as e:
                logger.error(f"Failed to update client usage [identity={short_identity(identity)}]: {e}", exc_info=True)
                raise

    def reset_call_window(self, identity: str, started_at: datetime) -> None:
        with self.database.connection() as conn:
            cursor = conn.cursor()
            try:
                cursor.execute(
                    "UPDATE clients SET call_count = 0, last_call_at = ? WHERE identity = ?",
                    (started_at.isoformat(), identity)
                )
                conn.commit()
            except Exception as e:
                logger.error(f"Failed to reset rate limit [identity={short_identity(identity)}]: {e}", exc_info=True)
                raise

    def increment_call_count(self, identity: str, limit: int, called_at: datetime) -> bool:
        """
        Count one call in a single conditional UPDATE.

        Returns:
            False when the client has no record or already reached the limit
        """
        with self.database.connection() as conn:
            cursor = conn.cursor()
            try:
                cursor.execute(
                    """
                    UPDATE clients
                    SET call_count = call_count + 1, last_call_at = ?
                    WHERE identity = ? AND call_count < ?
                    """,
                    (called_at.isoformat(), identity, limit)
                )
                conn.commit()
            except Exception as e:
                logger.error(f"Failed to count call [identity={short_identity(identity)}]: {e}", exc_info=True)
                raise

            return cursor.rowcount > 0

    def delete_by_identity(self, identity: str) -> bool:
        with self.database.connection() as conn:
            cursor = conn.cursor()
            try:
                cursor.execute("DELETE FROM clients WHERE identity = ?", (identity,))
                conn.commit()
            except Exception as e:
                logger.error(f"Failed to delete client record [identity={short_identity(identity)}]: {e}", exc_info=True)
                raise

            deleted = cursor.rowcount > 0
            if deleted:
                logger.info(f"Client record deleted [identity={short_identity(identity)}]")
            return deleted
