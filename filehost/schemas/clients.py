"""Pydantic schemas for client ledger endpoints."""

from datetime import datetime
from typing import List

from pydantic import BaseModel

from common.constants import CLIENT_MAX_BYTES
from filehost.types import ClientRecord


class ClientResponse(BaseModel):
    """Response model for the caller's own ledger entry."""
    files: List[str]
    files_count: int
    used_bytes: int
    remaining_bytes: int
    created_at: datetime
    expires_at: datetime

    @classmethod
    def from_record(cls, record: ClientRecord) -> "ClientResponse":
        return cls(
            files=record.files,
            files_count=record.files_count,
            used_bytes=record.used_bytes,
            remaining_bytes=max(CLIENT_MAX_BYTES - record.used_bytes, 0),
            created_at=record.created_at,
            expires_at=record.expires_at,
        )
