"""File host data type definitions."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import List, Optional

from filehost.validators import extract_extension


@dataclass(frozen=True)
class FileRecord:
    """
    Catalog entry for one stored copy of a file.

    `owner` is the hashed identity whose storage directory holds the bytes.
    """
    public_id: str
    private_id: str
    name: str
    size: int
    saved_at: datetime
    expires_at: datetime
    owner: str
    email: str = ""

    @property
    def extension(self) -> str:
        return extract_extension(self.name)


@dataclass
class ClientRecord:
    """
    Per-identity ledger of owned files, usage, expiry and rate-limit state.
    """
    identity: str
    files: List[str]
    files_count: int
    used_bytes: int
    created_at: datetime
    expires_at: datetime
    call_count: int
    last_call_at: datetime


@dataclass(frozen=True)
class DirectoryUsage:
    """
    Usage recomputed from a client's storage directory.
    """
    files_count: int
    used_bytes: int
    file_ids: List[str] = field(default_factory=list)


@dataclass(frozen=True)
class FileIdentifiers:
    """
    Public and private identifiers as persisted (hashed form).
    """
    public_id: str
    private_id: str


class ScanResult(Enum):
    """Ternary scanner verdict."""
    CLEAN = "clean"
    INFECTED = "infected"
    ERROR = "error"


@dataclass(frozen=True)
class UploadRequest:
    """
    One inbound upload as seen by the file service.
    """
    filename: Optional[str]
    content_type: Optional[str]
    data: bytes
    email: str = ""
