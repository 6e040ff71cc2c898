"""Pydantic schemas for file operation endpoints."""

from datetime import datetime

from pydantic import BaseModel

from filehost.types import FileRecord


class FileRecordResponse(BaseModel):
    """Stored file as returned to the client that owns it."""
    public_id: str
    private_id: str
    name: str
    size: int
    email: str = ""
    saved_at: datetime
    expires_at: datetime

    @classmethod
    def from_record(cls, record: FileRecord) -> "FileRecordResponse":
        return cls(
            public_id=record.public_id,
            private_id=record.private_id,
            name=record.name,
            size=record.size,
            email=record.email,
            saved_at=record.saved_at,
            expires_at=record.expires_at,
        )


class UploadFileResponse(BaseModel):
    """Response model for file upload."""
    message: str
    data: FileRecordResponse


class FileInfoResponse(BaseModel):
    """Response model for file info lookups by private id."""
    data: FileRecordResponse
