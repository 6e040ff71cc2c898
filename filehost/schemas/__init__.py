"""Pydantic schemas for API requests and responses."""

from filehost.schemas.clients import ClientResponse
from filehost.schemas.common import ErrorResponse, MessageResponse
from filehost.schemas.files import FileInfoResponse, FileRecordResponse, UploadFileResponse

__all__ = [
    "ClientResponse",
    "ErrorResponse",
    "FileInfoResponse",
    "FileRecordResponse",
    "MessageResponse",
    "UploadFileResponse",
]
