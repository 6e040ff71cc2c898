"""Custom exception classes for the file host."""

from typing import Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from filehost.types import FileRecord


NOT_ALLOWED_MESSAGE = (
    "The uploaded file is not allowed. You can try compressing it in "
    ".rar, .zip, or .tar format, for example."
)


class DropException(Exception):
    """
    Base exception class for all file host errors.

    Every subclass carries a stable machine code and the HTTP status the
    boundary layer answers with.
    """
    code = "INTERNAL_ERROR"
    status_code = 500


class InvalidInputError(DropException):
    """
    Raised for client-fault input: disallowed type, malformed email, missing identifier.
    """
    code = "INVALID_INPUT"
    status_code = 400


class QuotaExceededError(DropException):
    """
    Raised when an upload would exceed the client's storage cap.
    """
    code = "QUOTA_EXCEEDED"
    status_code = 413

    def __init__(self, message: str, remaining_bytes: Optional[int] = None):
        super().__init__(message)
        self.remaining_bytes = remaining_bytes


class HostStorageFullError(QuotaExceededError):
    """
    Raised when host-wide storage is at or over its cap.
    """
    code = "HOST_STORAGE_FULL"
    status_code = 507


class RateLimitedError(DropException):
    """
    Raised when a client made too many calls in the current window.
    """
    code = "RATE_LIMITED"
    status_code = 429


class InfectedFileError(DropException):
    """
    Raised when the scanner classifies an upload as infected.
    """
    code = "INFECTED"
    status_code = 400


class ScanUnavailableError(DropException):
    """
    Raised when the scanner fails or times out. Uploads are never stored in that case.
    """
    code = "SCAN_UNAVAILABLE"
    status_code = 503


class FileNotFoundError(DropException):
    """
    Raised when a requested file does not exist.
    """
    code = "FILE_NOT_FOUND"
    status_code = 404


class ClientNotFoundError(DropException):
    """
    Raised when no client record exists for the requesting identity.
    """
    code = "CLIENT_NOT_FOUND"
    status_code = 404


class DuplicateFileError(DropException):
    """
    Raised on a dedup hit; carries the record already stored for the content.
    """
    code = "CONFLICT"
    status_code = 409

    def __init__(self, message: str, record: "FileRecord"):
        super().__init__(message)
        self.record = record


class CorruptionError(DropException):
    """
    Raised when the catalog and the bytes on disk disagree about a file.
    """
    code = "CORRUPTION"
    status_code = 500


class OrphanFileError(CorruptionError):
    """
    Raised when a stored file has no matching catalog entry.
    """
    pass


class DirectoryUnreadableError(CorruptionError):
    """
    Raised when a client's storage directory cannot be listed.
    """
    pass


class StorageError(DropException):
    """
    Raised when a filesystem operation on stored bytes fails.
    """
    code = "STORAGE_ERROR"
    status_code = 500
