"""File service: upload, download, info and delete orchestration."""

import sqlite3
from datetime import datetime, timedelta
from pathlib import Path
from typing import Callable, Optional, Tuple

from common.constants import RECORD_TTL_SECONDS
from common.logging_config import get_logger, short_identity
from filehost.config import ENCRYPTION_KEY, EXCLUSION_KEY
from filehost.exceptions import (
    NOT_ALLOWED_MESSAGE,
    CorruptionError,
    DuplicateFileError,
    FileNotFoundError,
    InfectedFileError,
    InvalidInputError,
    OrphanFileError,
    ScanUnavailableError,
    StorageError,
)
from filehost.hashing import derive_identifiers
from filehost.repositories.file_repository import FileRepository
from filehost.scanner import Scanner
from filehost.services.quota_service import QuotaLedger
from filehost.services.rate_limiter import RateLimiter
from filehost.storage import FileStore
from filehost.types import FileRecord, ScanResult, UploadRequest
from filehost.utils import utc_now
from filehost.validators import extract_extension, is_allowed_content_type, is_valid_email

logger = get_logger(__name__)


class FileService:
    def __init__(
        self,
        file_repo: FileRepository,
        store: FileStore,
        scanner: Scanner,
        ledger: QuotaLedger,
        rate_limiter: RateLimiter,
        encryption_key: Optional[str] = None,
        exclusion_key: Optional[str] = None,
        clock: Callable[[], datetime] = utc_now,
    ):
        self.file_repo = file_repo
        self.store = store
        self.scanner = scanner
        self.ledger = ledger
        self.rate_limiter = rate_limiter
        self.encryption_key = ENCRYPTION_KEY if encryption_key is None else encryption_key
        self.exclusion_key = EXCLUSION_KEY if exclusion_key is None else exclusion_key
        if not self.encryption_key or not self.exclusion_key:
            raise ValueError("DROP_ENCRYPTION_KEY and DROP_EXCLUSION_KEY must both be set")
        self.clock = clock

    def upload(self, identity: str, request: UploadRequest) -> FileRecord:
        """
        Store an upload for a client.

        The steps run in a fixed order and every rejection is raised
        immediately: type, host capacity, rate limit, scan, client quota,
        email, dedup. Metadata is written before bytes, and the client's
        ledger entry is refreshed last. Nothing already committed is rolled
        back when a later step fails.

        Args:
            identity: Hashed client identity
            request: Filename, declared content type, content and optional email

        Returns:
            The new FileRecord, including the private identifier

        Raises:
            InvalidInputError: Missing file, disallowed type, bad extension or email
            HostStorageFullError: Host-wide storage at or over its cap
            RateLimitedError: Too many calls in the current window
            InfectedFileError: Scanner matched a signature
            ScanUnavailableError: Scanner failed or timed out
            QuotaExceededError: Upload would exceed the client's cap
            DuplicateFileError: Identical content and name already stored by this client
        """
        if not request.filename or not request.data:
            raise InvalidInputError("Error receiving file.")

        if not is_allowed_content_type(request.content_type or ""):
            logger.info(
                f"Rejected content type {request.content_type!r} "
                f"[identity={short_identity(identity)}]"
            )
            raise InvalidInputError(NOT_ALLOWED_MESSAGE)

        extension = extract_extension(request.filename)
        if not extension:
            raise InvalidInputError("The file name must have an extension.")

        self.ledger.check_host_capacity()

        client_record = self.rate_limiter.check(identity)

        size = len(request.data)
        staged_path = self.store.stage(request.data)
        try:
            self._scan(staged_path, identity)

            self.ledger.check_client_quota(client_record, size)

            if request.email and not is_valid_email(request.email):
                raise InvalidInputError(NOT_ALLOWED_MESSAGE)

            identifiers = derive_identifiers(
                request.data, request.filename, self.encryption_key, self.exclusion_key
            )
            path = self.store.file_path(identity, identifiers.public_id, extension)

            if self.store.exists(path):
                existing = self.file_repo.find_by_public_id(identifiers.public_id, owner=identity)
                if existing is None:
                    logger.error(
                        f"Stored bytes without catalog entry [public_id={identifiers.public_id[:12]}] "
                        f"[identity={short_identity(identity)}]"
                    )
                    raise OrphanFileError(
                        f"Error retrieving file from ID {identifiers.public_id}: no catalog entry"
                    )
                logger.info(f"Dedup hit [public_id={identifiers.public_id[:12]}]")
                raise DuplicateFileError("The file already exists.", existing)

            saved_at = self.clock()
            record = FileRecord(
                public_id=identifiers.public_id,
                private_id=identifiers.private_id,
                name=request.filename,
                size=size,
                saved_at=saved_at,
                expires_at=saved_at + timedelta(seconds=RECORD_TTL_SECONDS),
                owner=identity,
                email=request.email or "",
            )
            try:
                self.file_repo.insert(record)
            except sqlite3.IntegrityError as e:
                logger.error(
                    f"Catalog entry exists but bytes are missing [public_id={record.public_id[:12]}]"
                )
                raise CorruptionError("The file metadata exists but its content is missing.") from e

            try:
                self.store.copy_without_metadata(staged_path, path)
            except StorageError:
                logger.error(
                    f"Corruption candidate: metadata saved without bytes "
                    f"[public_id={record.public_id[:12]}]"
                )
                raise
        finally:
            self.store.discard(staged_path)

        try:
            self.ledger.upsert(identity)
        except Exception as e:
            logger.error(
                f"Corruption candidate: file stored but ledger refresh failed "
                f"[identity={short_identity(identity)}]: {e}"
            )
            raise

        logger.info(
            f"File saved [public_id={record.public_id[:12]}] size={size} "
            f"[identity={short_identity(identity)}]"
        )
        return record

    def _scan(self, staged_path: Path, identity: str) -> None:
        result = self.scanner.scan(staged_path)
        if result is ScanResult.INFECTED:
            logger.warning(f"Infected upload rejected [identity={short_identity(identity)}]")
            raise InfectedFileError("The file is infected and was not stored.")
        if result is not ScanResult.CLEAN:
            raise ScanUnavailableError("The file could not be scanned. Please try again later.")

    def download(self, identity: str, public_id: str) -> Tuple[FileRecord, Path]:
        """
        Resolve a public identifier to the caller's stored copy.

        Returns:
            (record, path) of the bytes to stream back

        Raises:
            FileNotFoundError: Unknown identifier, or no copy under the caller's directory
            CorruptionError: Catalog and disk disagree for the caller's copy
        """
        if not public_id:
            raise InvalidInputError("A file identifier is required.")

        record = self.file_repo.find_by_public_id(public_id, owner=identity)
        if record is not None:
            path = self.store.file_path(identity, record.public_id, record.extension)
            if not self.store.exists(path):
                logger.error(
                    f"Catalog entry without bytes [public_id={public_id[:12]}] "
                    f"[identity={short_identity(identity)}]"
                )
                raise CorruptionError("The file metadata exists but its content is missing.")
            return record, path

        any_record = self.file_repo.find_by_public_id(public_id)
        if any_record is None:
            raise FileNotFoundError("File not found.")

        path = self.store.file_path(identity, public_id, any_record.extension)
        if self.store.exists(path):
            logger.error(
                f"Bytes without catalog entry [public_id={public_id[:12]}] "
                f"[identity={short_identity(identity)}]"
            )
            raise OrphanFileError(f"Error retrieving file from ID {public_id}: no catalog entry")

        raise FileNotFoundError("File not found.")

    def file_info(self, identity: str, private_id: str) -> FileRecord:
        if not private_id:
            raise InvalidInputError("A file identifier is required.")

        record = self.file_repo.find_by_private_id(private_id, owner=identity)
        if record is None:
            record = self.file_repo.find_by_private_id(private_id)
        if record is None:
            raise FileNotFoundError("File not found.")
        return record

    def delete(self, identity: str, private_id: str) -> FileRecord:
        """
        Delete the caller's copy of a file by its private identifier.

        Only the copy under the caller's own directory can be deleted.
        The catalog entry goes first, then the bytes, then the ledger is
        refreshed.

        Raises:
            InvalidInputError: Missing identifier
            FileNotFoundError: No such file for this caller
            CorruptionError: Catalog entry removed but bytes could not be
        """
        if not private_id:
            raise InvalidInputError("A file identifier is required.")

        record = self.remove_file(identity, private_id)
        self.ledger.upsert(identity)
        logger.info(f"File deleted [public_id={record.public_id[:12]}] [identity={short_identity(identity)}]")
        return record

    def remove_file(self, identity: str, private_id: str, missing_ok: bool = False) -> FileRecord:
        """
        Remove one catalog entry and its bytes without touching the ledger.

        Args:
            identity: Hashed client identity owning the copy
            private_id: Private identifier of the file
            missing_ok: Tolerate bytes that are already gone

        Returns:
            The removed FileRecord
        """
        record = self.file_repo.delete_by_private_id(private_id, owner=identity)
        if record is None:
            raise FileNotFoundError("File not found.")

        path = self.store.file_path(identity, record.public_id, record.extension)
        if missing_ok and not self.store.exists(path):
            return record

        try:
            self.store.remove(path)
        except StorageError as e:
            logger.error(
                f"Corruption candidate: catalog entry removed but bytes remain or are missing "
                f"[public_id={record.public_id[:12]}] [identity={short_identity(identity)}]"
            )
            raise CorruptionError("Error deleting file from system.") from e

        return record
