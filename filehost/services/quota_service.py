"""Quota ledger: per-client usage records and storage caps."""

from datetime import datetime, timedelta
from typing import Callable, Optional

from common.constants import CLIENT_MAX_BYTES, HOST_MAX_BYTES, RECORD_TTL_SECONDS
from common.logging_config import get_logger, short_identity
from filehost.exceptions import HostStorageFullError, OrphanFileError, QuotaExceededError
from filehost.repositories.client_repository import ClientRepository
from filehost.repositories.file_repository import FileRepository
from filehost.storage import FileStore
from filehost.types import ClientRecord, DirectoryUsage
from filehost.utils import format_megabytes, utc_now

logger = get_logger(__name__)


class DirectoryReconciler:
    """
    Recomputes a client's usage from what is actually on disk.

    Every stored file must resolve in the catalog; sizes come from the
    catalog entry of that copy. Nothing here is cached, so the result
    cannot drift from the directory contents.
    """

    def __init__(self, file_repo: FileRepository, store: FileStore):
        self.file_repo = file_repo
        self.store = store

    def recompute(self, identity: str) -> DirectoryUsage:
        """
        Args:
            identity: Hashed client identity

        Returns:
            DirectoryUsage with count, bytes used and owned public ids

        Raises:
            DirectoryUnreadableError: If the client's directory cannot be listed
            OrphanFileError: If a stored file has no catalog entry
        """
        file_ids = []
        used_bytes = 0

        for path in self.store.list_files(identity):
            public_id = path.name.split(".")[0]
            record = self.file_repo.find_by_public_id(public_id, owner=identity)
            if record is None:
                logger.error(
                    f"Orphan file in directory of [identity={short_identity(identity)}]: {path.name}"
                )
                raise OrphanFileError(f"Error retrieving file from ID {public_id}: no catalog entry")

            file_ids.append(record.public_id)
            used_bytes += record.size

        return DirectoryUsage(files_count=len(file_ids), used_bytes=used_bytes, file_ids=file_ids)


class QuotaLedger:
    """
    Creates and refreshes ClientRecords and enforces storage caps.
    """

    def __init__(
        self,
        client_repo: ClientRepository,
        reconciler: DirectoryReconciler,
        store: FileStore,
        client_max_bytes: int = CLIENT_MAX_BYTES,
        host_max_bytes: int = HOST_MAX_BYTES,
        clock: Callable[[], datetime] = utc_now,
    ):
        self.client_repo = client_repo
        self.reconciler = reconciler
        self.store = store
        self.client_max_bytes = client_max_bytes
        self.host_max_bytes = host_max_bytes
        self.clock = clock

    def recompute(self, identity: str) -> DirectoryUsage:
        return self.reconciler.recompute(identity)

    def upsert(self, identity: str) -> ClientRecord:
        """
        Create the client's record on first touch, otherwise refresh it.

        Either way the file list, count and bytes used come from a fresh
        recompute and the expiry moves to one day from now.
        """
        usage = self.recompute(identity)
        now = self.clock()
        expires_at = now + timedelta(seconds=RECORD_TTL_SECONDS)

        existing = self.client_repo.get(identity)
        if existing is None:
            record = ClientRecord(
                identity=identity,
                files=list(usage.file_ids),
                files_count=usage.files_count,
                used_bytes=usage.used_bytes,
                created_at=now,
                expires_at=expires_at,
                call_count=1,
                last_call_at=now,
            )
            logger.info(f"Creating client record [identity={short_identity(identity)}]")
            return self.client_repo.create(record)

        self.client_repo.update_usage(
            identity,
            files=list(usage.file_ids),
            files_count=usage.files_count,
            used_bytes=usage.used_bytes,
            expires_at=expires_at,
        )
        existing.files = list(usage.file_ids)
        existing.files_count = usage.files_count
        existing.used_bytes = usage.used_bytes
        existing.expires_at = expires_at
        return existing

    def host_used_bytes(self) -> int:
        return self.store.used_space()

    def check_host_capacity(self) -> None:
        """
        Raises:
            HostStorageFullError: If host-wide usage is at or over the cap
        """
        used = self.host_used_bytes()
        if used >= self.host_max_bytes:
            logger.warning(f"Host storage full: used={used} cap={self.host_max_bytes}")
            raise HostStorageFullError(
                "The host server storage capacity is full.",
                remaining_bytes=0,
            )

    def check_client_quota(self, record: Optional[ClientRecord], size: int) -> None:
        """
        Reject an upload that would push an existing client over its cap.

        Clients without a record have nothing stored yet and are not checked.

        Raises:
            QuotaExceededError: With the exact remaining space in bytes
        """
        if record is None:
            return

        if record.used_bytes + size > self.client_max_bytes:
            remaining = self.client_max_bytes - record.used_bytes
            logger.warning(
                f"Quota exceeded for [identity={short_identity(record.identity)}]: "
                f"need {size}, have {remaining} available"
            )
            raise QuotaExceededError(
                f"The file size exceeds your available storage capacity. "
                f"You have {format_megabytes(remaining)} MB left.",
                remaining_bytes=remaining,
            )
