"""Client service: ledger lookups and erase-all."""

from common.logging_config import get_logger, short_identity
from filehost.exceptions import ClientNotFoundError
from filehost.repositories.client_repository import ClientRepository
from filehost.repositories.file_repository import FileRepository
from filehost.services.file_service import FileService
from filehost.storage import FileStore
from filehost.types import ClientRecord

logger = get_logger(__name__)


class ClientService:
    def __init__(
        self,
        client_repo: ClientRepository,
        file_repo: FileRepository,
        store: FileStore,
        file_service: FileService,
    ):
        self.client_repo = client_repo
        self.file_repo = file_repo
        self.store = store
        self.file_service = file_service

    def get_client(self, identity: str) -> ClientRecord:
        record = self.client_repo.get(identity)
        if record is None:
            raise ClientNotFoundError("No data is stored for this client.")
        return record

    def erase_all(self, identity: str) -> int:
        """
        Delete every file a client owns, its directory and its record.

        Not atomic: a failure part way through leaves the remaining files
        in place and the error propagates. Running it again finishes the job.

        Returns:
            Number of catalog entries removed

        Raises:
            ClientNotFoundError: If the client has neither a record nor files
        """
        record = self.client_repo.get(identity)
        owned = self.file_repo.list_by_owner(identity)

        if record is None and not owned:
            raise ClientNotFoundError("No data is stored for this client.")

        public_ids = [r.public_id for r in owned]
        if record is not None:
            public_ids.extend(pid for pid in record.files if pid not in public_ids)

        removed = 0
        for public_id in public_ids:
            file_record = self.file_repo.find_by_public_id(public_id, owner=identity)
            if file_record is None:
                logger.warning(
                    f"Ledger lists a file with no catalog entry [public_id={public_id[:12]}] "
                    f"[identity={short_identity(identity)}]"
                )
                continue
            self.file_service.remove_file(identity, file_record.private_id, missing_ok=True)
            removed += 1

        self.store.remove_client_dir(identity)
        self.client_repo.delete_by_identity(identity)

        logger.info(f"Erased {removed} files [identity={short_identity(identity)}]")
        return removed
