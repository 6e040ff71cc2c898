"""Manages stored file bytes on disk, one flat directory per client identity."""

import os
import shutil
import tempfile
from pathlib import Path
from typing import List, Optional

from common.logging_config import get_logger, short_identity
from filehost.config import STAGING_DIR, STORAGE_ROOT
from filehost.exceptions import DirectoryUnreadableError, StorageError

logger = get_logger(__name__)

_COPY_BUFFER_SIZE = 64 * 1024


class FileStore:
    """
    Filesystem layout: <root>/<identity>/<public_id>.<ext>

    The identity and public id handed to this class are already hashed,
    so directory and file names are digests.
    """

    def __init__(self, root: Optional[str] = None, staging_dir: Optional[str] = None):
        self.root = Path(root or STORAGE_ROOT)
        self.staging_dir = Path(staging_dir or STAGING_DIR)

    def ensure_root(self) -> None:
        """Ensure storage and staging directories exist."""
        self.root.mkdir(parents=True, exist_ok=True)
        self.staging_dir.mkdir(parents=True, exist_ok=True)

    def client_dir(self, identity: str) -> Path:
        return self.root / identity

    def file_path(self, identity: str, public_id: str, extension: str) -> Path:
        """
        Get the storage path for one client's copy of a file.

        Args:
            identity: Hashed client identity
            public_id: Hashed public identifier
            extension: Extension taken from the original filename

        Returns:
            Path object for the stored file
        """
        return self.client_dir(identity) / f"{public_id}.{extension}"

    def exists(self, path: Path) -> bool:
        return path.is_file()

    def stage(self, data: bytes) -> Path:
        """
        Write an upload to a private temporary file for scanning.

        Returns:
            Path of the staged file; the caller removes it
        """
        self.staging_dir.mkdir(parents=True, exist_ok=True)
        try:
            fd, name = tempfile.mkstemp(prefix="upload_", dir=self.staging_dir)
            with os.fdopen(fd, "wb") as staged:
                staged.write(data)
        except OSError as e:
            logger.error(f"Failed to stage upload: {e}", exc_info=True)
            raise StorageError("Error saving the file temporarily.") from e
        return Path(name)

    def discard(self, path: Path) -> None:
        """Remove a staged file if it is still there."""
        try:
            path.unlink()
        except FileNotFoundError:
            pass
        except OSError as e:
            logger.warning(f"Failed to remove staged file {path.name}: {e}")

    def copy_without_metadata(self, source: Path, destination: Path) -> Path:
        """
        Copy content bytes only.

        Timestamps and permission bits of the source are not carried over;
        the destination gets fresh metadata from the filesystem.

        Raises:
            StorageError: If reading or writing fails
        """
        try:
            destination.parent.mkdir(parents=True, exist_ok=True)
            with open(source, "rb") as src, open(destination, "wb") as dst:
                shutil.copyfileobj(src, dst, _COPY_BUFFER_SIZE)
        except OSError as e:
            logger.error(f"Failed to copy {source.name} -> {destination.name}: {e}", exc_info=True)
            raise StorageError("Error processing the file.") from e
        return destination

    def remove(self, path: Path) -> None:
        """
        Delete a stored file.

        Raises:
            StorageError: If the file is missing or cannot be removed
        """
        try:
            path.unlink()
        except OSError as e:
            logger.error(f"Failed to delete {path.name}: {e}")
            raise StorageError("Error deleting file.") from e

    def list_files(self, identity: str) -> List[Path]:
        """
        List regular files in a client's directory.

        Raises:
            DirectoryUnreadableError: If the directory is missing or cannot be read
        """
        directory = self.client_dir(identity)
        try:
            return sorted(entry for entry in directory.iterdir() if entry.is_file())
        except OSError as e:
            logger.error(f"Cannot list directory for [identity={short_identity(identity)}]: {e}")
            raise DirectoryUnreadableError("It was not possible to read the client's directory.") from e

    def remove_client_dir(self, identity: str) -> None:
        """
        Recursively delete a client's storage directory.

        Raises:
            StorageError: If removal fails
        """
        directory = self.client_dir(identity)
        if not directory.exists():
            return
        try:
            shutil.rmtree(directory)
        except OSError as e:
            logger.error(f"Failed to remove directory for [identity={short_identity(identity)}]: {e}")
            raise StorageError("Error deleting files from system.") from e

    def used_space(self) -> int:
        """
        Total size in bytes of every file under the storage root.
        """
        total = 0
        if not self.root.exists():
            return 0
        for dirpath, _dirnames, filenames in os.walk(self.root):
            for filename in filenames:
                try:
                    total += os.path.getsize(os.path.join(dirpath, filename))
                except OSError as e:
                    logger.warning(f"Skipping {filename} in host usage: {e}")
                    continue
        return total
