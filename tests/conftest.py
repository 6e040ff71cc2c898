"""Shared pytest fixtures for all tests."""

import logging

import pytest

from cli.config import Config
from filehost.database import Database
from filehost.repositories import ClientRepository, FileRepository
from filehost.services import ClientService, DirectoryReconciler, FileService, QuotaLedger, RateLimiter
from filehost.storage import FileStore
from helpers import ENCRYPTION_KEY, EXCLUSION_KEY, FakeClock, FakeScanner


@pytest.fixture
def temp_config_dir(tmp_path):
    """
    Create temporary config directory.

    Returns:
        Path to temporary .anondrop directory
    """
    config_dir = tmp_path / '.anondrop'
    config_dir.mkdir()
    return config_dir


@pytest.fixture
def temp_config(temp_config_dir):
    return Config(temp_config_dir / 'config.json')


@pytest.fixture
def sample_file(tmp_path):
    """
    Create a sample file for testing file uploads.

    Returns:
        Path to sample text file
    """
    file_path = tmp_path / 'test.txt'
    file_path.write_text('Sample content for testing')
    return file_path


@pytest.fixture
def database(tmp_path) -> Database:
    db = Database(str(tmp_path / "metadata.db"))
    db.init_schema()
    return db


@pytest.fixture
def store(tmp_path) -> FileStore:
    file_store = FileStore(root=str(tmp_path / "files"), staging_dir=str(tmp_path / "staging"))
    file_store.ensure_root()
    return file_store


@pytest.fixture
def file_repo(database) -> FileRepository:
    return FileRepository(database)


@pytest.fixture
def client_repo(database) -> ClientRepository:
    return ClientRepository(database)


@pytest.fixture
def scanner() -> FakeScanner:
    return FakeScanner()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def reconciler(file_repo, store) -> DirectoryReconciler:
    return DirectoryReconciler(file_repo, store)


@pytest.fixture
def ledger(client_repo, reconciler, store, clock) -> QuotaLedger:
    return QuotaLedger(client_repo, reconciler, store, clock=clock)


@pytest.fixture
def rate_limiter(client_repo, clock) -> RateLimiter:
    return RateLimiter(client_repo, clock=clock)


@pytest.fixture
def file_service(file_repo, store, scanner, ledger, rate_limiter, clock) -> FileService:
    return FileService(
        file_repo,
        store,
        scanner,
        ledger,
        rate_limiter,
        encryption_key=ENCRYPTION_KEY,
        exclusion_key=EXCLUSION_KEY,
        clock=clock,
    )


@pytest.fixture
def client_service(client_repo, file_repo, store, file_service) -> ClientService:
    return ClientService(client_repo, file_repo, store, file_service)


@pytest.fixture
def filehost_caplog(caplog, monkeypatch):
    """caplog that also receives records from the filehost loggers."""
    monkeypatch.setattr(logging.getLogger("filehost"), "propagate", True)
    return caplog
