"""Test doubles and builders shared by the test modules."""

from datetime import datetime, timedelta, timezone
from pathlib import Path

from filehost.types import ScanResult, UploadRequest

ENCRYPTION_KEY = "test-encryption-key"
EXCLUSION_KEY = "test-exclusion-key"


class FakeScanner:
    """Scanner double returning a preset verdict and recording scanned paths."""

    def __init__(self, result: ScanResult = ScanResult.CLEAN):
        self.result = result
        self.scanned = []

    def scan(self, path: Path) -> ScanResult:
        self.scanned.append(path)
        assert path.exists()
        return self.result


class FakeClock:
    """Controllable UTC clock."""

    def __init__(self, start: datetime = datetime(2026, 1, 1, 12, 0, tzinfo=timezone.utc)):
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now = self.now + timedelta(seconds=seconds)


def make_upload(data: bytes = b"%PDF-1.4 sample", filename: str = "doc.pdf",
                content_type: str = "application/pdf", email: str = "") -> UploadRequest:
    return UploadRequest(filename=filename, content_type=content_type, data=data, email=email)


def put_file(path: Path, data: bytes) -> Path:
    """Place bytes at a storage path, creating the client directory."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(data)
    return path
