"""Service layer for business logic."""

from filehost.services.client_service import ClientService
from filehost.services.file_service import FileService
from filehost.services.quota_service import DirectoryReconciler, QuotaLedger
from filehost.services.rate_limiter import RateLimiter

__all__ = [
    "ClientService",
    "DirectoryReconciler",
    "FileService",
    "QuotaLedger",
    "RateLimiter",
]
