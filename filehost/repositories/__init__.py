"""Repository layer for data access."""

from filehost.repositories.client_repository import ClientRepository
from filehost.repositories.file_repository import FileRepository

__all__ = [
    "ClientRepository",
    "FileRepository",
]
