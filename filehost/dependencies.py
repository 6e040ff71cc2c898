"""FastAPI dependencies: caller identity and service lookup."""

from fastapi import Request

from filehost.hashing import hash_identity
from filehost.services.client_service import ClientService
from filehost.services.file_service import FileService

FORWARDED_ADDRESS_HEADER = "CF-Connecting-IP"


def get_client_identity(request: Request) -> str:
    """
    FastAPI dependency deriving the caller's hashed identity.

    The address comes from the CF-Connecting-IP header when a proxy set
    it, otherwise from the socket peer. The raw address is not kept.

    Returns:
        Hashed client identity
    """
    address = request.headers.get(FORWARDED_ADDRESS_HEADER)
    if not address:
        address = request.client.host if request.client else ""

    identity = hash_identity(address)
    request.state.identity = identity
    return identity


def get_file_service(request: Request) -> FileService:
    """Dependency to get the file service built at startup"""
    return request.app.state.file_service


def get_client_service(request: Request) -> ClientService:
    """Dependency to get the client service built at startup"""
    return request.app.state.client_service
