"""Client ledger API routes."""

from fastapi import APIRouter, Depends

from filehost.dependencies import get_client_identity, get_client_service
from filehost.schemas.clients import ClientResponse
from filehost.schemas.common import ErrorResponse, MessageResponse
from filehost.services.client_service import ClientService

router = APIRouter(prefix="/clients", tags=["Clients"], responses={404: {"model": ErrorResponse}})


@router.get("/me", response_model=ClientResponse)
def get_me(
    identity: str = Depends(get_client_identity),
    client_service: ClientService = Depends(get_client_service),
):
    """
    Return the caller's usage and expiry.

    Raises:
        - 404: Nothing stored for this client
    """
    record = client_service.get_client(identity)
    return ClientResponse.from_record(record)


@router.delete("/me", response_model=MessageResponse)
def erase_me(
    identity: str = Depends(get_client_identity),
    client_service: ClientService = Depends(get_client_service),
):
    """
    Erase every file and the ledger entry of the caller.

    Not atomic; safe to call again after a failure.

    Raises:
        - 404: Nothing stored for this client
    """
    client_service.erase_all(identity)
    return MessageResponse(message="All of your data has been erased")
