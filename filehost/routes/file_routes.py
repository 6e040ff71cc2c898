"""File operation API routes."""

from fastapi import APIRouter, Depends, File, Form, Query, UploadFile, status
from fastapi.responses import FileResponse

from filehost.dependencies import get_client_identity, get_file_service
from filehost.schemas.common import ErrorResponse, MessageResponse
from filehost.schemas.files import FileInfoResponse, FileRecordResponse, UploadFileResponse
from filehost.services.file_service import FileService
from filehost.types import UploadRequest

router = APIRouter(
    prefix="/files",
    tags=["Files"],
    responses={404: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)


@router.post("", response_model=UploadFileResponse, status_code=status.HTTP_201_CREATED)
def upload_file(
    file: UploadFile = File(...),
    email: str = Form(""),
    identity: str = Depends(get_client_identity),
    file_service: FileService = Depends(get_file_service),
):
    """
    Upload a file anonymously.

    Parameters:
        - file: File to upload (multipart/form-data)
        - email: Optional contact address stored with the file

    Returns:
        - message: Outcome message
        - data: Stored file record, including the private id needed to delete it

    Raises:
        - 400: Disallowed type, bad email or infected file
        - 409: Same file already uploaded by this client (existing record under `data`)
        - 413: Client storage quota exceeded
        - 429: Too many uploads in the last minute
        - 503: Scanner unavailable
        - 507: Host storage full
    """
    data = file.file.read()

    record = file_service.upload(
        identity,
        UploadRequest(
            filename=file.filename,
            content_type=file.content_type,
            data=data,
            email=email.strip(),
        ),
    )

    return UploadFileResponse(
        message="File saved successfully",
        data=FileRecordResponse.from_record(record),
    )


@router.get("/info", response_model=FileInfoResponse)
def file_info(
    private_id: str = Query("", description="Private identifier returned at upload"),
    identity: str = Depends(get_client_identity),
    file_service: FileService = Depends(get_file_service),
):
    """
    Look up a stored file by its private identifier.

    Raises:
        - 400: Missing identifier
        - 404: File not found
    """
    record = file_service.file_info(identity, private_id)
    return FileInfoResponse(data=FileRecordResponse.from_record(record))


@router.get("/{public_id}/download")
def download_file(
    public_id: str,
    identity: str = Depends(get_client_identity),
    file_service: FileService = Depends(get_file_service),
):
    """
    Download the caller's copy of a file by public identifier.

    Returns:
        File bytes with the original name as an attachment

    Raises:
        - 404: File not found
        - 500: Catalog and stored bytes disagree
    """
    record, path = file_service.download(identity, public_id)

    return FileResponse(
        path,
        media_type="application/octet-stream",
        filename=record.name,
        content_disposition_type="attachment",
    )


@router.delete("/{private_id}", response_model=MessageResponse)
def delete_file(
    private_id: str,
    identity: str = Depends(get_client_identity),
    file_service: FileService = Depends(get_file_service),
):
    """
    Delete one of the caller's files by private identifier.

    Raises:
        - 404: File not found for this client
        - 500: Metadata removed but bytes could not be
    """
    file_service.delete(identity, private_id)
    return MessageResponse(message="File deleted successfully")
