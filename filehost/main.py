"""Entry point for the file host service."""

import time
from typing import Callable, Optional

import uvicorn
from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from common.logging_config import get_logger, setup_logging
from filehost.config import ALLOWED_ORIGIN, SERVER_HOST, SERVER_PORT
from filehost.database import Database
from filehost.exceptions import DropException, DuplicateFileError, QuotaExceededError
from filehost.repositories import ClientRepository, FileRepository
from filehost.routes import client_router, file_router
from filehost.scanner import CommandScanner, Scanner
from filehost.schemas.files import FileRecordResponse
from filehost.services import ClientService, DirectoryReconciler, FileService, QuotaLedger, RateLimiter
from filehost.storage import FileStore
from filehost.utils import generate_uuid, utc_now

logger = get_logger("filehost")


def create_app(
    database: Optional[Database] = None,
    store: Optional[FileStore] = None,
    scanner: Optional[Scanner] = None,
    encryption_key: Optional[str] = None,
    exclusion_key: Optional[str] = None,
    allowed_origin: Optional[str] = None,
    clock: Callable = utc_now,
) -> FastAPI:
    """
    Build the application and wire its collaborators.

    Every argument defaults to the configured production value; tests
    pass their own to get an isolated instance.
    """
    setup_logging("filehost")

    database = database or Database()
    store = store or FileStore()
    scanner = scanner or CommandScanner()
    allowed_origin = allowed_origin or ALLOWED_ORIGIN

    database.init_schema()
    store.ensure_root()
    logger.info("Database and storage initialized")

    file_repo = FileRepository(database)
    client_repo = ClientRepository(database)
    reconciler = DirectoryReconciler(file_repo, store)
    ledger = QuotaLedger(client_repo, reconciler, store, clock=clock)
    rate_limiter = RateLimiter(client_repo, clock=clock)
    file_service = FileService(
        file_repo,
        store,
        scanner,
        ledger,
        rate_limiter,
        encryption_key=encryption_key,
        exclusion_key=exclusion_key,
        clock=clock,
    )
    client_service = ClientService(client_repo, file_repo, store, file_service)

    app = FastAPI(
        title="Anondrop File Host",
        description="Anonymous file upload, download and deletion",
        version="1.0.0",
    )
    app.state.database = database
    app.state.file_service = file_service
    app.state.client_service = client_service
    app.state.allowed_origin = allowed_origin

    app.add_middleware(
        CORSMiddleware,
        allow_origins=[allowed_origin],
        allow_methods=["GET", "POST", "DELETE"],
        allow_headers=["*"],
        expose_headers=["Content-Length", "Content-Disposition"],
    )
    app.middleware("http")(log_requests)
    app.add_exception_handler(DropException, drop_exception_handler)

    app.include_router(file_router)
    app.include_router(client_router)
    app.add_api_route("/", root, methods=["GET"])
    app.add_api_route("/health", health_check, methods=["GET"])

    return app


async def log_requests(request: Request, call_next):
    """
    Middleware to log all HTTP requests and responses.
    """
    request_id = generate_uuid()
    request.state.request_id = request_id

    start_time = time.time()

    origin = request.headers.get("origin")
    if origin and origin != request.app.state.allowed_origin:
        logger.warning(
            f"Request from unauthorized origin {origin}: {request.method} {request.url.path} "
            f"[request_id={request_id}]"
        )

    logger.info(f"Request started: {request.method} {request.url.path} [request_id={request_id}]")

    response = await call_next(request)

    duration = time.time() - start_time

    logger.info(
        f"Request completed: {request.method} {request.url.path} "
        f"status={response.status_code} duration={duration:.3f}s [request_id={request_id}]"
    )

    response.headers["X-Request-ID"] = request_id

    return response


async def drop_exception_handler(request: Request, exc: DropException):
    request_id = getattr(request.state, 'request_id', 'unknown')

    if exc.status_code >= 500:
        logger.error(
            f"{type(exc).__name__}: {exc} [request_id={request_id}] path={request.url.path}",
            exc_info=exc,
        )
    else:
        logger.warning(
            f"{type(exc).__name__}: {exc} [request_id={request_id}] path={request.url.path}"
        )

    content = {"detail": str(exc), "code": exc.code}
    if isinstance(exc, QuotaExceededError) and exc.remaining_bytes is not None:
        content["remaining_bytes"] = exc.remaining_bytes
    if isinstance(exc, DuplicateFileError):
        content["data"] = FileRecordResponse.from_record(exc.record).model_dump(mode="json")

    return JSONResponse(status_code=exc.status_code, content=content)


async def root():
    """
    Root endpoint for health check.
    """
    return {"message": "Anondrop File Host API", "status": "running"}


async def health_check(request: Request):
    """
    Health check endpoint for Docker healthcheck.
    Returns 503 when the database cannot be reached.
    """
    database: Database = request.app.state.database
    if database.ping():
        return {"status": "healthy", "database": "ok"}

    return JSONResponse(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        content={"status": "unhealthy", "database": "error"},
    )


def main() -> None:
    """
    Start the FastAPI server with uvicorn.
    """
    uvicorn.run(
        "filehost.main:create_app",
        host=SERVER_HOST,
        port=SERVER_PORT,
        factory=True,
    )


if __name__ == "__main__":
    main()
