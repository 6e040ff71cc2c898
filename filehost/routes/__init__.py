"""API routes package."""

from filehost.routes.client_routes import router as client_router
from filehost.routes.file_routes import router as file_router

__all__ = ["client_router", "file_router"]
