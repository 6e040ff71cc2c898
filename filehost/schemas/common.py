"""Common schemas used across multiple endpoints."""

from typing import Optional

from pydantic import BaseModel


class ErrorResponse(BaseModel):
    """Response model for errors."""
    detail: str
    code: str
    remaining_bytes: Optional[int] = None


class MessageResponse(BaseModel):
    """Response model for operations that only report an outcome."""
    message: str
