"""Utility helper functions for the file host."""

import uuid
from datetime import datetime, timezone


def generate_uuid() -> str:
    """
    Generate a new UUID4 string.

    Returns:
        UUID4 string
    """
    return str(uuid.uuid4())


def utc_now() -> datetime:
    """
    Get the current timezone-aware UTC time.

    Returns:
        Current UTC datetime
    """
    return datetime.now(timezone.utc)


def parse_timestamp(value: str) -> datetime:
    """
    Parse an ISO timestamp stored in the database.

    Naive values are interpreted as UTC.

    Args:
        value: ISO format timestamp string

    Returns:
        Timezone-aware datetime
    """
    parsed = datetime.fromisoformat(value)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def format_megabytes(size_bytes: int) -> str:
    """
    Format a byte count as megabytes with two decimals.

    Args:
        size_bytes: Size in bytes

    Returns:
        String such as "12.50"
    """
    return f"{size_bytes / (1024 * 1024):.2f}"
