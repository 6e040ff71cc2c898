"""Utility functions for CLI operations."""

import re
from typing import Optional


def format_file_size(size_bytes: int) -> str:
    """
    Format file size in bytes to human-readable format with appropriate unit.

    Uses binary units (1024-based) and automatically selects the most
    appropriate unit (B, KiB, MiB, GiB, TiB).

    Args:
        size_bytes: File size in bytes

    Returns:
        Formatted string with size and unit (e.g., "1.50 MiB", "512 B")
    """
    if size_bytes < 1024:
        return f"{size_bytes} B"

    units = ['KiB', 'MiB', 'GiB', 'TiB']
    size = size_bytes / 1024.0

    for unit in units:
        if size < 1024.0:
            return f"{size:.2f} {unit}"
        size /= 1024.0

    return f"{size:.2f} PiB"


_FILENAME_PATTERN = re.compile(r'filename="?([^";]+)"?')


def filename_from_disposition(header: Optional[str]) -> Optional[str]:
    """
    Extract the filename from a Content-Disposition header.

    Example: 'attachment; filename="doc.pdf"' -> 'doc.pdf'
    """
    if not header:
        return None
    match = _FILENAME_PATTERN.search(header)
    return match.group(1) if match else None
