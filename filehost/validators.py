"""Input validation for uploads."""

import re

ALLOWED_CONTENT_TYPES = frozenset({
    "image/jpeg",
    "image/jpg",
    "image/png",
    "image/gif",

    "application/pdf",
    "application/json",

    "application/zip",
    "application/x-tar",
    "application/x-rar-compressed",

    "text/plain",

    "audio/mpeg",
    "audio/x-wav",
    "audio/x-flac",
})

_EMAIL_PATTERN = re.compile(r"^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$")
_EXTENSION_PATTERN = re.compile(r"^[A-Za-z0-9]+$")


def is_allowed_content_type(content_type: str) -> bool:
    """
    Check a declared content type against the allow-list.

    Parameters such as "; charset=utf-8" are ignored.
    """
    if not content_type:
        return False
    media_type = content_type.split(";", 1)[0].strip().lower()
    return media_type in ALLOWED_CONTENT_TYPES


def is_valid_email(email: str) -> bool:
    return bool(_EMAIL_PATTERN.match(email))


def extract_extension(filename: str) -> str:
    """
    Get the first dot-delimited suffix of a filename.

    Example: 'archive.tar.gz' -> 'tar'

    Returns:
        The suffix, or an empty string when the filename has none usable
        as a path component.
    """
    parts = filename.split(".")
    if len(parts) < 2:
        return ""
    extension = parts[1]
    if not _EXTENSION_PATTERN.match(extension):
        return ""
    return extension
