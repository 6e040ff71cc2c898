"""Command request data types for CLI."""

from dataclasses import dataclass
from typing import Literal


@dataclass(frozen=True)
class UploadCommand:
    """Upload one file."""

    path: str
    email: str = ""
    command: Literal["upload"] = "upload"


@dataclass(frozen=True)
class DownloadCommand:
    """Download a file by public id."""

    public_id: str
    output_path: str | None = None
    command: Literal["download"] = "download"


@dataclass(frozen=True)
class DeleteCommand:
    """Delete a file by private id."""

    private_id: str
    command: Literal["delete"] = "delete"


@dataclass(frozen=True)
class InfoCommand:
    """Show file details by private id."""

    private_id: str
    command: Literal["info"] = "info"


@dataclass(frozen=True)
class MeCommand:
    """Show the caller's usage record."""

    command: Literal["me"] = "me"


@dataclass(frozen=True)
class EraseCommand:
    """Erase all of the caller's data."""

    command: Literal["erase"] = "erase"


CommandRequest = (
    UploadCommand
    | DownloadCommand
    | DeleteCommand
    | InfoCommand
    | MeCommand
    | EraseCommand
)
