"""Command handler functions for CLI operations."""

from typing import Optional

from common.logging_config import get_logger
from cli.config import Config
from cli.models import (
    DeleteCommand,
    DownloadCommand,
    EraseCommand,
    InfoCommand,
    MeCommand,
    UploadCommand,
)
from cli.server_client import ServerClient

logger = get_logger(__name__)


_client: Optional[ServerClient] = None


def get_client() -> ServerClient:
    """
    Get or create global ServerClient instance.

    Returns:
        ServerClient instance
    """
    global _client
    if _client is None:
        logger.debug("Creating new ServerClient instance")
        _client = ServerClient(Config())
    return _client


def close_client() -> None:
    """Close the shared ServerClient session, if one was opened."""
    global _client
    if _client is not None:
        _client.close()
        _client = None


def handle_upload(cmd: UploadCommand, client: Optional[ServerClient] = None) -> str:
    """
    Handle 'upload' command.

    Args:
        cmd: UploadCommand with path and optional email
        client: Optional ServerClient for dependency injection (testing)

    Returns:
        Success or error message with the new identifiers
    """
    logger.info(f"Executing upload command: path={cmd.path}")
    if client is None:
        client = get_client()
    return client.upload(cmd.path, cmd.email)


def handle_download(cmd: DownloadCommand, client: Optional[ServerClient] = None) -> str:
    logger.info(f"Executing download command: output_path={cmd.output_path}")
    if client is None:
        client = get_client()
    return client.download(cmd.public_id, cmd.output_path)


def handle_delete(cmd: DeleteCommand, client: Optional[ServerClient] = None) -> str:
    if client is None:
        client = get_client()
    return client.delete(cmd.private_id)


def handle_info(cmd: InfoCommand, client: Optional[ServerClient] = None) -> str:
    if client is None:
        client = get_client()
    return client.info(cmd.private_id)


def handle_me(cmd: MeCommand, client: Optional[ServerClient] = None) -> str:
    if client is None:
        client = get_client()
    return client.me()


def handle_erase(cmd: EraseCommand, client: Optional[ServerClient] = None) -> str:
    """
    Handle 'erase' command.

    Returns:
        Server confirmation or error message
    """
    logger.info("Executing erase command")
    if client is None:
        client = get_client()
    return client.erase()
