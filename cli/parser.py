"""Command parser for CLI input."""

import shlex

from cli.models import (
    CommandRequest,
    DeleteCommand,
    DownloadCommand,
    EraseCommand,
    InfoCommand,
    MeCommand,
    UploadCommand,
)


class ParseError(Exception):
    """Raised when command parsing fails."""

    pass


def parse_command(input_line: str) -> CommandRequest:
    """Parse user input into a CommandRequest object.

    Args:
        input_line: Raw user input from REPL

    Returns:
        CommandRequest object (one of Upload/Download/Delete/Info/Me/Erase)

    Raises:
        ParseError: If command syntax is invalid
    """
    if not input_line.strip():
        raise ParseError("Empty command")

    try:
        tokens = shlex.split(input_line)
    except ValueError as e:
        raise ParseError(f"Invalid syntax: {e}")

    if not tokens:
        raise ParseError("Empty command")

    command_name = tokens[0]

    if command_name == "upload":
        return _parse_upload(tokens[1:])
    elif command_name == "download":
        return _parse_download(tokens[1:])
    elif command_name == "delete":
        return DeleteCommand(private_id=_single_identifier("delete", "<private_id>", tokens[1:]))
    elif command_name == "info":
        return InfoCommand(private_id=_single_identifier("info", "<private_id>", tokens[1:]))
    elif command_name == "me":
        _no_arguments("me", tokens[1:])
        return MeCommand()
    elif command_name == "erase":
        _no_arguments("erase", tokens[1:])
        return EraseCommand()
    else:
        raise ParseError(f"Unknown command: {command_name}")


def _parse_upload(args: list[str]) -> UploadCommand:
    """Parse 'upload <path> [email]' command."""
    if not args or len(args) > 2:
        raise ParseError("upload requires 1 or 2 arguments: <path> [email]")

    path = args[0]
    email = args[1] if len(args) > 1 else ""
    return UploadCommand(path=path, email=email)


def _parse_download(args: list[str]) -> DownloadCommand:
    """Parse 'download <public_id> [output_path]' command."""
    if not args or len(args) > 2:
        raise ParseError("download requires 1 or 2 arguments: <public_id> [output_path]")

    public_id = args[0]
    output_path = args[1] if len(args) > 1 else None
    return DownloadCommand(public_id=public_id, output_path=output_path)


def _single_identifier(command: str, usage: str, args: list[str]) -> str:
    if len(args) != 1:
        raise ParseError(f"{command} requires exactly 1 argument: {usage}")
    return args[0]


def _no_arguments(command: str, args: list[str]) -> None:
    if args:
        raise ParseError(f"{command} takes no arguments")
