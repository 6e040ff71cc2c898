"""Interactive anondrop prompt."""

import os
import sys
from typing import Optional

from prompt_toolkit import PromptSession
from prompt_toolkit.completion import WordCompleter
from prompt_toolkit.history import InMemoryHistory

from cli.commands import (
    close_client,
    handle_delete,
    handle_download,
    handle_erase,
    handle_info,
    handle_me,
    handle_upload,
)
from cli.constants import COMMANDS, HELP_TEXT, LOGO, PROMPT_TEXT, STYLE, WELCOME_HELP, WELCOME_TITLE
from cli.models import (
    DeleteCommand,
    DownloadCommand,
    EraseCommand,
    InfoCommand,
    MeCommand,
    UploadCommand,
)
from cli.parser import ParseError, parse_command

HANDLERS = {
    UploadCommand: handle_upload,
    DownloadCommand: handle_download,
    DeleteCommand: handle_delete,
    InfoCommand: handle_info,
    MeCommand: handle_me,
    EraseCommand: handle_erase,
}


def clear_screen() -> None:
    os.system("cls" if sys.platform == "win32" else "clear")


def welcome() -> str:
    return f"{LOGO}\n{WELCOME_TITLE}\n{WELCOME_HELP}"


def dispatch_command(cmd_obj) -> str:
    handler = HANDLERS.get(type(cmd_obj))
    if handler is None:
        return f"Unknown command type: {type(cmd_obj)}"
    return handler(cmd_obj)


def handle_line(line: str) -> Optional[str]:
    """
    Run one line typed at the prompt.

    Returns:
        Text to print, or None when the session should end
    """
    word = line.strip()
    if not word:
        return ""
    if word == "exit":
        return None
    if word == "help":
        return HELP_TEXT
    if word == "clear":
        clear_screen()
        return welcome()

    try:
        return dispatch_command(parse_command(line))
    except ParseError as e:
        return f"Error: {e}"


def repl_loop() -> None:
    session: PromptSession = PromptSession(
        completer=WordCompleter(COMMANDS, ignore_case=True),
        history=InMemoryHistory(),
        style=STYLE,
    )

    clear_screen()
    print(welcome())

    try:
        while True:
            try:
                line = session.prompt([("class:prompt", PROMPT_TEXT)])
            except KeyboardInterrupt:
                continue

            output = handle_line(line)
            if output is None:
                break
            if output:
                print(output)
    except EOFError:
        print()
    finally:
        close_client()
        print("Goodbye!")
