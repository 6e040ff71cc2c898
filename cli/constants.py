"""CLI constants and configuration."""

from prompt_toolkit.styles import Style

COMMANDS = ["upload", "download", "delete", "info", "me", "erase", "clear", "exit", "help"]

STYLE = Style.from_dict(
    {
        "prompt": "#2EB67D bold",
        "command": "#0088ff bold",
    }
)

GREEN = "\033[38;2;46;182;125m"
RESET = "\033[0m"

LOGO = f"""{GREEN}
  __ _ _ __   ___  _ __   __| |_ __ ___  _ __
 / _` | '_ \\ / _ \\| '_ \\ / _` | '__/ _ \\| '_ \\
| (_| | | | | (_) | | | | (_| | | | (_) | |_) |
 \\__,_|_| |_|\\___/|_| |_|\\__,_|_|  \\___/| .__/
                                        |_|
{RESET}"""

WELCOME_TITLE = "anondrop - anonymous file drop"
WELCOME_HELP = "Type 'help' for commands or 'exit' to quit.\n"

PROMPT_TEXT = "anondrop> "

HELP_TEXT = """Available commands:
  upload <path> [email]               Upload a file (optional contact email)
  download <public_id> [output_path]  Download a file by its public id
  delete <private_id>                 Delete one of your files by its private id
  info <private_id>                   Show details of one of your files
  me                                  Show your storage usage and expiry
  erase                               Delete all of your files and your record
  clear                               Clear screen and redisplay welcome message
  help                                Show this help
  exit                                Exit REPL

Keep the private id printed after an upload: it is the only way to delete the file.
Examples:
  upload ./report.pdf
  upload photos.zip me@example.com
  download 3f2a...e9 downloads/report.pdf
  delete 91c0...4b"""
