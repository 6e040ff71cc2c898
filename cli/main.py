"""CLI entry point."""

import os
import sys

from common.logging_config import setup_logging
from cli.config import Config
from cli.repl import repl_loop


def _pop_option(argv: list[str], name: str) -> str | None:
    """Remove '<name> <value>' from argv and return the value."""
    if name not in argv:
        return None
    index = argv.index(name)
    if index + 1 >= len(argv):
        raise SystemExit(f"{name} requires a value")
    value = argv[index + 1]
    del argv[index:index + 2]
    return value


def main() -> None:
    """
    Entry point for CLI.

    Options:
        --debug              Verbose logging
        --server HOST:PORT   Point the saved config at another file host
    """
    debug = '--debug' in sys.argv
    log_level = 'DEBUG' if debug else os.getenv('LOG_LEVEL', 'WARNING')

    logger = setup_logging('cli', log_level=log_level)

    if debug:
        logger.info("Debug logging enabled")
        sys.argv.remove('--debug')

    server = _pop_option(sys.argv, '--server')
    if server:
        host, _, port = server.rpartition(':')
        if not host or not port.isdigit():
            raise SystemExit("--server expects HOST:PORT")
        try:
            Config().set_server(host, int(port))
        except ValueError as e:
            raise SystemExit(str(e))
        logger.info(f"Server set to {host}:{port}")

    logger.info("CLI starting...")
    try:
        repl_loop()
    except Exception as e:
        logger.error(f"CLI error: {e}", exc_info=True)
        raise
    finally:
        logger.info("CLI exiting")


if __name__ == "__main__":
    main()
