"""Antivirus scanner adapters."""

import shlex
import subprocess
from pathlib import Path
from typing import List, Optional, Protocol

from common.logging_config import get_logger
from filehost.config import SCAN_TIMEOUT_SECONDS, SCANNER_COMMAND
from filehost.types import ScanResult

logger = get_logger(__name__)

# clamdscan / clamscan exit statuses
_EXIT_CLEAN = 0
_EXIT_INFECTED = 1


class Scanner(Protocol):
    def scan(self, path: Path) -> ScanResult:
        ...


class CommandScanner:
    """
    Runs an external scanner command against a staged file.

    The command follows the ClamAV convention: exit status 0 means clean,
    1 means a signature matched, anything else is a scanner failure.
    """

    def __init__(self, command: Optional[str] = None, timeout: float = SCAN_TIMEOUT_SECONDS):
        self.command: List[str] = shlex.split(command or SCANNER_COMMAND)
        self.timeout = timeout

    def scan(self, path: Path) -> ScanResult:
        args = self.command + [str(path)]
        try:
            completed = subprocess.run(
                args,
                capture_output=True,
                text=True,
                timeout=self.timeout,
                check=False,
            )
        except subprocess.TimeoutExpired:
            logger.error(f"Scanner timed out after {self.timeout}s")
            return ScanResult.ERROR
        except OSError as e:
            logger.error(f"Scanner could not be started ({self.command[0]}): {e}")
            return ScanResult.ERROR

        if completed.returncode == _EXIT_CLEAN:
            return ScanResult.CLEAN
        if completed.returncode == _EXIT_INFECTED:
            logger.warning(f"Scanner reported infection: {completed.stdout.strip()}")
            return ScanResult.INFECTED

        logger.error(
            f"Scanner failed with exit status {completed.returncode}: {completed.stderr.strip()}"
        )
        return ScanResult.ERROR
