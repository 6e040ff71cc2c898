"""Tests for the command scanner adapter."""

import sys

from filehost.scanner import CommandScanner
from filehost.types import ScanResult


def _python_exit(code: int) -> str:
    return f'"{sys.executable}" -c "import sys; sys.exit({code})"'


def test_exit_zero_is_clean(tmp_path):
    target = tmp_path / "file.txt"
    target.write_text("x")

    assert CommandScanner(_python_exit(0)).scan(target) is ScanResult.CLEAN


def test_exit_one_is_infected(tmp_path):
    target = tmp_path / "file.txt"
    target.write_text("x")

    assert CommandScanner(_python_exit(1)).scan(target) is ScanResult.INFECTED


def test_other_exit_status_is_error(tmp_path):
    target = tmp_path / "file.txt"
    target.write_text("x")

    assert CommandScanner(_python_exit(2)).scan(target) is ScanResult.ERROR


def test_missing_scanner_binary_is_error(tmp_path):
    target = tmp_path / "file.txt"
    target.write_text("x")

    assert CommandScanner("definitely-not-a-scanner-binary").scan(target) is ScanResult.ERROR


def test_timeout_is_error(tmp_path):
    target = tmp_path / "file.txt"
    target.write_text("x")
    command = f'"{sys.executable}" -c "import time; time.sleep(5)"'

    assert CommandScanner(command, timeout=0.2).scan(target) is ScanResult.ERROR
