"""Settings for the anondrop CLI, kept in ~/.anondrop/config.json."""

import json
import os
import shutil
import tempfile
from pathlib import Path

from common.constants import DEFAULT_SERVER_PORT
from common.logging_config import get_logger

logger = get_logger(__name__)

DEFAULT_CONFIG_PATH = Path.home() / '.anondrop' / 'config.json'

# key -> expected type of the stored value
SETTING_TYPES = {
    "server_host": str,
    "server_port": int,
    "timeout": (int, float),
    "max_retries": int,
    "retry_backoff_multiplier": (int, float),
}


def default_settings() -> dict:
    """Built-in settings; ANONDROP_SERVER_HOST and ANONDROP_SERVER_PORT override the address."""
    return {
        "server_host": os.environ.get("ANONDROP_SERVER_HOST", "localhost"),
        "server_port": int(os.environ.get("ANONDROP_SERVER_PORT", str(DEFAULT_SERVER_PORT))),
        "timeout": 30,
        "max_retries": 3,
        "retry_backoff_multiplier": 2,
    }


def _valid(key: str, value) -> bool:
    expected = SETTING_TYPES[key]
    if isinstance(value, bool) or not isinstance(value, expected):
        return False
    if key == "server_port":
        return 0 < value < 65536
    if key == "server_host":
        return bool(value.strip())
    return value >= 0


class Config:
    def __init__(self, config_path: Path = DEFAULT_CONFIG_PATH):
        self.config_path = config_path
        self._ensure_directory()
        self.data = self._load()

    def _ensure_directory(self) -> None:
        try:
            self.config_path.parent.mkdir(parents=True, exist_ok=True)
        except PermissionError:
            self.config_path = Path(tempfile.gettempdir()) / '.anondrop' / 'config.json'
            self.config_path.parent.mkdir(parents=True, exist_ok=True)

    def _load(self) -> dict:
        """
        Merge the saved settings over the defaults.

        A file that is not a JSON object is kept as config.json.bak and the
        defaults are used. Single values of the wrong type or out of range
        fall back to their default; unknown keys are dropped.
        """
        settings = default_settings()

        if not self.config_path.exists():
            self.data = settings
            self.save()
            return settings

        try:
            saved = json.loads(self.config_path.read_text())
            if not isinstance(saved, dict):
                raise ValueError("top level is not an object")
        except (ValueError, OSError) as e:
            logger.warning(f"Unreadable config at {self.config_path}, using defaults: {e}")
            self._backup()
            return settings

        for key, value in saved.items():
            if key not in SETTING_TYPES:
                logger.debug(f"Ignoring unknown config key {key!r}")
            elif _valid(key, value):
                settings[key] = value
            else:
                logger.warning(f"Invalid value for {key!r} in config: {value!r}, using {settings[key]!r}")
        return settings

    def _backup(self) -> None:
        try:
            shutil.copy(self.config_path, self.config_path.with_suffix('.json.bak'))
        except OSError as e:
            logger.warning(f"Could not back up config: {e}")

    def save(self) -> None:
        try:
            self.config_path.write_text(json.dumps(self.data, indent=2))
        except OSError as e:
            logger.warning(f"Could not save config: {e}")

    def set_server(self, host: str, port: int) -> None:
        """
        Point the CLI at another file host and persist it.

        Raises:
            ValueError: If the host is blank or the port is out of range
        """
        if not _valid("server_host", host) or not _valid("server_port", port):
            raise ValueError(f"Invalid server address {host}:{port}")
        self.data['server_host'] = host
        self.data['server_port'] = port
        self.save()

    def get_base_url(self) -> str:
        return f"http://{self.data['server_host']}:{self.data['server_port']}"

    def get_timeout(self) -> float:
        return self.data['timeout']

    def get_retry_config(self) -> dict:
        return {
            'max_retries': self.data['max_retries'],
            'retry_backoff_multiplier': self.data['retry_backoff_multiplier'],
        }
