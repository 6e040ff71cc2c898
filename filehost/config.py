"""Configuration settings for the file host server."""

import os
import tempfile

from common.constants import DEFAULT_SERVER_PORT


DATABASE_PATH = os.environ.get("DROP_DATABASE_PATH", "/app/data/metadata.db")

STORAGE_ROOT = os.environ.get("DROP_STORAGE_ROOT", "/app/data/files")

STAGING_DIR = os.environ.get("DROP_STAGING_DIR", tempfile.gettempdir())

ENCRYPTION_KEY = os.environ.get("DROP_ENCRYPTION_KEY", "")

EXCLUSION_KEY = os.environ.get("DROP_EXCLUSION_KEY", "")

SERVER_HOST = os.environ.get("DROP_HOST", "0.0.0.0")

SERVER_PORT = int(os.environ.get("DROP_PORT", str(DEFAULT_SERVER_PORT)))

ALLOWED_ORIGIN = os.environ.get("DROP_ALLOWED_ORIGIN", "http://localhost:5173")

SCANNER_COMMAND = os.environ.get("DROP_SCANNER_COMMAND", "clamdscan --no-summary --fdpass")

SCAN_TIMEOUT_SECONDS = float(os.environ.get("DROP_SCAN_TIMEOUT_SECONDS", "60"))

DB_TIMEOUT_SECONDS = float(os.environ.get("DROP_DB_TIMEOUT_SECONDS", "10"))
