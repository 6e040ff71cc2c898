"""Project-wide constants (quotas, rate limits, record lifetimes)."""

MIB: int = 1024 * 1024

CLIENT_MAX_BYTES: int = 75 * MIB  # per-client storage cap
HOST_MAX_BYTES: int = 68 * CLIENT_MAX_BYTES  # around 5 GiB, 68 clients

RATE_LIMIT_CALLS: int = 5
RATE_LIMIT_WINDOW_SECONDS: int = 60

RECORD_TTL_SECONDS: int = 24 * 3600

DEFAULT_SERVER_PORT: int = 8082
