"""Fixed-window call limiter keyed by client identity."""

from datetime import datetime
from typing import Callable, Optional

from common.constants import RATE_LIMIT_CALLS, RATE_LIMIT_WINDOW_SECONDS
from common.logging_config import get_logger, short_identity
from filehost.exceptions import RateLimitedError
from filehost.repositories.client_repository import ClientRepository
from filehost.types import ClientRecord
from filehost.utils import utc_now

logger = get_logger(__name__)


class RateLimiter:
    """
    Counts gated calls per client within a fixed window.

    State lives on the ClientRecord, so identities that have never stored
    a file are not limited.
    """

    def __init__(
        self,
        client_repo: ClientRepository,
        limit: int = RATE_LIMIT_CALLS,
        window_seconds: int = RATE_LIMIT_WINDOW_SECONDS,
        clock: Callable[[], datetime] = utc_now,
    ):
        self.client_repo = client_repo
        self.limit = limit
        self.window_seconds = window_seconds
        self.clock = clock

    def check(self, identity: str) -> Optional[ClientRecord]:
        """
        Count one call for the client or reject it.

        Returns:
            The client's record with updated counters, or None if the
            client has no record yet

        Raises:
            RateLimitedError: If the client already used its calls for this window
        """
        record = self.client_repo.get(identity)
        if record is None:
            return None

        now = self.clock()
        if (now - record.last_call_at).total_seconds() > self.window_seconds:
            self.client_repo.reset_call_window(identity, now)

        if self.client_repo.increment_call_count(identity, self.limit, now):
            return self.client_repo.get(identity)

        current = self.client_repo.get(identity)
        if current is None:
            return None
        logger.warning(
            f"Rate limit hit [identity={short_identity(identity)}]: "
            f"{current.call_count} calls since {current.last_call_at.isoformat()}"
        )
        raise RateLimitedError("Too many requests. Please try again in a minute.")
