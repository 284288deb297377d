"""Short-lived data captured before signup completes (e.g. company name).

Entries live in the shared cache with a TTL so every worker process sees
them and expiry needs no timers. Without a connected cache, writes fail with
CacheUnavailableException instead of falling back to process memory.
"""

from __future__ import annotations

import logging
from typing import Any

from tenantdesk.domain.exceptions import CacheUnavailableException
from tenantdesk.infrastructure.cache.cache_protocol import CacheProtocol
from tenantdesk.infrastructure.cache.keys import pending_signup_key

logger = logging.getLogger(__name__)


def normalize_email(email: str) -> str:
    return email.strip().lower()


class PendingSignupStore:
    """Per-email pending signup data with TTL expiry."""

    def __init__(self, cache: CacheProtocol | None, ttl_seconds: int = 300) -> None:
        self.cache = cache
        self.ttl_seconds = ttl_seconds

    def _available(self) -> bool:
        return self.cache is not None and self.cache.is_available()

    async def put(self, email: str, data: dict[str, Any]) -> None:
        """Store data for email, replacing any previous entry and restarting its TTL."""
        if not self._available():
            raise CacheUnavailableException("pending_signup.put")
        key = pending_signup_key(normalize_email(email))
        if not await self.cache.set(key, data, ttl=self.ttl_seconds):
            raise CacheUnavailableException("pending_signup.put")
        logger.debug("Pending signup stored (ttl=%ss)", self.ttl_seconds)

    async def get(self, email: str) -> dict[str, Any] | None:
        """Return the entry for email (None when missing, expired or the cache is down)."""
        if not self._available():
            return None
        return await self.cache.get(pending_signup_key(normalize_email(email)))

    async def discard(self, email: str) -> None:
        """Remove the entry once signup has used it."""
        if self._available():
            await self.cache.delete(pending_signup_key(normalize_email(email)))
