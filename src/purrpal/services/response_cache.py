"""In-memory response cache with TTL expiry.

Entries are content-addressed: the key is the SHA-256 digest of the
normalized message, so identical questions from different sessions share
an entry.
"""

import hashlib
import re
import time
from collections.abc import Callable
from typing import Any

from purrpal.entities import CacheEntryEntity
from purrpal.logging_config import get_logger

logger = get_logger(__name__)

_WHITESPACE = re.compile(r"\s+")


def normalize_text(text: str) -> str:
    """Lowercase, collapse whitespace and trim."""
    return _WHITESPACE.sub(" ", text.lower()).strip()


class ResponseCache:
    """TTL cache with lazy expiry and a soft size cap.

    Expired entries are evicted when read. Once the store grows past
    ``max_entries`` a sweep removes every expired entry; nothing is evicted
    on recency.

    Example:
        ```python
        cache = ResponseCache(ttl_seconds=1800)
        key = cache.key("Kucing saya bersin")
        cache.put(key, response)
        cache.get(key)  # response
        ```
    """

    def __init__(
        self,
        ttl_seconds: float,
        max_entries: int = 1000,
        enabled: bool = True,
        clock: Callable[[], float] = time.time,
    ) -> None:
        """Initialize the cache.

        Args:
            ttl_seconds: Maximum entry age before it is treated as absent.
            max_entries: Soft cap that triggers a TTL sweep after insertion.
            enabled: When False, get() always misses and put() does nothing.
            clock: Time source in seconds.
        """
        self._ttl = ttl_seconds
        self._max_entries = max_entries
        self._enabled = enabled
        self._clock = clock
        self._entries: dict[str, CacheEntryEntity] = {}

    @staticmethod
    def key(text: str) -> str:
        """Derive the cache key for a message."""
        return hashlib.sha256(normalize_text(text).encode("utf-8")).hexdigest()

    def _is_expired(self, entry: CacheEntryEntity, now: float) -> bool:
        # An entry exactly ttl seconds old is still served
        return now - entry.stored_at > self._ttl

    def get(self, key: str) -> Any | None:
        """Return the cached value, or None if missing, expired or disabled."""
        if not self._enabled:
            return None

        entry = self._entries.get(key)
        if entry is None:
            return None

        if self._is_expired(entry, self._clock()):
            del self._entries[key]
            return None

        return entry.value

    def put(self, key: str, value: Any) -> None:
        """Store a value, sweeping expired entries once over the soft cap."""
        if not self._enabled:
            return

        self._entries[key] = CacheEntryEntity(value=value, stored_at=self._clock())

        if len(self._entries) > self._max_entries:
            removed = self.cleanup_expired()
            logger.debug(f"Cache over soft cap, swept {removed} expired entries")

    def cleanup_expired(self) -> int:
        """Remove all expired entries, return count removed."""
        now = self._clock()
        expired = [key for key, entry in self._entries.items() if self._is_expired(entry, now)]
        for key in expired:
            del self._entries[key]
        return len(expired)

    def clear(self) -> None:
        """Remove every entry."""
        self._entries.clear()

    @property
    def size(self) -> int:
        """Number of stored entries (expired ones included until evicted)."""
        return len(self._entries)

    @property
    def enabled(self) -> bool:
        return self._enabled
