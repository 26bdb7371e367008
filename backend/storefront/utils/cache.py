"""In-memory TTL cache fronting the external product catalog."""

import asyncio
import logging
import time
from dataclasses import dataclass
from typing import Any, Callable, Optional

logger = logging.getLogger(__name__)


@dataclass
class CacheEntry:
    """Cached value with its absolute expiry (clock seconds)."""

    value: Any
    expiry: float


class TTLCache:
    """Key/value store with per-entry expiry and a periodic background sweep.

    Losing or racing on entries only costs an extra upstream round trip, so
    no locking is done. Expired entries are evicted lazily on read and
    eagerly by the sweep task started with :meth:`start`.
    """

    def __init__(
        self,
        default_ttl: float = 300,
        sweep_interval: float = 60,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.default_ttl = default_ttl
        self.sweep_interval = sweep_interval
        self._clock = clock
        self._entries: dict[str, CacheEntry] = {}
        self._sweeper: Optional[asyncio.Task] = None

    def get(self, key: str) -> Optional[Any]:
        """Return the cached value, or None on miss or expiry."""
        entry = self._entries.get(key)
        if entry is None:
            return None

        if self._clock() > entry.expiry:
            del self._entries[key]
            return None

        return entry.value

    def set(self, key: str, value: Any, ttl: Optional[float] = None) -> None:
        """Store a value, replacing any existing entry."""
        expiry = self._clock() + (ttl if ttl else self.default_ttl)
        self._entries[key] = CacheEntry(value=value, expiry=expiry)

    def has(self, key: str) -> bool:
        """Check if key exists and is not expired."""
        return self.get(key) is not None

    def delete(self, key: str) -> bool:
        """Delete a specific key."""
        return self._entries.pop(key, None) is not None

    def clear(self) -> None:
        """Clear all cache entries."""
        self._entries.clear()

    def clear_pattern(self, pattern: str) -> int:
        """Clear entries whose key contains ``pattern``; return the count."""
        matching = [key for key in self._entries if pattern in key]
        for key in matching:
            del self._entries[key]
        return len(matching)

    def stats(self) -> dict[str, Any]:
        """Get cache statistics."""
        return {"size": len(self._entries), "keys": list(self._entries)}

    def purge_expired(self) -> int:
        """Evict every expired entry; return the count."""
        now = self._clock()
        expired = [key for key, entry in self._entries.items() if now > entry.expiry]
        for key in expired:
            del self._entries[key]
        return len(expired)

    async def _sweep(self) -> None:
        while True:
            await asyncio.sleep(self.sweep_interval)
            removed = self.purge_expired()
            if removed:
                logger.debug("Cache sweep evicted %d entries", removed)

    def start(self) -> None:
        """Start the background sweep on the running event loop."""
        if self._sweeper is None or self._sweeper.done():
            self._sweeper = asyncio.create_task(self._sweep())
            logger.info("Cache sweep started (interval=%ss)", self.sweep_interval)

    async def stop(self) -> None:
        """Cancel the background sweep."""
        if self._sweeper is None:
            return
        self._sweeper.cancel()
        try:
            await self._sweeper
        except asyncio.CancelledError:
            pass
        self._sweeper = None
        logger.info("Cache sweep stopped")
