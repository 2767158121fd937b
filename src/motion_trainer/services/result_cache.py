"""Result cache with TTL expiry, bounded eviction and best-effort persistence.

The live map is held in memory and is the source of truth. After every
mutation a background save writes the full map to the configured CacheStore.
Saves are serialized and take their snapshot when they run, so the most
recent state always wins. A failed save is logged and the next mutation's
save retries it.
"""

import asyncio
import json
import logging
import math
from dataclasses import asdict
from datetime import datetime

from motion_trainer.config import settings
from motion_trainer.entities import CacheEntryEntity, CacheExportItem, CacheStats, MotionResult
from motion_trainer.errors import ConfigurationError, PersistenceError
from motion_trainer.protocols import CacheStore
from motion_trainer.utils import Clock, SystemClock

logger = logging.getLogger(__name__)

EVICTION_FRACTION = 0.25
EXPORT_KEY_LENGTH = 50


class ResultCache:
    """Bounded, TTL-expiring map from request fingerprint to motion result.

    Mutating operations are serialized by an ``asyncio.Lock``. ``has``,
    ``stats`` and ``export`` are lock-free reads of the current map.

    Example:
        ```python
        cache = ResultCache.create(store=RedisCacheStore.create(), ttl=3600)
        await cache.set(key, motion)
        motion = await cache.get(key)
        await cache.close()
        ```
    """

    def __init__(
        self,
        store: CacheStore,
        ttl: float | None = None,
        max_size: int | None = None,
        clock: Clock | None = None,
    ) -> None:
        """Initialize an empty cache. Use ``create`` to also load persisted entries.

        Args:
            store: Durable storage backend (required).
            ttl: Entry time-to-live in seconds. Defaults to settings.
            max_size: Maximum number of entries. Defaults to settings.
            clock: Time source. Defaults to the system clock.

        Raises:
            ConfigurationError: If ``ttl`` or ``max_size`` is not positive
        """
        self._store = store
        self._ttl = _validate_ttl(ttl if ttl is not None else settings.cache_ttl)
        self._max_size = _validate_max_size(max_size if max_size is not None else settings.cache_max_size)
        self._clock = clock or SystemClock()

        self._entries: dict[str, CacheEntryEntity] = {}
        self._hits = 0
        self._misses = 0

        self._lock = asyncio.Lock()
        self._save_lock = asyncio.Lock()
        self._pending_saves: set[asyncio.Task] = set()
        self._cleanup_task: asyncio.Task | None = None

    @classmethod
    def create(
        cls,
        store: CacheStore,
        ttl: float | None = None,
        max_size: int | None = None,
        clock: Clock | None = None,
    ) -> "ResultCache":
        """Factory method: build the cache and load previously persisted entries."""
        cache = cls(store=store, ttl=ttl, max_size=max_size, clock=clock)
        cache.load()
        return cache

    def load(self) -> int:
        """Replace the map with live entries from the store.

        Entries already expired are discarded. A load failure is logged and
        leaves the cache empty.

        Returns:
            Number of entries loaded
        """
        self._entries.clear()
        try:
            stored = self._store.load()
        except Exception as e:
            logger.error(f"Failed to load motion cache, starting empty: {e}")
            return 0

        now = self._clock.now()
        discarded = 0
        for entry in stored:
            if entry.is_expired(now):
                discarded += 1
                continue
            self._entries[entry.key] = entry

        logger.info(f"Loaded {len(self._entries)} cached motions, skipped {discarded} expired entries")
        return len(self._entries)

    async def get(self, key: str) -> MotionResult | None:
        """Look up a motion.

        Expired entries are removed on access and count as a miss.

        Args:
            key: Request fingerprint

        Returns:
            The cached motion, or None on a miss
        """
        async with self._lock:
            entry = self._entries.get(key)

            if entry is None:
                self._misses += 1
                return None

            if entry.is_expired(self._clock.now()):
                del self._entries[key]
                self._misses += 1
                self._schedule_save()
                return None

            self._hits += 1
            logger.debug(f"Cache hit for motion ({self.hit_rate:.1f}% hit rate)")
            return entry.result

    async def set(self, key: str, result: MotionResult, ttl: float | None = None) -> None:
        """Store a motion, evicting first if the cache is full.

        Args:
            key: Request fingerprint
            result: Motion to cache
            ttl: Override the configured TTL for this entry (seconds)
        """
        ttl = _validate_ttl(ttl) if ttl is not None else self._ttl

        async with self._lock:
            if len(self._entries) >= self._max_size:
                self._evict(self._max_size - 1)

            # Refresh is delete + reinsert, never an in-place update
            self._entries.pop(key, None)
            self._entries[key] = CacheEntryEntity(
                key=key,
                result=result,
                expires_at=self._clock.now() + ttl,
                provider_name=result.provider_name,
            )
            self._schedule_save()

        logger.debug(f"Cached motion from {result.provider_name} (cache size: {len(self._entries)})")

    def has(self, key: str) -> bool:
        """True if ``key`` is present and not expired. Does not touch counters."""
        entry = self._entries.get(key)
        return entry is not None and not entry.is_expired(self._clock.now())

    async def delete(self, key: str) -> bool:
        """Remove a single entry.

        Returns:
            True if an entry was removed
        """
        async with self._lock:
            if self._entries.pop(key, None) is None:
                return False
            self._schedule_save()
            return True

    async def clear(self) -> None:
        """Remove every entry and reset hit/miss counters."""
        async with self._lock:
            self._entries.clear()
            self._hits = 0
            self._misses = 0
            self._schedule_save()
        logger.info("Motion cache cleared")

    async def clear_by_provider(self, provider_name: str) -> int:
        """Remove every entry computed by ``provider_name``.

        Returns:
            Number of entries removed
        """
        async with self._lock:
            keys = [key for key, entry in self._entries.items() if entry.provider_name == provider_name]
            for key in keys:
                del self._entries[key]
            if keys:
                self._schedule_save()

        if keys:
            logger.info(f"Cleared {len(keys)} cache entries for provider {provider_name}")
        return len(keys)

    async def cleanup_expired(self) -> int:
        """Remove every expired entry without touching hit/miss counters.

        Returns:
            Number of entries removed
        """
        async with self._lock:
            now = self._clock.now()
            keys = [key for key, entry in self._entries.items() if entry.is_expired(now)]
            for key in keys:
                del self._entries[key]

        if keys:
            logger.info(f"Cleaned up {len(keys)} expired cache entries")
            self._schedule_save()
        return len(keys)

    async def reconfigure(self, ttl: float | None = None, max_size: int | None = None) -> None:
        """Update TTL and/or max size.

        A new TTL applies to future insertions only. A smaller max size evicts
        immediately down to the new bound.

        Raises:
            ConfigurationError: If a value is not positive
        """
        if ttl is not None:
            ttl = _validate_ttl(ttl)
        if max_size is not None:
            max_size = _validate_max_size(max_size)

        async with self._lock:
            if ttl is not None:
                self._ttl = ttl
            if max_size is not None:
                self._max_size = max_size
                if len(self._entries) > max_size:
                    self._evict(max_size)
                    self._schedule_save()

        logger.info(f"Cache config updated - TTL: {self._ttl}s, Max Size: {self._max_size}")

    def stats(self) -> CacheStats:
        """Compute usage statistics in a single pass over the entries."""
        oldest: float | None = None
        newest: float | None = None
        breakdown: dict[str, int] = {}
        memory_usage = 0

        for entry in self._entries.values():
            computed_at = entry.result.computed_at
            if oldest is None or computed_at < oldest:
                oldest = computed_at
            if newest is None or computed_at > newest:
                newest = computed_at

            breakdown[entry.provider_name] = breakdown.get(entry.provider_name, 0) + 1
            # Rough estimate: two bytes per character of the JSON encoding
            memory_usage += len(json.dumps(asdict(entry))) * 2

        return CacheStats(
            size=len(self._entries),
            max_size=self._max_size,
            hits=self._hits,
            misses=self._misses,
            hit_rate=self.hit_rate,
            oldest_entry=datetime.fromtimestamp(oldest) if oldest is not None else None,
            newest_entry=datetime.fromtimestamp(newest) if newest is not None else None,
            provider_breakdown=breakdown,
            memory_usage=memory_usage,
        )

    def export(self) -> list[CacheExportItem]:
        """Diagnostic listing of entries, oldest first. Long keys are truncated."""
        now = self._clock.now()
        items = [
            CacheExportItem(
                key=key[:EXPORT_KEY_LENGTH] + ("..." if len(key) > EXPORT_KEY_LENGTH else ""),
                provider_name=entry.provider_name,
                confidence=entry.result.confidence,
                age_ms=int((now - entry.result.computed_at) * 1000),
                expires_in_ms=int((entry.expires_at - now) * 1000),
            )
            for key, entry in self._entries.items()
        ]
        items.sort(key=lambda item: item.age_ms, reverse=True)
        return items

    def start_cleanup(self, interval: float | None = None) -> None:
        """Start the periodic expired-entry sweep on the running event loop."""
        if self._cleanup_task is not None and not self._cleanup_task.done():
            return
        interval = interval if interval is not None else settings.cache_cleanup_interval
        self._cleanup_task = asyncio.create_task(self._cleanup_loop(interval))

    async def stop_cleanup(self) -> None:
        if self._cleanup_task is None:
            return
        self._cleanup_task.cancel()
        try:
            await self._cleanup_task
        except asyncio.CancelledError:
            pass
        self._cleanup_task = None

    async def flush(self) -> None:
        """Wait for every scheduled save to finish."""
        while self._pending_saves:
            await asyncio.gather(*list(self._pending_saves), return_exceptions=True)

    async def close(self) -> None:
        """Stop the sweep, drain pending saves and write a final snapshot."""
        await self.stop_cleanup()
        await self.flush()
        await self._save()

    async def _cleanup_loop(self, interval: float) -> None:
        while True:
            await asyncio.sleep(interval)
            try:
                await self.cleanup_expired()
            except Exception as e:
                logger.error(f"Cache cleanup failed: {e}")

    def _evict(self, bound: int) -> int:
        """Drop the soonest-to-expire entries. Caller holds the lock.

        Removes a quarter of the entries, or as many as needed to get down to
        ``bound``, whichever is larger.
        """
        count = len(self._entries)
        if count == 0:
            return 0

        to_remove = max(math.floor(count * EVICTION_FRACTION), count - bound, 1)
        victims = sorted(self._entries.values(), key=lambda entry: entry.expires_at)[:to_remove]
        for entry in victims:
            del self._entries[entry.key]

        logger.info(f"Evicted {len(victims)} old cache entries")
        return len(victims)

    def _schedule_save(self) -> None:
        task = asyncio.create_task(self._save())
        self._pending_saves.add(task)
        task.add_done_callback(self._pending_saves.discard)

    async def _save(self) -> bool:
        async with self._save_lock:
            snapshot = list(self._entries.values())
            try:
                saved = await asyncio.to_thread(self._store.save, snapshot)
                if not saved:
                    raise PersistenceError("store rejected the write")
            except Exception as e:
                logger.error(f"Failed to save motion cache ({len(snapshot)} entries): {e}")
                return False
            return True

    @property
    def hit_rate(self) -> float:
        total = self._hits + self._misses
        return 0.0 if total == 0 else self._hits / total * 100

    @property
    def ttl(self) -> float:
        return self._ttl

    @property
    def max_size(self) -> int:
        return self._max_size

    def __len__(self) -> int:
        return len(self._entries)


def _validate_ttl(ttl: float) -> float:
    if not math.isfinite(ttl) or ttl <= 0:
        raise ConfigurationError(f"Cache TTL must be positive, got {ttl}", "ttl")
    return ttl


def _validate_max_size(max_size: int) -> int:
    if max_size <= 0:
        raise ConfigurationError(f"Cache max size must be positive, got {max_size}", "max_size")
    return max_size
