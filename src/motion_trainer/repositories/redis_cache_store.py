"""Redis implementation of CacheStore.

The whole entry list is stored as one JSON string under a single key, so a
save is a single atomic ``SET``.
"""

import logging

import redis

from motion_trainer.config import get_redis_client, settings
from motion_trainer.entities import CacheEntryEntity
from motion_trainer.errors import PersistenceError

from .serialization import dumps_entries, loads_entries

logger = logging.getLogger(__name__)


class RedisCacheStore:
    """Redis-backed snapshot store.

    This class satisfies the CacheStore protocol through structural
    typing - no explicit inheritance needed.
    """

    def __init__(
        self,
        redis_client: redis.Redis | None = None,
        storage_key: str | None = None,
    ) -> None:
        """Initialize the Redis cache store.

        Args:
            redis_client: Redis client instance. If None, creates default.
            storage_key: Key holding the serialized entries. Defaults to settings.
        """
        self._client = redis_client or get_redis_client()
        self._storage_key = storage_key or settings.cache_storage_key

    @classmethod
    def create(cls, storage_key: str | None = None) -> "RedisCacheStore":
        """Factory method to create RedisCacheStore with defaults.

        Args:
            storage_key: Redis key for the snapshot. If None, uses settings.

        Returns:
            Configured RedisCacheStore
        """
        return cls(storage_key=storage_key)

    def load(self) -> list[CacheEntryEntity]:
        """Load the stored snapshot.

        Returns:
            Stored entries, or an empty list if the key does not exist

        Raises:
            PersistenceError: If Redis is unreachable or the data is corrupt
        """
        try:
            raw = self._client.get(self._storage_key)
        except redis.RedisError as e:
            raise PersistenceError(f"Failed to read {self._storage_key} from Redis: {e}") from e

        if raw is None:
            return []
        return loads_entries(raw)  # type: ignore[arg-type]

    def save(self, entries: list[CacheEntryEntity]) -> bool:
        """Overwrite the stored snapshot.

        Args:
            entries: The full live entry set

        Returns:
            True if written, False if Redis rejected the write
        """
        try:
            self._client.set(self._storage_key, dumps_entries(entries))
        except redis.RedisError as e:
            logger.error(f"Failed to write {self._storage_key} to Redis: {e}")
            return False
        return True

    def health_check(self) -> bool:
        """Check if Redis is accessible.

        Returns:
            True if healthy, False otherwise
        """
        try:
            return bool(self._client.ping())
        except redis.RedisError:
            return False

    @property
    def client(self) -> redis.Redis:
        """Get the Redis client."""
        return self._client
