"""Cache storage protocol.

Defines the durable storage boundary for the result cache. The cache keeps
its live map in memory and hands the whole entry list to the store after
every mutation, so a store only needs to load and save a snapshot.

Implementations can include:
- Redis (default)
- A JSON file on disk
- In-memory (tests, persistence disabled)
"""

from typing import Protocol, runtime_checkable

from motion_trainer.entities import CacheEntryEntity


@runtime_checkable
class CacheStore(Protocol):
    """Protocol for cache persistence backends.

    Similar to Go's interface pattern - any type that implements these
    methods satisfies the protocol, no explicit inheritance needed.
    """

    def load(self) -> list[CacheEntryEntity]:
        """Load the previously saved entries.

        Returns:
            Entries in saved order (empty if nothing was saved)

        Raises:
            PersistenceError: If the stored data is unreadable or corrupt
        """
        ...

    def save(self, entries: list[CacheEntryEntity]) -> bool:
        """Replace the stored snapshot with ``entries``.

        Args:
            entries: The full live entry set

        Returns:
            True if the snapshot was written, False otherwise
        """
        ...
