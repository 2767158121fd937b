"""In-memory implementation of CacheStore, used when persistence is off."""

from motion_trainer.entities import CacheEntryEntity


class InMemoryCacheStore:
    """Keeps the last saved snapshot in process memory."""

    def __init__(self, entries: list[CacheEntryEntity] | None = None) -> None:
        self._entries: list[CacheEntryEntity] = list(entries or [])
        self.save_count = 0

    def load(self) -> list[CacheEntryEntity]:
        return list(self._entries)

    def save(self, entries: list[CacheEntryEntity]) -> bool:
        self._entries = list(entries)
        self.save_count += 1
        return True

    @property
    def entries(self) -> list[CacheEntryEntity]:
        return list(self._entries)
