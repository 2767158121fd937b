"""JSON file implementation of CacheStore."""

import logging
import os
import tempfile
from pathlib import Path

from motion_trainer.config import settings
from motion_trainer.entities import CacheEntryEntity
from motion_trainer.errors import PersistenceError

from .serialization import dumps_entries, loads_entries

logger = logging.getLogger(__name__)


class JsonFileCacheStore:
    """Stores the snapshot as a JSON array in a single file.

    Writes go to a temporary file in the same directory and are moved into
    place, so a crash mid-write never leaves a truncated cache file.
    """

    def __init__(self, path: str | Path | None = None) -> None:
        self._path = Path(path or settings.cache_file)

    @classmethod
    def create(cls, path: str | Path | None = None) -> "JsonFileCacheStore":
        return cls(path=path)

    @property
    def path(self) -> Path:
        return self._path

    def load(self) -> list[CacheEntryEntity]:
        if not self._path.exists():
            return []
        try:
            raw = self._path.read_text(encoding="utf-8")
        except OSError as e:
            raise PersistenceError(f"Failed to read cache file {self._path}: {e}") from e
        return loads_entries(raw)

    def save(self, entries: list[CacheEntryEntity]) -> bool:
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_path = tempfile.mkstemp(dir=self._path.parent, suffix=".tmp")
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(dumps_entries(entries))
            os.replace(tmp_path, self._path)
        except OSError as e:
            logger.error(f"Failed to write cache file {self._path}: {e}")
            return False
        return True
