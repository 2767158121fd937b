"""Cache entry domain entities."""

from dataclasses import dataclass, field
from datetime import datetime

from .motion_result import MotionResult


@dataclass(frozen=True)
class CacheEntryEntity:
    """A cached motion result with its expiry.

    Entries are never mutated: a refresh replaces the entry.

    Attributes:
        key: Request fingerprint
        result: The cached motion
        expires_at: Expiry time (Unix timestamp)
        provider_name: Copy of ``result.provider_name`` for provider-scoped clears
    """

    key: str
    result: MotionResult
    expires_at: float
    provider_name: str

    def is_expired(self, now: float) -> bool:
        return self.expires_at < now


@dataclass(frozen=True)
class CacheStats:
    """Point-in-time view of cache usage."""

    size: int
    max_size: int
    hits: int
    misses: int
    hit_rate: float
    oldest_entry: datetime | None
    newest_entry: datetime | None
    provider_breakdown: dict[str, int] = field(default_factory=dict)
    memory_usage: int = 0


@dataclass(frozen=True)
class CacheExportItem:
    """Diagnostic row describing one cache entry. Never used for lookups."""

    key: str
    provider_name: str
    confidence: float
    age_ms: int
    expires_in_ms: int
