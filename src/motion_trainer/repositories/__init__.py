"""Repository layer for data access.

This layer abstracts external dependencies (Redis, the filesystem, LLM APIs)
behind protocol-based interfaces. This enables:
- Easy swapping of implementations (Redis → file, Claude → local rules, etc.)
- Unit testing with fake implementations
- Clear separation of concerns

The repositories are protocol-based (structural typing), not inheritance-based.
Any class implementing the required methods will satisfy the protocol.
"""

from motion_trainer.protocols import CacheStore, MotionProvider

from .basic_motion_provider import BasicMotionProvider
from .claude_motion_provider import ClaudeMotionProvider
from .json_file_cache_store import JsonFileCacheStore
from .memory_cache_store import InMemoryCacheStore
from .redis_cache_store import RedisCacheStore

__all__ = [
    "CacheStore",
    "MotionProvider",
    "BasicMotionProvider",
    "ClaudeMotionProvider",
    "InMemoryCacheStore",
    "JsonFileCacheStore",
    "RedisCacheStore",
]
