"""Protocol interfaces for swappable implementations.

This package contains protocol definitions using structural typing.
Protocols enable:
- Easy swapping of implementations (Redis → JSON file, Claude → local rules, etc.)
- Unit testing with fake implementations
- Clear separation of concerns

Usage:
    ```python
    from motion_trainer.protocols import CacheStore, MotionProvider

    # Type hints work with any implementation
    store: CacheStore = RedisCacheStore()       # works
    store: CacheStore = JsonFileCacheStore(...)  # also works
    ```
"""

from .cache_store import CacheStore
from .motion_provider import MotionProvider, ProviderFactory

__all__ = [
    "CacheStore",
    "MotionProvider",
    "ProviderFactory",
]
