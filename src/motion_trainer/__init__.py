"""Motion Trainer - vim motion suggestions from pluggable LLM providers.

This package provides a layered architecture around two stateful components:
a persistent result cache and a provider instance registry.

Layers:
    - protocols: Interface contracts (CacheStore, MotionProvider)
    - repositories: Storage backends and provider implementations
    - services: Business logic (ResultCache, ProviderRegistry, MotionService)
    - handlers: HTTP endpoint handlers
    - dto: Data transfer objects (API contracts)
    - entities: Domain models (internal)

Usage:
    ```python
    from motion_trainer.repositories import ClaudeMotionProvider, RedisCacheStore
    from motion_trainer.services import MotionService, ProviderRegistry, ResultCache

    cache = ResultCache.create(store=RedisCacheStore.create())
    registry = ProviderRegistry()
    registry.register("claude", ClaudeMotionProvider)
    service = MotionService.create(cache=cache, registry=registry)
    ```

For HTTP API:
    ```python
    from motion_trainer.api.app import app
    ```
"""

from motion_trainer.config import get_redis_client, settings
from motion_trainer.entities import CacheEntryEntity, MotionRequest, MotionResult
from motion_trainer.errors import ConfigurationError, MotionTrainerError, PersistenceError, ProviderError
from motion_trainer.protocols import CacheStore, MotionProvider
from motion_trainer.repositories import (
    BasicMotionProvider,
    ClaudeMotionProvider,
    InMemoryCacheStore,
    JsonFileCacheStore,
    RedisCacheStore,
)
from motion_trainer.services import MotionService, ProviderRegistry, ResultCache

__all__ = [
    # Configuration
    "settings",
    "get_redis_client",
    # Errors
    "MotionTrainerError",
    "ProviderError",
    "ConfigurationError",
    "PersistenceError",
    # Protocols (interfaces)
    "CacheStore",
    "MotionProvider",
    # Services (business logic)
    "MotionService",
    "ProviderRegistry",
    "ResultCache",
    # Repositories (storage and providers)
    "RedisCacheStore",
    "JsonFileCacheStore",
    "InMemoryCacheStore",
    "ClaudeMotionProvider",
    "BasicMotionProvider",
    # Entities (domain models)
    "CacheEntryEntity",
    "MotionRequest",
    "MotionResult",
]
