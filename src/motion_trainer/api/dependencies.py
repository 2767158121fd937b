"""Dependency injection configuration for FastAPI app.

Uses FastAPI's app.state pattern for storing service instances.

Pattern:
    - Services stored in app.state during lifespan
    - Dependency functions retrieve from request.app.state
    - Clean separation, no global mutable state
"""

import asyncio
import logging
from collections.abc import AsyncIterator, Callable
from contextlib import AbstractAsyncContextManager, asynccontextmanager
from typing import Annotated

from fastapi import Depends, FastAPI, Request

from motion_trainer.config import Settings
from motion_trainer.handlers import MotionHandler
from motion_trainer.protocols import CacheStore
from motion_trainer.repositories import (
    BasicMotionProvider,
    ClaudeMotionProvider,
    InMemoryCacheStore,
    JsonFileCacheStore,
    RedisCacheStore,
)
from motion_trainer.services import MotionService, ProviderRegistry, ResultCache

logger = logging.getLogger(__name__)


def get_motion_service(request: Request) -> MotionService:
    """Dependency injection for MotionService from app.state.

    Raises:
        RuntimeError: If service is not initialized
    """
    service = getattr(request.app.state, "motion_service", None)
    if service is None:
        raise RuntimeError("MotionService not initialized. Check lifespan setup.")
    return service


def get_handler(request: Request) -> MotionHandler:
    """Dependency injection for MotionHandler from app.state.

    Raises:
        RuntimeError: If handler is not initialized
    """
    handler = getattr(request.app.state, "motion_handler", None)
    if handler is None:
        raise RuntimeError("MotionHandler not initialized. Check lifespan setup.")
    return handler


def build_store(config: Settings) -> CacheStore:
    """Create the persistence backend selected by ``config.cache_backend``."""
    if config.cache_backend == "redis":
        return RedisCacheStore.create(storage_key=config.cache_storage_key)
    if config.cache_backend == "file":
        return JsonFileCacheStore.create(path=config.cache_file)
    return InMemoryCacheStore()


def build_registry(config: Settings) -> ProviderRegistry:
    """Create a registry with every built-in provider type registered."""
    registry = ProviderRegistry(health_check_timeout=config.health_check_timeout)
    registry.register("claude", ClaudeMotionProvider)
    registry.register("basic", BasicMotionProvider)
    return registry


async def _reclaim_loop(registry: ProviderRegistry, max_age: float) -> None:
    while True:
        await asyncio.sleep(max_age)
        await registry.reclaim_stale(max_age)


def make_lifespan(config: Settings) -> Callable[[FastAPI], AbstractAsyncContextManager[None]]:
    """Build the lifespan context manager for an app using ``config``."""

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        """Initialize all layers and store them in app.state.

        1. Store + ResultCache (loads persisted motions, starts the sweep)
        2. ProviderRegistry (built-in provider types)
        3. MotionService and MotionHandler
        """
        logging.basicConfig(level=config.log_level)

        cache = ResultCache.create(
            store=build_store(config),
            ttl=config.cache_ttl,
            max_size=config.cache_max_size,
        )
        cache.start_cleanup(config.cache_cleanup_interval)

        registry = build_registry(config)
        motion_service = MotionService.create(cache=cache, registry=registry, config=config)
        reclaim_task = asyncio.create_task(_reclaim_loop(registry, config.provider_max_age))

        app.state.motion_service = motion_service
        app.state.motion_handler = MotionHandler(motion_service=motion_service)
        app.state.cache = cache
        app.state.registry = registry

        logger.info(f"Motion service initialized (provider={config.active_provider}, backend={config.cache_backend})")

        yield

        reclaim_task.cancel()
        try:
            await reclaim_task
        except asyncio.CancelledError:
            pass
        await cache.close()
        await registry.dispose_all()

        del app.state.motion_handler
        del app.state.motion_service
        del app.state.cache
        del app.state.registry
        logger.info("Motion service shut down")

    return lifespan


# Type aliases for cleaner dependency injection
HandlerDep = Annotated[MotionHandler, Depends(get_handler)]
ServiceDep = Annotated[MotionService, Depends(get_motion_service)]
