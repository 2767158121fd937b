"""Motion service for core business logic.

This service composes the result cache and the provider registry:
look up the request fingerprint, and on a miss obtain a healthy provider,
compute the motion and cache it.
"""

import logging
from typing import Any

from motion_trainer.config import Settings, settings
from motion_trainer.entities import MotionRequest, MotionResult
from motion_trainer.errors import ConfigurationError
from motion_trainer.utils import make_request_key

from .provider_registry import ProviderRegistry
from .result_cache import ResultCache

logger = logging.getLogger(__name__)


class MotionService:
    """Core motion orchestration service.

    Example:
        ```python
        cache = ResultCache.create(store=RedisCacheStore.create())
        registry = ProviderRegistry()
        registry.register("claude", ClaudeMotionProvider)

        service = MotionService.create(cache=cache, registry=registry)
        motion = await service.compute_motion(request)
        ```
    """

    def __init__(
        self,
        cache: ResultCache,
        registry: ProviderRegistry,
        active_provider: str,
        provider_configs: dict[str, dict[str, Any]],
        cache_enabled: bool = True,
    ) -> None:
        """Initialize the motion service.

        Args:
            cache: Result cache (required).
            registry: Provider registry (required).
            active_provider: Provider type used for computations.
            provider_configs: Config blob per provider type.
            cache_enabled: When False, every request goes to the provider.
        """
        self._cache = cache
        self._registry = registry
        self._active_provider = active_provider
        self._provider_configs = dict(provider_configs)
        self._cache_enabled = cache_enabled

    @classmethod
    def create(
        cls,
        cache: ResultCache,
        registry: ProviderRegistry,
        config: Settings | None = None,
    ) -> "MotionService":
        """Factory method wiring provider settings from ``config``.

        Args:
            cache: Result cache (required).
            registry: Provider registry (required).
            config: Settings to read provider configuration from. Defaults to settings.

        Returns:
            Configured MotionService
        """
        config = config or settings
        return cls(
            cache=cache,
            registry=registry,
            active_provider=config.active_provider,
            provider_configs={
                provider_type: config.provider_config(provider_type)
                for provider_type in registry.available_types()
            },
            cache_enabled=config.cache_enabled,
        )

    async def compute_motion(self, request: MotionRequest) -> tuple[MotionResult, bool]:
        """Compute the motion for ``request``, serving from cache when possible.

        Args:
            request: The motion request

        Returns:
            Tuple of (motion, cached) where cached is True on a cache hit

        Raises:
            ProviderError: If no healthy provider can compute the motion
        """
        key = make_request_key(request)

        if self._cache_enabled:
            cached = await self._cache.get(key)
            if cached is not None:
                return cached, True

        provider = await self._registry.create(
            self._active_provider,
            self._provider_configs.get(self._active_provider, {}),
        )
        motion = await provider.compute(request)

        if self._cache_enabled:
            await self._cache.set(key, motion)
        return motion, False

    async def switch_provider(self, provider_type: str, clear_cache: bool = False) -> None:
        """Make ``provider_type`` the active provider.

        Args:
            provider_type: A registered provider type
            clear_cache: Also drop cached motions of the previous provider

        Raises:
            ConfigurationError: If the type is not registered
        """
        if not self._registry.is_available(provider_type):
            raise ConfigurationError(f"Unknown provider type: {provider_type}", "active_provider")

        previous = self._active_provider
        self._active_provider = provider_type
        logger.info(f"Active provider changed from {previous} to {provider_type}")

        if clear_cache and previous != provider_type:
            await self._cache.clear_by_provider(previous)

    def update_provider_config(self, provider_type: str, config: dict[str, Any]) -> None:
        """Replace the config used for ``provider_type``.

        The registry keys instances by config, so the next computation picks
        up (or builds) the instance for the new config.
        """
        self._provider_configs[provider_type] = dict(config)

    async def maintain(self, max_age: float | None = None) -> int:
        """Reclaim provider instances older than ``max_age`` seconds."""
        return await self._registry.reclaim_stale(max_age)

    async def is_healthy(self) -> bool:
        """True if the active provider can be created and passes its health check."""
        try:
            await self._registry.create(
                self._active_provider,
                self._provider_configs.get(self._active_provider, {}),
            )
        except Exception as e:
            logger.warning(f"Active provider {self._active_provider} is unhealthy: {e}")
            return False
        return True

    @property
    def active_provider(self) -> str:
        return self._active_provider

    @property
    def cache_enabled(self) -> bool:
        return self._cache_enabled

    @property
    def cache(self) -> ResultCache:
        """Get the underlying result cache."""
        return self._cache

    @property
    def registry(self) -> ProviderRegistry:
        """Get the underlying provider registry."""
        return self._registry
