"""Registry of provider types and their live, health-checked instances.

Instances are keyed by provider type plus a hash of their configuration, so
equal configurations share one instance. An instance is only handed out after
it has passed a health check, and a failing instance is disposed before a
replacement is built under the same key.
"""

import asyncio
import logging
from datetime import datetime
from typing import Any

from motion_trainer.config import settings
from motion_trainer.entities import ProviderInfo, ProviderInstanceRecord, RegistryStats
from motion_trainer.errors import ProviderError
from motion_trainer.protocols import MotionProvider, ProviderFactory
from motion_trainer.utils import Clock, SystemClock, make_instance_key

logger = logging.getLogger(__name__)


class ProviderRegistry:
    """Owns provider factories and reusable provider instances.

    One registry is owned by the application context and injected where it
    is needed; there is no process-wide registry.

    Example:
        ```python
        registry = ProviderRegistry()
        registry.register("claude", ClaudeMotionProvider)

        provider = await registry.create("claude", {"apiKey": "sk-ant-..."})
        motion = await provider.compute(request)

        await registry.dispose_all()
        ```
    """

    def __init__(
        self,
        clock: Clock | None = None,
        health_check_timeout: float | None = None,
    ) -> None:
        """Initialize an empty registry.

        Args:
            clock: Time source for instance ages. Defaults to the system clock.
            health_check_timeout: Seconds before a health check counts as failed.
                Defaults to settings.
        """
        self._clock = clock or SystemClock()
        self._timeout = (
            health_check_timeout if health_check_timeout is not None else settings.health_check_timeout
        )
        self._factories: dict[str, ProviderFactory] = {}
        self._instances: dict[str, ProviderInstanceRecord] = {}
        self._lock = asyncio.Lock()

    def register(self, provider_type: str, factory: ProviderFactory) -> None:
        """Make ``provider_type`` instantiable through ``factory``."""
        self._factories[provider_type] = factory
        logger.info(f"Registered provider '{provider_type}'")

    async def unregister(self, provider_type: str) -> None:
        """Remove a provider type and dispose all of its live instances."""
        async with self._lock:
            records = [r for r in self._instances.values() if r.provider_type == provider_type]
            for record in records:
                del self._instances[record.instance_key]
                await self._dispose(record.instance, provider_type)
            self._factories.pop(provider_type, None)
        logger.info(f"Unregistered provider '{provider_type}'")

    def available_types(self) -> list[str]:
        return list(self._factories)

    def is_available(self, provider_type: str) -> bool:
        return provider_type in self._factories

    async def create(self, provider_type: str, config: dict[str, Any]) -> MotionProvider:
        """Return a healthy provider instance for ``(provider_type, config)``.

        Reuses the existing instance if it still passes its health check,
        otherwise disposes it and builds a new one. Construction runs in a
        shielded task: if the caller stops waiting, the instance still ends up
        either registered or disposed.

        Args:
            provider_type: Registered provider type
            config: Provider configuration

        Returns:
            An instance that has passed its health check

        Raises:
            ProviderError: Unknown type, invalid config or failed health check
        """
        task = asyncio.ensure_future(self._create(provider_type, dict(config)))
        try:
            return await asyncio.shield(task)
        except asyncio.CancelledError:
            task.add_done_callback(_log_abandoned_create)
            raise

    async def _create(self, provider_type: str, config: dict[str, Any]) -> MotionProvider:
        instance_key = make_instance_key(provider_type, config)

        async with self._lock:
            record = self._instances.get(instance_key)
            if record is not None:
                if await self._health_check(record.instance, provider_type):
                    logger.debug(f"Reusing existing {provider_type} provider instance")
                    return record.instance
                logger.warning(f"Existing {provider_type} provider failed health check, replacing it")
                del self._instances[instance_key]
                await self._dispose(record.instance, provider_type)

            factory = self._factories.get(provider_type)
            if factory is None:
                raise ProviderError(f"Unknown provider type: {provider_type}", provider_type)

            logger.info(f"Creating new {provider_type} provider instance")
            try:
                provider = factory()
            except Exception as e:
                raise ProviderError(f"Failed to create {provider_type} provider: {e}", provider_type) from e

            try:
                await provider.initialize(config)
            except ProviderError:
                await self._dispose(provider, provider_type)
                raise
            except Exception as e:
                await self._dispose(provider, provider_type)
                raise ProviderError(f"Failed to create {provider_type} provider: {e}", provider_type) from e

            if not await self._health_check(provider, provider_type):
                await self._dispose(provider, provider_type)
                raise ProviderError(f"Provider {provider_type} failed connection test", provider_type)

            self._instances[instance_key] = ProviderInstanceRecord(
                instance_key=instance_key,
                provider_type=provider_type,
                instance=provider,
                created_at=self._clock.now(),
            )
            logger.info(f"Successfully created {provider_type} provider")
            return provider

    async def info(self, provider_type: str) -> ProviderInfo:
        """Read static metadata from a throwaway, never-registered instance.

        Raises:
            ProviderError: If the type is not registered
        """
        factory = self._factories.get(provider_type)
        if factory is None:
            raise ProviderError(f"Unknown provider type: {provider_type}", provider_type)

        try:
            provider = factory()
        except Exception as e:
            raise ProviderError(f"Failed to create {provider_type} provider: {e}", provider_type) from e

        try:
            return ProviderInfo(
                type=provider_type,
                name=provider.name,
                version=provider.version,
                capabilities=provider.capabilities,
                config_schema=provider.config_schema(),
            )
        finally:
            await self._dispose(provider, provider_type)

    async def all_info(self) -> list[ProviderInfo]:
        return [await self.info(provider_type) for provider_type in self.available_types()]

    def stats(self) -> RegistryStats:
        counts: dict[str, int] = {}
        oldest: float | None = None
        for record in self._instances.values():
            counts[record.provider_type] = counts.get(record.provider_type, 0) + 1
            if oldest is None or record.created_at < oldest:
                oldest = record.created_at

        return RegistryStats(
            total_instances=len(self._instances),
            per_type_counts=counts,
            oldest_instance=datetime.fromtimestamp(oldest) if oldest is not None else None,
        )

    async def reclaim_stale(self, max_age: float | None = None) -> int:
        """Dispose every instance older than ``max_age`` seconds.

        Returns:
            Number of instances removed
        """
        max_age = max_age if max_age is not None else settings.provider_max_age
        async with self._lock:
            now = self._clock.now()
            stale = [r for r in self._instances.values() if now - r.created_at > max_age]
            for record in stale:
                del self._instances[record.instance_key]
                await self._dispose(record.instance, record.provider_type)

        if stale:
            logger.info(f"Cleaned up {len(stale)} old provider instances")
        return len(stale)

    async def dispose_all(self) -> None:
        """Dispose every live instance and empty the registry."""
        async with self._lock:
            logger.info(f"Disposing {len(self._instances)} provider instances")
            records = list(self._instances.values())
            self._instances.clear()
            for record in records:
                await self._dispose(record.instance, record.provider_type)

    async def _health_check(self, provider: MotionProvider, provider_type: str) -> bool:
        try:
            return bool(await asyncio.wait_for(provider.test_connection(), timeout=self._timeout))
        except asyncio.TimeoutError:
            logger.warning(f"{provider_type} health check timed out after {self._timeout}s")
            return False
        except Exception as e:
            logger.warning(f"{provider_type} health check failed: {e}")
            return False

    async def _dispose(self, provider: MotionProvider, provider_type: str) -> None:
        try:
            await provider.dispose()
        except Exception as e:
            logger.error(f"Error disposing {provider_type} provider: {e}")

    def __len__(self) -> int:
        return len(self._instances)


def _log_abandoned_create(task: asyncio.Task) -> None:
    if not task.cancelled() and task.exception() is not None:
        logger.warning(f"Abandoned provider construction failed: {task.exception()}")
