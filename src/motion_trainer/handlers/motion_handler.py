"""HTTP handlers for motion and cache operations.

Handlers convert between DTOs (API contracts) and service calls.
They handle HTTP concerns like status codes, validation, and error handling.
"""

from dataclasses import asdict

from fastapi import HTTPException, status

from motion_trainer.dto import (
    CacheClearResponse,
    CacheExportItemResponse,
    CacheStatsResponse,
    ComputeMotionRequest,
    ConfigFieldItem,
    HealthCheckResponse,
    MotionResponse,
    ProviderInfoResponse,
    RegistryStatsResponse,
    UpdateCacheConfigRequest,
)
from motion_trainer.errors import ConfigurationError, ProviderError
from motion_trainer.services import MotionService


class MotionHandler:
    """HTTP handlers for motion, cache and provider operations.

    This handler delegates business logic to MotionService
    and handles HTTP-specific concerns like:
    - Converting entities to DTOs
    - Setting appropriate status codes
    - Mapping domain errors to HTTP errors
    """

    def __init__(self, motion_service: MotionService) -> None:
        """Initialize the motion handler.

        Args:
            motion_service: The motion service for business logic (required).
        """
        self._service = motion_service

    async def compute_motion(self, request: ComputeMotionRequest) -> MotionResponse:
        """Handle POST /motion requests.

        Raises:
            HTTPException: 502 if the provider cannot compute the motion
        """
        try:
            motion, cached = await self._service.compute_motion(request.to_entity())
        except ProviderError as e:
            raise HTTPException(
                status_code=status.HTTP_502_BAD_GATEWAY,
                detail=f"Provider {e.provider} failed: {e.message}",
            ) from e

        return MotionResponse(
            keys=motion.keys,
            explanation=motion.explanation,
            confidence=motion.confidence,
            computed_at=motion.computed_at,
            provider=motion.provider_name,
            alternatives=list(motion.alternatives) if motion.alternatives is not None else None,
            cached=cached,
        )

    async def get_stats(self) -> CacheStatsResponse:
        """Handle GET /cache/stats requests."""
        stats = self._service.cache.stats()
        return CacheStatsResponse(**asdict(stats))

    async def export_cache(self) -> list[CacheExportItemResponse]:
        """Handle GET /cache/export requests."""
        return [
            CacheExportItemResponse(
                key=item.key,
                provider=item.provider_name,
                confidence=item.confidence,
                age_ms=item.age_ms,
                expires_in_ms=item.expires_in_ms,
            )
            for item in self._service.cache.export()
        ]

    async def clear_cache(self) -> CacheClearResponse:
        """Handle DELETE /cache requests."""
        count = len(self._service.cache)
        await self._service.cache.clear()
        return CacheClearResponse(success=True, cleared=count, message="Cache cleared successfully")

    async def clear_provider_cache(self, provider_name: str) -> CacheClearResponse:
        """Handle DELETE /cache/providers/{provider_name} requests."""
        count = await self._service.cache.clear_by_provider(provider_name)
        return CacheClearResponse(
            success=True,
            cleared=count,
            message=f"Cleared {count} entries for provider {provider_name}",
        )

    async def update_cache_config(self, request: UpdateCacheConfigRequest) -> CacheStatsResponse:
        """Handle PUT /cache/config requests.

        Raises:
            HTTPException: 400 if a bound is invalid
        """
        try:
            await self._service.cache.reconfigure(ttl=request.ttl, max_size=request.max_size)
        except ConfigurationError as e:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=e.message) from e
        return await self.get_stats()

    async def list_providers(self) -> list[ProviderInfoResponse]:
        """Handle GET /providers requests."""
        infos = await self._service.registry.all_info()
        return [
            ProviderInfoResponse(
                type=info.type,
                name=info.name,
                version=info.version,
                capabilities=asdict(info.capabilities),
                config_schema=[
                    ConfigFieldItem(
                        **{
                            **asdict(field),
                            "options": list(field.options) if field.options is not None else None,
                        }
                    )
                    for field in info.config_schema
                ],
            )
            for info in infos
        ]

    async def provider_stats(self) -> RegistryStatsResponse:
        """Handle GET /providers/stats requests."""
        return RegistryStatsResponse(**asdict(self._service.registry.stats()))

    async def health_check(self) -> HealthCheckResponse:
        """Handle GET /health requests."""
        is_healthy = await self._service.is_healthy()
        return HealthCheckResponse(
            status="healthy" if is_healthy else "unhealthy",
            active_provider=self._service.active_provider,
            provider_healthy=is_healthy,
            cache_size=len(self._service.cache),
        )
