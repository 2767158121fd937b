from typing import Any

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from motion_trainer.api.dependencies import HandlerDep, make_lifespan
from motion_trainer.config import Settings, settings
from motion_trainer.dto import (
    CacheClearResponse,
    CacheExportItemResponse,
    CacheStatsResponse,
    ComputeMotionRequest,
    HealthCheckResponse,
    MotionResponse,
    ProviderInfoResponse,
    RegistryStatsResponse,
    UpdateCacheConfigRequest,
)

API_VERSION = "0.1.0"


def build_app(config: Settings | None = None) -> FastAPI:
    """Create the API application.

    Args:
        config: Settings for the cache and providers. Defaults to settings.

    Returns:
        Configured FastAPI application
    """
    config = config or settings
    app = FastAPI(
        title="Motion Trainer API",
        description="Vim motion suggestions computed by LLM providers, with a persistent result cache",
        version=API_VERSION,
        lifespan=make_lifespan(config),
    )

    app.add_middleware(
        CORSMiddleware,  # type: ignore[arg-type]
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.get("/")
    async def root() -> dict[str, Any]:
        """Root endpoint with API information."""
        return {
            "name": "Motion Trainer API",
            "version": API_VERSION,
            "endpoints": {
                "motion": "/motion",
                "cache": "/cache",
                "providers": "/providers",
                "health": "/health",
                "docs": "/docs",
            },
        }

    @app.get("/health", response_model=HealthCheckResponse)
    async def health(handler: HandlerDep) -> HealthCheckResponse:
        return await handler.health_check()

    @app.post("/motion", response_model=MotionResponse)
    async def compute_motion(request: ComputeMotionRequest, handler: HandlerDep) -> MotionResponse:
        """Compute the vim motion for a suggestion, serving from cache when possible."""
        return await handler.compute_motion(request)

    @app.get("/cache/stats", response_model=CacheStatsResponse)
    async def cache_stats(handler: HandlerDep) -> CacheStatsResponse:
        return await handler.get_stats()

    @app.get("/cache/export", response_model=list[CacheExportItemResponse])
    async def export_cache(handler: HandlerDep) -> list[CacheExportItemResponse]:
        return await handler.export_cache()

    @app.delete("/cache", response_model=CacheClearResponse)
    async def clear_cache(handler: HandlerDep) -> CacheClearResponse:
        return await handler.clear_cache()

    @app.delete("/cache/providers/{provider_name}", response_model=CacheClearResponse)
    async def clear_provider_cache(provider_name: str, handler: HandlerDep) -> CacheClearResponse:
        return await handler.clear_provider_cache(provider_name)

    @app.put("/cache/config", response_model=CacheStatsResponse)
    async def update_cache_config(request: UpdateCacheConfigRequest, handler: HandlerDep) -> CacheStatsResponse:
        return await handler.update_cache_config(request)

    @app.get("/providers", response_model=list[ProviderInfoResponse])
    async def list_providers(handler: HandlerDep) -> list[ProviderInfoResponse]:
        return await handler.list_providers()

    @app.get("/providers/stats", response_model=RegistryStatsResponse)
    async def provider_stats(handler: HandlerDep) -> RegistryStatsResponse:
        return await handler.provider_stats()

    return app


app = build_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "motion_trainer.api.app:app",
        host=settings.api_host,
        port=settings.api_port,
    )
