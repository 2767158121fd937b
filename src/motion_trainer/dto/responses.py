"""Response DTOs for API endpoints."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field


class MotionResponse(BaseModel):
    """Response DTO for a computed motion."""

    keys: str = Field(..., description="Vim key sequence")
    explanation: str = Field(..., description="Human-readable explanation")
    confidence: float = Field(..., ge=0.0, le=1.0)
    computed_at: float = Field(..., description="When the motion was computed (Unix timestamp)")
    provider: str = Field(..., description="Provider that computed the motion")
    alternatives: list[str] | None = None
    cached: bool = Field(..., description="Whether the motion was served from cache")


class CacheStatsResponse(BaseModel):
    """Response DTO for cache statistics."""

    size: int = Field(..., ge=0)
    max_size: int = Field(..., ge=1)
    hits: int = Field(..., ge=0)
    misses: int = Field(..., ge=0)
    hit_rate: float = Field(..., description="Hit rate in percent", ge=0.0, le=100.0)
    oldest_entry: datetime | None = None
    newest_entry: datetime | None = None
    provider_breakdown: dict[str, int] = Field(default_factory=dict)
    memory_usage: int = Field(..., description="Estimated memory footprint in bytes", ge=0)


class CacheExportItemResponse(BaseModel):
    """One diagnostic row of the cache export."""

    key: str
    provider: str
    confidence: float
    age_ms: int
    expires_in_ms: int


class CacheClearResponse(BaseModel):
    """Response DTO for cache clear operations."""

    success: bool
    cleared: int = Field(..., description="Number of entries removed")
    message: str


class ConfigFieldItem(BaseModel):
    """One accepted provider config field."""

    name: str
    type: str
    required: bool
    default: Any = None
    description: str = ""
    secure: bool = False
    options: list[str] | None = None
    minimum: float | None = None
    maximum: float | None = None


class ProviderInfoResponse(BaseModel):
    """Static metadata of a provider type."""

    type: str
    name: str
    version: str
    capabilities: dict[str, Any]
    config_schema: list[ConfigFieldItem]


class RegistryStatsResponse(BaseModel):
    """Response DTO for provider instance statistics."""

    total_instances: int = Field(..., ge=0)
    per_type_counts: dict[str, int] = Field(default_factory=dict)
    oldest_instance: datetime | None = None


class HealthCheckResponse(BaseModel):
    """Response DTO for health check."""

    status: str = Field(..., description="Health status: 'healthy' or 'unhealthy'")
    active_provider: str
    provider_healthy: bool
    cache_size: int
