"""Data Transfer Objects for API contracts.

These Pydantic models define the external API contract.
They are used for request/response validation and serialization.

Internal domain logic should use entities from the entities package.
"""

from .requests import (
    CodeContextItem,
    ComputeMotionRequest,
    PositionItem,
    SuggestionContextItem,
    UpdateCacheConfigRequest,
)
from .responses import (
    CacheClearResponse,
    CacheExportItemResponse,
    CacheStatsResponse,
    ConfigFieldItem,
    HealthCheckResponse,
    MotionResponse,
    ProviderInfoResponse,
    RegistryStatsResponse,
)

__all__ = [
    "PositionItem",
    "SuggestionContextItem",
    "CodeContextItem",
    "ComputeMotionRequest",
    "UpdateCacheConfigRequest",
    "MotionResponse",
    "CacheStatsResponse",
    "CacheExportItemResponse",
    "CacheClearResponse",
    "ConfigFieldItem",
    "ProviderInfoResponse",
    "RegistryStatsResponse",
    "HealthCheckResponse",
]
