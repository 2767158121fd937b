"""Domain entities for internal representation.

These are pure dataclasses (frozen) used internally by services
and repositories. They are NOT used for API contracts - use DTOs
from the dto package for that.

Entities should have:
- No JSON serialization logic
- No Pydantic validation
- No external dependencies
"""

from .cache_entry import CacheEntryEntity, CacheExportItem, CacheStats
from .motion_request import CodeContext, MotionRequest, Position, SuggestionContext
from .motion_result import MotionResult
from .provider import ConfigField, ProviderCapabilities, ProviderInfo, ProviderInstanceRecord, RegistryStats

__all__ = [
    "CacheEntryEntity",
    "CacheExportItem",
    "CacheStats",
    "CodeContext",
    "ConfigField",
    "MotionRequest",
    "MotionResult",
    "Position",
    "ProviderCapabilities",
    "ProviderInfo",
    "ProviderInstanceRecord",
    "RegistryStats",
    "SuggestionContext",
]
