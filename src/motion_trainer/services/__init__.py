"""Service layer for business logic.

This layer contains the core business logic and orchestration.
Services depend on protocols (interfaces), not concrete implementations,
making them testable and flexible.

Architecture:
    Handler -> MotionService -> ResultCache / ProviderRegistry
    (HTTP)  -> (Business)    -> (Cache, Providers)
"""

from .motion_service import MotionService
from .provider_registry import ProviderRegistry
from .result_cache import ResultCache

__all__ = [
    "MotionService",
    "ProviderRegistry",
    "ResultCache",
]
