import os
from dataclasses import dataclass
from functools import lru_cache
from typing import Any

import redis
from dotenv import load_dotenv

from motion_trainer.errors import ConfigurationError

load_dotenv()

CACHE_BACKENDS = ("redis", "file", "memory")


@dataclass(frozen=True)
class Settings:
    """Application settings loaded from environment variables."""

    # Cache
    cache_enabled: bool = os.getenv("MOTION_CACHE_ENABLED", "true").lower() == "true"
    cache_ttl: int = int(os.getenv("MOTION_CACHE_TTL", "86400"))  # 24 hours default
    cache_max_size: int = int(os.getenv("MOTION_CACHE_MAX_SIZE", "1000"))
    cache_cleanup_interval: int = int(os.getenv("MOTION_CACHE_CLEANUP_INTERVAL", "600"))  # 10 minutes
    cache_backend: str = os.getenv("MOTION_CACHE_BACKEND", "redis")
    cache_file: str = os.getenv("MOTION_CACHE_FILE", os.path.expanduser("~/.motion_trainer/cache.json"))
    cache_storage_key: str = os.getenv("MOTION_CACHE_STORAGE_KEY", "motion_trainer:motion_cache")

    # Redis
    redis_url: str = os.getenv("REDIS_URL", "redis://localhost:6379")
    redis_password: str | None = os.getenv("REDIS_PASSWORD")

    # Providers
    active_provider: str = os.getenv("ACTIVE_PROVIDER", "claude")
    claude_api_key: str = os.getenv("CLAUDE_API_KEY", "")
    claude_model: str = os.getenv("CLAUDE_MODEL", "claude-3-5-sonnet-20241022")
    claude_max_tokens: int = int(os.getenv("CLAUDE_MAX_TOKENS", "150"))
    provider_max_age: int = int(os.getenv("PROVIDER_MAX_AGE", "3600"))  # 1 hour
    health_check_timeout: float = float(os.getenv("PROVIDER_HEALTH_CHECK_TIMEOUT", "10"))

    # API
    api_host: str = os.getenv("API_HOST", "0.0.0.0")
    api_port: int = int(os.getenv("API_PORT", "8000"))
    log_level: str = os.getenv("LOG_LEVEL", "INFO")

    def provider_config(self, provider_type: str) -> dict[str, Any]:
        """Get the configuration blob for a provider type.

        Args:
            provider_type: Registered provider type (e.g. "claude")

        Returns:
            Provider-specific config, empty for providers that need none
        """
        if provider_type == "claude":
            return {
                "apiKey": self.claude_api_key,
                "model": self.claude_model,
                "maxTokens": self.claude_max_tokens,
            }
        return {}

    def __post_init__(self) -> None:
        """Validate settings after initialization."""
        if self.cache_ttl <= 0:
            raise ConfigurationError("MOTION_CACHE_TTL must be positive", "cache_ttl")

        if self.cache_max_size <= 0:
            raise ConfigurationError("MOTION_CACHE_MAX_SIZE must be positive", "cache_max_size")

        if self.cache_cleanup_interval <= 0:
            raise ConfigurationError(
                "MOTION_CACHE_CLEANUP_INTERVAL must be positive", "cache_cleanup_interval"
            )

        if self.cache_backend not in CACHE_BACKENDS:
            raise ConfigurationError(
                f"MOTION_CACHE_BACKEND must be one of {list(CACHE_BACKENDS)}, "
                f"got {self.cache_backend}",
                "cache_backend",
            )

        if self.health_check_timeout <= 0:
            raise ConfigurationError(
                "PROVIDER_HEALTH_CHECK_TIMEOUT must be positive", "health_check_timeout"
            )


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


# Global settings instance
settings = get_settings()


def get_redis_client(config: Settings | None = None) -> redis.Redis:
    """Create a Redis client instance."""
    config = config or settings
    return redis.from_url(
        config.redis_url,
        password=config.redis_password,
        decode_responses=True,
    )
