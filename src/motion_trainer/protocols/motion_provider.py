"""Motion provider protocol.

Defines the interface for any backend that can compute a vim motion for a
request. Providers are stateful: they are initialized with a config, own
their network client and must be disposed.

Implementations can include:
- Claude over the Anthropic Messages API (default)
- A local rule-based calculator (offline)
- Any other LLM backend
"""

from collections.abc import Callable
from typing import Any, Protocol, runtime_checkable

from motion_trainer.entities import ConfigField, MotionRequest, MotionResult, ProviderCapabilities


@runtime_checkable
class MotionProvider(Protocol):
    """Protocol for motion computation backends."""

    @property
    def name(self) -> str:
        """Provider name stamped on every result."""
        ...

    @property
    def version(self) -> str:
        """Provider or model version."""
        ...

    @property
    def capabilities(self) -> ProviderCapabilities:
        """Static capabilities of the backing model."""
        ...

    async def initialize(self, config: dict[str, Any]) -> None:
        """Validate ``config`` and prepare the provider for use.

        Raises:
            ProviderError: If the configuration is invalid
        """
        ...

    async def compute(self, request: MotionRequest) -> MotionResult:
        """Compute a motion for ``request``.

        Raises:
            ProviderError: If the backend cannot produce a result
        """
        ...

    async def test_connection(self) -> bool:
        """Live probe. True if the provider can currently serve requests."""
        ...

    def config_schema(self) -> list[ConfigField]:
        """Describe the configuration fields this provider accepts."""
        ...

    async def dispose(self) -> None:
        """Release network clients and forget configuration."""
        ...


ProviderFactory = Callable[[], MotionProvider]
