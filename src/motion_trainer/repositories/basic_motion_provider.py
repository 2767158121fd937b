"""Offline rule-based provider.

Computes motions from line and column deltas only. Needs no configuration
and no network, so it is always healthy.
"""

from motion_trainer.entities import MotionRequest, MotionResult, ProviderCapabilities

from .base_motion_provider import BaseMotionProvider


class BasicMotionProvider(BaseMotionProvider):
    """Rule-based implementation of the MotionProvider protocol."""

    name = "basic"
    version = "1.0"
    capabilities = ProviderCapabilities(
        supports_code_context=False,
        max_context_length=0,
        supports_streaming=False,
        supports_batch=True,
        cost_per_request=0.0,
    )

    async def compute(self, request: MotionRequest) -> MotionResult:
        self.ensure_initialized()
        return self.basic_motion(request)

    async def test_connection(self) -> bool:
        return self.is_initialized
