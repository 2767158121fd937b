"""Motion result domain entity."""

from dataclasses import dataclass


@dataclass(frozen=True)
class MotionResult:
    """A vim key sequence computed by a provider.

    Attributes:
        keys: Vim key sequence (e.g. "5j2w")
        explanation: Human-readable explanation of the keys
        confidence: Provider confidence in [0, 1]
        computed_at: When the motion was computed (Unix timestamp)
        provider_name: Name of the provider that produced it
        alternatives: Other acceptable key sequences, best first
    """

    keys: str
    explanation: str
    confidence: float
    computed_at: float
    provider_name: str
    alternatives: tuple[str, ...] | None = None
