"""Provider metadata and registry records."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any


@dataclass(frozen=True)
class ProviderCapabilities:
    """What a provider's backing model supports."""

    supports_code_context: bool
    max_context_length: int
    supports_streaming: bool = False
    supports_batch: bool = False
    cost_per_request: float | None = None


@dataclass(frozen=True)
class ConfigField:
    """Declarative description of one accepted configuration field.

    Attributes:
        name: Config key
        type: Value type name ("string", "number", "boolean")
        required: Whether the key must be present
        default: Value used when absent
        description: Human-readable help text
        secure: Whether the value is a secret (API keys)
        options: Allowed values, if the field is an enumeration
        minimum: Lower numeric bound, inclusive
        maximum: Upper numeric bound, inclusive
    """

    name: str
    type: str
    required: bool = False
    default: Any = None
    description: str = ""
    secure: bool = False
    options: tuple[str, ...] | None = None
    minimum: float | None = None
    maximum: float | None = None


@dataclass(frozen=True)
class ProviderInfo:
    """Static metadata of a registered provider type."""

    type: str
    name: str
    version: str
    capabilities: ProviderCapabilities
    config_schema: list[ConfigField]


@dataclass(frozen=True)
class ProviderInstanceRecord:
    """A live, health-checked provider instance owned by the registry."""

    instance_key: str
    provider_type: str
    instance: Any
    created_at: float


@dataclass(frozen=True)
class RegistryStats:
    """Snapshot of live provider instances."""

    total_instances: int
    per_type_counts: dict[str, int] = field(default_factory=dict)
    oldest_instance: datetime | None = None
