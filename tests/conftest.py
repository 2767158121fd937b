"""Shared fixtures for motion trainer tests."""

from typing import Any

import pytest

from motion_trainer.entities import (
    CodeContext,
    ConfigField,
    MotionRequest,
    MotionResult,
    Position,
    ProviderCapabilities,
    SuggestionContext,
)
from motion_trainer.repositories import InMemoryCacheStore


class FakeClock:
    """Manually advanced clock."""

    def __init__(self, start: float = 1_700_000_000.0) -> None:
        self.current = start

    def now(self) -> float:
        return self.current

    def advance(self, seconds: float) -> None:
        self.current += seconds


class FakeProvider:
    """Provider whose health can be toggled. Counts lifecycle calls on the class."""

    name = "fake"
    version = "1.0"
    capabilities = ProviderCapabilities(supports_code_context=True, max_context_length=1000)

    instances: list["FakeProvider"] = []
    healthy = True

    def __init__(self) -> None:
        self.config: dict[str, Any] | None = None
        self.disposed = False
        self.health_checks = 0
        FakeProvider.instances.append(self)

    async def initialize(self, config: dict[str, Any]) -> None:
        self.config = dict(config)

    async def compute(self, request: MotionRequest) -> MotionResult:
        return MotionResult(
            keys="2j",
            explanation="2 lines down",
            confidence=0.9,
            computed_at=0.0,
            provider_name=self.name,
        )

    async def test_connection(self) -> bool:
        self.health_checks += 1
        return FakeProvider.healthy

    def config_schema(self) -> list[ConfigField]:
        return [ConfigField(name="apiKey", type="string", required=True, secure=True)]

    async def dispose(self) -> None:
        self.disposed = True


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def store():
    return InMemoryCacheStore()


@pytest.fixture
def fake_provider_class():
    FakeProvider.instances = []
    FakeProvider.healthy = True
    yield FakeProvider
    FakeProvider.instances = []
    FakeProvider.healthy = True


def make_result(provider: str = "claude", computed_at: float = 1_700_000_000.0, **kwargs) -> MotionResult:
    return MotionResult(
        keys=kwargs.pop("keys", "5j2w"),
        explanation=kwargs.pop("explanation", "5 lines down, 2 words right"),
        confidence=kwargs.pop("confidence", 0.9),
        computed_at=computed_at,
        provider_name=provider,
        **kwargs,
    )


def make_request(
    current: tuple[int, int] = (0, 0),
    target: tuple[int, int] = (5, 4),
    action: str = "insert",
    user_level: str = "intermediate",
) -> MotionRequest:
    return MotionRequest(
        context=SuggestionContext(
            id="suggestion-1",
            current_position=Position(*current),
            target_position=Position(*target),
            action_type=action,  # type: ignore[arg-type]
            suggestion_text="return x",
            document_uri="file:///tmp/example.py",
        ),
        code_context=CodeContext(
            current_line="def f(x):",
            target_line="    return x",
            surrounding_lines=("1: def f(x):", "2:     return x"),
            language="python",
            file_name="example.py",
        ),
        user_level=user_level,  # type: ignore[arg-type]
    )
