"""
Tests for the motion trainer API.
"""

import pytest
from fastapi.testclient import TestClient

from motion_trainer.api.app import build_app
from motion_trainer.config import Settings

MOTION_PAYLOAD = {
    "context": {
        "id": "s-1",
        "current_position": {"line": 0, "character": 0},
        "target_position": {"line": 3, "character": 2},
        "action_type": "insert",
    },
    "code_context": {
        "current_line": "def f(x):",
        "target_line": "    return x",
        "surrounding_lines": ["def f(x):", "    y = x", "    z = y", "    return z"],
        "language": "python",
    },
    "user_level": "beginner",
}


@pytest.fixture
def client():
    """Create a test client backed by the offline provider and an in-memory store."""
    config = Settings(active_provider="basic", cache_backend="memory")
    with TestClient(build_app(config)) as client:
        yield client


def test_root(client):
    response = client.get("/")
    assert response.status_code == 200
    assert response.json()["name"] == "Motion Trainer API"


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "healthy"
    assert data["active_provider"] == "basic"


def test_motion_is_cached(client):
    first = client.post("/motion", json=MOTION_PAYLOAD)
    assert first.status_code == 200
    assert first.json()["keys"] == "3j2li"
    assert first.json()["cached"] is False

    second = client.post("/motion", json=MOTION_PAYLOAD)
    assert second.json()["cached"] is True

    stats = client.get("/cache/stats").json()
    assert stats["size"] == 1
    assert stats["hits"] == 1
    assert stats["misses"] == 1
    assert stats["hit_rate"] == 50.0
    assert stats["provider_breakdown"] == {"basic": 1}


def test_motion_validation_error(client):
    response = client.post("/motion", json={"context": {}})
    assert response.status_code == 422


def test_export_and_clear(client):
    client.post("/motion", json=MOTION_PAYLOAD)

    export = client.get("/cache/export").json()
    assert len(export) == 1
    assert export[0]["provider"] == "basic"
    assert export[0]["key"].endswith("...")

    cleared = client.delete("/cache/providers/basic").json()
    assert cleared["cleared"] == 1

    client.post("/motion", json=MOTION_PAYLOAD)
    assert client.delete("/cache").json()["cleared"] == 1
    assert client.get("/cache/stats").json()["size"] == 0


def test_update_cache_config(client):
    response = client.put("/cache/config", json={"max_size": 5})
    assert response.status_code == 200
    assert response.json()["max_size"] == 5

    response = client.put("/cache/config", json={"ttl": -1})
    assert response.status_code == 400

    response = client.put(
        "/cache/config", content='{"ttl": NaN}', headers={"Content-Type": "application/json"}
    )
    assert response.status_code == 400


def test_providers(client):
    providers = {p["type"]: p for p in client.get("/providers").json()}
    assert set(providers) == {"claude", "basic"}
    claude_fields = {f["name"]: f for f in providers["claude"]["config_schema"]}
    assert claude_fields["apiKey"]["secure"] is True
    assert claude_fields["maxTokens"]["maximum"] == 1000

    client.post("/motion", json=MOTION_PAYLOAD)
    stats = client.get("/providers/stats").json()
    assert stats["total_instances"] == 1
    assert stats["per_type_counts"] == {"basic": 1}


def test_unhealthy_provider_returns_bad_gateway():
    config = Settings(active_provider="claude", claude_api_key="", cache_backend="memory")
    with TestClient(build_app(config)) as client:
        response = client.post("/motion", json=MOTION_PAYLOAD)
        assert response.status_code == 502
        assert client.get("/health").json()["status"] == "unhealthy"
