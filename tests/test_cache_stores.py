"""
Tests for cache store backends and the storage record codec.
"""

import json
from unittest.mock import MagicMock

import pytest
import redis

from conftest import make_result
from motion_trainer.entities import CacheEntryEntity
from motion_trainer.errors import PersistenceError
from motion_trainer.repositories import InMemoryCacheStore, JsonFileCacheStore, RedisCacheStore
from motion_trainer.repositories.serialization import dumps_entries, loads_entries


def make_entry(key: str = "k", provider: str = "claude") -> CacheEntryEntity:
    result = make_result(provider=provider, alternatives=("5j", "/return"))
    return CacheEntryEntity(key=key, result=result, expires_at=2_000_000_000.0, provider_name=provider)


def test_codec_preserves_entries():
    entries = [make_entry("a"), make_entry("b", provider="basic")]
    assert loads_entries(dumps_entries(entries)) == entries


@pytest.mark.parametrize(
    "raw",
    [
        "not json",
        json.dumps({"key": "a"}),
        json.dumps([{"key": "a"}]),
    ],
)
def test_codec_rejects_corrupt_payloads(raw):
    with pytest.raises(PersistenceError):
        loads_entries(raw)


def test_codec_rejects_out_of_range_confidence():
    payload = json.loads(dumps_entries([make_entry()]))
    payload[0]["result"]["confidence"] = 3.0
    with pytest.raises(PersistenceError):
        loads_entries(json.dumps(payload))


def test_codec_skips_entries_that_cannot_be_stored():
    bad = CacheEntryEntity(
        key="bad",
        result=make_result(explanation=5, alternatives=(1,)),
        expires_at=2_000_000_000.0,
        provider_name="claude",
    )
    good = make_entry("good")

    assert loads_entries(dumps_entries([bad, good])) == [good]


def test_file_store_keeps_good_entries_next_to_bad_ones(tmp_path):
    store = JsonFileCacheStore(tmp_path / "cache.json")
    bad = CacheEntryEntity(
        key="bad",
        result=make_result(confidence=float("nan")),
        expires_at=2_000_000_000.0,
        provider_name="claude",
    )

    assert store.save([bad, make_entry("good")]) is True
    assert [entry.key for entry in store.load()] == ["good"]


def test_file_store_round_trip(tmp_path):
    store = JsonFileCacheStore(tmp_path / "nested" / "cache.json")
    assert store.load() == []

    entries = [make_entry("a"), make_entry("b")]
    assert store.save(entries) is True
    assert JsonFileCacheStore(store.path).load() == entries
    assert list(store.path.parent.glob("*.tmp")) == []


def test_file_store_corrupt_file_raises(tmp_path):
    path = tmp_path / "cache.json"
    path.write_text("{broken", encoding="utf-8")
    with pytest.raises(PersistenceError):
        JsonFileCacheStore(path).load()


def test_redis_store_round_trip():
    client = MagicMock()
    store = RedisCacheStore(redis_client=client, storage_key="test:cache")
    entries = [make_entry("a")]

    assert store.save(entries) is True
    key, raw = client.set.call_args.args
    assert key == "test:cache"

    client.get.return_value = raw
    assert store.load() == entries
    client.get.assert_called_with("test:cache")


def test_redis_store_missing_key_loads_empty():
    client = MagicMock()
    client.get.return_value = None
    assert RedisCacheStore(redis_client=client, storage_key="k").load() == []


def test_redis_store_errors():
    client = MagicMock()
    client.get.side_effect = redis.ConnectionError("down")
    client.set.side_effect = redis.ConnectionError("down")
    client.ping.side_effect = redis.ConnectionError("down")
    store = RedisCacheStore(redis_client=client, storage_key="k")

    with pytest.raises(PersistenceError):
        store.load()
    assert store.save([make_entry()]) is False
    assert store.health_check() is False


def test_memory_store_counts_saves():
    store = InMemoryCacheStore()
    store.save([make_entry()])
    store.save([])
    assert store.save_count == 2
    assert store.load() == []
