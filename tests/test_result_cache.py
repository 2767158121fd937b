"""
Tests for the result cache: expiry, eviction, invalidation, stats and persistence.
"""

import asyncio
import math

import pytest

from conftest import FakeClock, make_result
from motion_trainer.entities import CacheEntryEntity
from motion_trainer.errors import ConfigurationError, PersistenceError
from motion_trainer.repositories import InMemoryCacheStore
from motion_trainer.services import ResultCache


@pytest.fixture
def cache(store, clock):
    return ResultCache.create(store=store, ttl=1.0, max_size=100, clock=clock)


class FailingStore:
    """Store whose load raises and whose saves can be made to fail."""

    def __init__(self) -> None:
        self.fail_saves = True
        self.saved: list[list[CacheEntryEntity]] = []

    def load(self) -> list[CacheEntryEntity]:
        raise PersistenceError("corrupt")

    def save(self, entries: list[CacheEntryEntity]) -> bool:
        if self.fail_saves:
            raise OSError("disk full")
        self.saved.append(list(entries))
        return True


async def test_get_returns_result_until_expiry(cache, clock):
    """TTL = 1s: hit at 0.5s, miss at 1.5s and the entry is removed."""
    result = make_result()
    await cache.set("k", result)

    clock.advance(0.5)
    assert await cache.get("k") == result
    assert cache.stats().hits == 1

    clock.advance(1.0)
    assert await cache.get("k") is None
    stats = cache.stats()
    assert stats.misses == 1
    assert stats.size == 0


async def test_entry_live_at_exact_expiry(cache, clock):
    await cache.set("k", make_result())
    clock.advance(1.0)
    assert cache.has("k")
    assert await cache.get("k") is not None


async def test_get_missing_key_counts_miss(cache):
    assert await cache.get("nope") is None
    assert cache.stats().misses == 1


async def test_has_does_not_touch_counters(cache, clock):
    await cache.set("k", make_result())
    assert cache.has("k")
    assert not cache.has("other")

    clock.advance(2.0)
    assert not cache.has("k")
    # has() never removes, even expired entries
    assert len(cache) == 1

    stats = cache.stats()
    assert stats.hits == 0
    assert stats.misses == 0


async def test_pure_hit_does_not_persist(cache, store):
    await cache.set("k", make_result())
    await cache.flush()
    saves = store.save_count

    await cache.get("k")
    await cache.flush()
    assert store.save_count == saves


async def test_expired_get_persists_removal(cache, store, clock):
    await cache.set("k", make_result())
    await cache.flush()
    assert len(store.entries) == 1

    clock.advance(5.0)
    await cache.get("k")
    await cache.flush()
    assert store.entries == []


async def test_set_overwrites_with_new_expiry(cache, clock):
    await cache.set("k", make_result(keys="j"))
    clock.advance(0.8)
    await cache.set("k", make_result(keys="k"))
    clock.advance(0.8)

    motion = await cache.get("k")
    assert motion is not None
    assert motion.keys == "k"


async def test_set_with_ttl_override(cache, clock):
    await cache.set("long", make_result(), ttl=10.0)
    clock.advance(5.0)
    assert cache.has("long")


async def test_delete(cache, store):
    await cache.set("k", make_result())
    await cache.flush()
    saves = store.save_count

    assert await cache.delete("k") is True
    await cache.flush()
    assert store.save_count == saves + 1

    assert await cache.delete("k") is False
    await cache.flush()
    assert store.save_count == saves + 1


async def test_clear_resets_entries_and_counters(cache, store):
    await cache.set("a", make_result())
    await cache.get("a")
    await cache.get("missing")

    await cache.clear()
    await cache.flush()

    stats = cache.stats()
    assert stats.size == 0
    assert stats.hits == 0
    assert stats.misses == 0
    assert stats.hit_rate == 0.0
    assert store.entries == []


async def test_clear_by_provider_removes_exactly_matching(cache, store):
    for i in range(3):
        await cache.set(f"claude-{i}", make_result(provider="claude"))
    for i in range(2):
        await cache.set(f"basic-{i}", make_result(provider="basic"))
    await cache.flush()
    before = {e.key for e in store.entries}

    removed = await cache.clear_by_provider("claude")
    await cache.flush()

    after = {e.key for e in store.entries}
    assert removed == 3
    assert before - after == {"claude-0", "claude-1", "claude-2"}
    assert after == {"basic-0", "basic-1"}


async def test_clear_by_unknown_provider_does_not_persist(cache, store):
    await cache.set("a", make_result(provider="claude"))
    await cache.flush()
    saves = store.save_count

    assert await cache.clear_by_provider("openai") == 0
    await cache.flush()
    assert store.save_count == saves


async def test_eviction_removes_soonest_expiring(store, clock):
    """maxSize=4, A(10) B(5) C(20) D(1): inserting E evicts D."""
    cache = ResultCache.create(store=store, ttl=100.0, max_size=4, clock=clock)
    await cache.set("A", make_result(), ttl=10)
    await cache.set("B", make_result(), ttl=5)
    await cache.set("C", make_result(), ttl=20)
    await cache.set("D", make_result(), ttl=1)

    await cache.set("E", make_result())

    assert {item.key for item in cache.export()} == {"A", "B", "C", "E"}


async def test_eviction_always_frees_space(store, clock):
    cache = ResultCache.create(store=store, ttl=100.0, max_size=10, clock=clock)
    expiries = {}
    for i in range(10):
        await cache.set(f"k{i}", make_result(), ttl=50 + (i * 7) % 10)
        expiries[f"k{i}"] = clock.now() + 50 + (i * 7) % 10

    await cache.set("new", make_result())

    remaining = {item.key for item in cache.export()} - {"new"}
    evicted = set(expiries) - remaining
    assert len(cache) < 11
    assert evicted
    assert max(expiries[k] for k in evicted) <= min(expiries[k] for k in remaining)


async def test_eviction_at_tiny_capacity(store, clock):
    cache = ResultCache.create(store=store, ttl=100.0, max_size=1, clock=clock)
    await cache.set("a", make_result())
    await cache.set("b", make_result())
    assert len(cache) == 1
    assert cache.has("b")


async def test_reconfigure_shrink_evicts_to_bound(store, clock):
    cache = ResultCache.create(store=store, ttl=100.0, max_size=20, clock=clock)
    for i in range(20):
        await cache.set(f"k{i}", make_result(), ttl=i + 1)

    await cache.reconfigure(max_size=5)

    assert len(cache) == 5
    assert {item.key for item in cache.export()} == {f"k{i}" for i in range(15, 20)}


async def test_reconfigure_ttl_applies_to_future_entries(cache, clock):
    await cache.set("old", make_result())
    await cache.reconfigure(ttl=10.0)
    await cache.set("new", make_result())

    clock.advance(5.0)
    assert not cache.has("old")
    assert cache.has("new")


async def test_invalid_bounds_raise_configuration_error(store, cache):
    with pytest.raises(ConfigurationError):
        ResultCache(store=store, ttl=0)
    with pytest.raises(ConfigurationError):
        ResultCache(store=store, max_size=0)
    with pytest.raises(ConfigurationError):
        await cache.reconfigure(max_size=-1)



@pytest.mark.parametrize("ttl", [math.nan, math.inf, -math.inf])
async def test_non_finite_ttl_is_rejected(store, cache, ttl):
    with pytest.raises(ConfigurationError):
        ResultCache(store=store, ttl=ttl)
    with pytest.raises(ConfigurationError):
        await cache.reconfigure(ttl=ttl)
    with pytest.raises(ConfigurationError):
        await cache.set("k", make_result(), ttl=ttl)
    assert cache.ttl == 1.0


async def test_hit_rate_matches_counters(cache):
    await cache.set("k", make_result())
    for _ in range(3):
        await cache.get("k")
    await cache.get("missing")

    stats = cache.stats()
    assert stats.hits + stats.misses == 4
    assert stats.hit_rate == pytest.approx(75.0)


async def test_stats_breakdown_and_timestamps(cache):
    await cache.set("a", make_result(provider="claude", computed_at=100.0))
    await cache.set("b", make_result(provider="claude", computed_at=300.0))
    await cache.set("c", make_result(provider="basic", computed_at=200.0))

    stats = cache.stats()
    assert stats.size == 3
    assert stats.provider_breakdown == {"claude": 2, "basic": 1}
    assert stats.oldest_entry.timestamp() == pytest.approx(100.0)
    assert stats.newest_entry.timestamp() == pytest.approx(300.0)
    assert stats.memory_usage > 0


def test_stats_on_empty_cache(cache):
    stats = cache.stats()
    assert stats.oldest_entry is None
    assert stats.newest_entry is None
    assert stats.memory_usage == 0


async def test_export_sorted_oldest_first_and_truncates(cache, clock):
    long_key = "x" * 80
    await cache.set(long_key, make_result(computed_at=clock.now() - 10))
    await cache.set("short", make_result(computed_at=clock.now() - 1))

    items = cache.export()
    assert [item.key for item in items] == ["x" * 50 + "...", "short"]
    assert items[0].age_ms == 10_000
    assert items[0].expires_in_ms == 1_000


async def test_cleanup_expired_skips_counters(cache, clock, store):
    await cache.set("a", make_result())
    await cache.set("b", make_result(), ttl=10.0)
    clock.advance(2.0)

    assert await cache.cleanup_expired() == 1
    await cache.flush()

    stats = cache.stats()
    assert stats.size == 1
    assert stats.hits == 0
    assert stats.misses == 0
    assert [e.key for e in store.entries] == ["b"]


async def test_periodic_cleanup_runs_in_background(cache, clock):
    await cache.set("a", make_result())
    clock.advance(2.0)

    cache.start_cleanup(interval=0.01)
    for _ in range(100):
        if len(cache) == 0:
            break
        await asyncio.sleep(0.01)
    await cache.stop_cleanup()

    assert len(cache) == 0


async def test_round_trip_drops_expired_entries(clock):
    store = InMemoryCacheStore()
    cache = ResultCache.create(store=store, ttl=10.0, clock=clock)
    await cache.set("short", make_result(), ttl=1.0)
    await cache.set("long", make_result(alternatives=("5j", "/return")))
    await cache.close()
    before = {e.key: e for e in store.entries}

    clock.advance(5.0)
    restarted = ResultCache.create(store=store, ttl=10.0, clock=clock)

    assert len(restarted) == 1
    assert restarted.has("long")
    assert not restarted.has("short")
    assert await restarted.get("long") == before["long"].result
    assert restarted.export()[0].expires_in_ms == 5_000


async def test_load_failure_starts_empty(clock):
    cache = ResultCache.create(store=FailingStore(), clock=clock)
    assert len(cache) == 0


async def test_failed_save_keeps_memory_and_retries(clock):
    store = FailingStore()
    cache = ResultCache.create(store=store, ttl=10.0, clock=clock)

    await cache.set("a", make_result())
    await cache.flush()
    assert cache.has("a")
    assert store.saved == []

    store.fail_saves = False
    await cache.set("b", make_result())
    await cache.flush()
    assert {e.key for e in store.saved[-1]} == {"a", "b"}


async def test_close_writes_final_snapshot(cache, store):
    await cache.set("a", make_result())
    await cache.close()
    assert [e.key for e in store.entries] == ["a"]


async def test_concurrent_sets_respect_bound(store, clock):
    cache = ResultCache.create(store=store, ttl=100.0, max_size=8, clock=clock)
    await asyncio.gather(*(cache.set(f"k{i}", make_result()) for i in range(50)))
    await cache.flush()
    assert len(cache) <= 8
    assert len(store.entries) == len(cache)


def test_fake_clock_fixture():
    clock = FakeClock(start=10.0)
    clock.advance(2.5)
    assert clock.now() == 12.5
