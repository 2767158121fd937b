#!/usr/bin/env python3
"""
Demo script for the motion trainer.

Runs offline: uses the rule-based provider and a JSON file store in a
temporary directory, then restarts the cache to show persistence.
"""

import asyncio
import tempfile
from pathlib import Path

from motion_trainer.entities import CodeContext, MotionRequest, Position, SuggestionContext
from motion_trainer.repositories import BasicMotionProvider, JsonFileCacheStore
from motion_trainer.services import MotionService, ProviderRegistry, ResultCache


def print_section(title: str) -> None:
    """Print a section header."""
    print("\n" + "=" * 70)
    print(f"  {title}")
    print("=" * 70)


def sample_request(target_line: int, target_char: int) -> MotionRequest:
    return MotionRequest(
        context=SuggestionContext(
            id=f"demo-{target_line}-{target_char}",
            current_position=Position(line=0, character=0),
            target_position=Position(line=target_line, character=target_char),
            action_type="insert",
        ),
        code_context=CodeContext(
            current_line="def handler(event):",
            target_line="    return response",
            language="python",
        ),
    )


async def demo(cache_file: Path) -> None:
    print_section("Computing motions")

    registry = ProviderRegistry()
    registry.register("basic", BasicMotionProvider)
    cache = ResultCache.create(store=JsonFileCacheStore(cache_file), ttl=3600, max_size=100)
    service = MotionService(cache=cache, registry=registry, active_provider="basic", provider_configs={})

    for target in [(5, 4), (12, 0), (5, 4)]:
        motion, cached = await service.compute_motion(sample_request(*target))
        status = "✓ CACHE HIT" if cached else "✗ computed"
        print(f"  {target}: {motion.keys:<8} {status}  ({motion.explanation})")

    stats = cache.stats()
    print(f"\n  Entries: {stats.size}  Hits: {stats.hits}  Misses: {stats.misses}  Hit rate: {stats.hit_rate:.1f}%")

    await cache.close()
    await registry.dispose_all()

    print_section("Restarting from persisted cache")
    restarted = ResultCache.create(store=JsonFileCacheStore(cache_file))
    for item in restarted.export():
        print(f"  {item.key}  provider={item.provider_name}  expires in {item.expires_in_ms // 1000}s")


def main() -> None:
    with tempfile.TemporaryDirectory() as tmp:
        asyncio.run(demo(Path(tmp) / "cache.json"))


if __name__ == "__main__":
    main()
