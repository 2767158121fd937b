"""Storage records for cache entries.

Entities carry no serialization logic, so stores encode and decode through
these Pydantic records. Validation failures surface as ``PersistenceError``.
"""

import json
import logging

from pydantic import BaseModel, Field, ValidationError

from motion_trainer.entities import CacheEntryEntity, MotionResult
from motion_trainer.errors import PersistenceError

logger = logging.getLogger(__name__)


class MotionResultRecord(BaseModel):
    """Stored form of a motion result."""

    keys: str
    explanation: str
    confidence: float = Field(..., ge=0.0, le=1.0)
    computed_at: float
    provider_name: str
    alternatives: list[str] | None = None


class CacheEntryRecord(BaseModel):
    """Stored form of a cache entry."""

    key: str
    result: MotionResultRecord
    expires_at: float
    provider_name: str


def entry_to_record(entry: CacheEntryEntity) -> CacheEntryRecord:
    result = entry.result
    return CacheEntryRecord(
        key=entry.key,
        result=MotionResultRecord(
            keys=result.keys,
            explanation=result.explanation,
            confidence=result.confidence,
            computed_at=result.computed_at,
            provider_name=result.provider_name,
            alternatives=list(result.alternatives) if result.alternatives is not None else None,
        ),
        expires_at=entry.expires_at,
        provider_name=entry.provider_name,
    )


def record_to_entry(record: CacheEntryRecord) -> CacheEntryEntity:
    result = record.result
    return CacheEntryEntity(
        key=record.key,
        result=MotionResult(
            keys=result.keys,
            explanation=result.explanation,
            confidence=result.confidence,
            computed_at=result.computed_at,
            provider_name=result.provider_name,
            alternatives=tuple(result.alternatives) if result.alternatives is not None else None,
        ),
        expires_at=record.expires_at,
        provider_name=record.provider_name,
    )


def dumps_entries(entries: list[CacheEntryEntity]) -> str:
    """Encode entries as a JSON array.

    An entry that does not fit the storage record is left out and logged, so
    one bad result cannot block the rest of the snapshot.
    """
    records = []
    for entry in entries:
        try:
            records.append(entry_to_record(entry).model_dump())
        except ValidationError as e:
            logger.warning(f"Skipping cache entry {entry.key} that cannot be stored: {e}")
    return json.dumps(records)


def loads_entries(raw: str | bytes) -> list[CacheEntryEntity]:
    """Decode a JSON array produced by ``dumps_entries``.

    Raises:
        PersistenceError: If the payload is not valid JSON or a record is malformed
    """
    try:
        data = json.loads(raw)
    except json.JSONDecodeError as e:
        raise PersistenceError(f"Stored cache is not valid JSON: {e}") from e

    if not isinstance(data, list):
        raise PersistenceError(f"Stored cache must be a JSON array, got {type(data).__name__}")

    try:
        return [record_to_entry(CacheEntryRecord.model_validate(item)) for item in data]
    except ValidationError as e:
        raise PersistenceError(f"Stored cache entry is malformed: {e}") from e
