"""Deterministic fingerprints for cache keys and provider instance keys.

Both are SHA-256 digests over a canonical JSON encoding (sorted keys, no
whitespace), so semantically equal inputs always map to the same key
regardless of dict ordering.
"""

import hashlib
import json
from dataclasses import asdict
from typing import Any

from motion_trainer.entities import MotionRequest

CONFIG_HASH_LENGTH = 16


def _canonical(value: Any) -> str:
    return json.dumps(value, sort_keys=True, separators=(",", ":"), default=str)


def hash_config(config: dict[str, Any]) -> str:
    """Hash a provider configuration, independent of key order.

    Args:
        config: Provider configuration mapping (may be nested)

    Returns:
        Hex digest prefix of length ``CONFIG_HASH_LENGTH``
    """
    digest = hashlib.sha256(_canonical(config).encode()).hexdigest()
    return digest[:CONFIG_HASH_LENGTH]


def make_instance_key(provider_type: str, config: dict[str, Any]) -> str:
    """Build the registry key ``<type>:<config hash>``."""
    return f"{provider_type}:{hash_config(config)}"


def make_request_key(request: MotionRequest) -> str:
    """Fingerprint the parts of a motion request that determine the answer.

    The suggestion id, text, document URI and detection timestamp are excluded:
    two suggestions at the same positions over the same code get the same motion.
    """
    context = request.context
    code = request.code_context
    payload = {
        "current": asdict(context.current_position),
        "target": asdict(context.target_position),
        "action": context.action_type,
        "current_line": code.current_line,
        "target_line": code.target_line,
        "surrounding": list(code.surrounding_lines),
        "language": code.language,
        "user_level": request.user_level,
    }
    return hashlib.sha256(_canonical(payload).encode()).hexdigest()
