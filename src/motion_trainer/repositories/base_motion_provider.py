"""Shared behaviour for motion providers.

Concrete providers subclass ``BaseMotionProvider`` for config handling,
prompt construction and response parsing, and still satisfy the
MotionProvider protocol structurally.
"""

import json
import logging
import math
import re
import time
from typing import Any

from motion_trainer.entities import ConfigField, MotionRequest, MotionResult, ProviderCapabilities
from motion_trainer.errors import ProviderError

logger = logging.getLogger(__name__)

DEFAULT_CONFIDENCE = 0.5
MAX_KEYS_LENGTH = 50

_JSON_OBJECT = re.compile(r"\{[\s\S]*?\}")
_INVALID_KEY_CHARS = re.compile(r"[^0-9a-zA-Z{}()<>\[\].,;:'\"/?\\|`~!@#$%^&*+=_-]")


class BaseMotionProvider:
    """Base class for providers. Subclasses set the class attributes below."""

    name: str = "base"
    version: str = "0"
    capabilities: ProviderCapabilities = ProviderCapabilities(
        supports_code_context=False,
        max_context_length=0,
    )

    def __init__(self) -> None:
        self._config: dict[str, Any] = {}
        self._initialized = False

    async def initialize(self, config: dict[str, Any]) -> None:
        """Copy and validate ``config``.

        Raises:
            ProviderError: If the configuration is invalid
        """
        self._config = dict(config)
        self.validate_config()
        self._initialized = True

    def validate_config(self) -> None:
        """Check ``self._config`` against ``config_schema()``.

        Subclasses may extend this with provider-specific rules.
        """
        for spec in self.config_schema():
            value = self._config.get(spec.name)
            if value is None or value == "":
                if spec.required:
                    raise ProviderError(f"{self.name} config '{spec.name}' is required", self.name)
                continue

            if spec.type == "string" and not isinstance(value, str):
                raise ProviderError(f"{self.name} config '{spec.name}' must be a string", self.name)

            if spec.type == "number":
                if isinstance(value, bool) or not isinstance(value, int | float):
                    raise ProviderError(f"{self.name} config '{spec.name}' must be a number", self.name)
                if spec.minimum is not None and value < spec.minimum:
                    raise ProviderError(
                        f"{self.name} config '{spec.name}' must be >= {spec.minimum}", self.name
                    )
                if spec.maximum is not None and value > spec.maximum:
                    raise ProviderError(
                        f"{self.name} config '{spec.name}' must be <= {spec.maximum}", self.name
                    )

            if spec.options is not None and value not in spec.options:
                raise ProviderError(
                    f"Invalid {self.name} {spec.name}: {value}. "
                    f"Valid values: {', '.join(spec.options)}",
                    self.name,
                )

    def config_schema(self) -> list[ConfigField]:
        return []

    def config_value(self, key: str) -> Any:
        """Configured value for ``key``, falling back to the schema default."""
        value = self._config.get(key)
        if value is not None:
            return value
        for spec in self.config_schema():
            if spec.name == key:
                return spec.default
        return None

    def ensure_initialized(self) -> None:
        if not self._initialized:
            raise ProviderError("Provider not initialized", self.name)

    @property
    def is_initialized(self) -> bool:
        return self._initialized

    async def dispose(self) -> None:
        self._initialized = False
        self._config = {}

    def build_prompt(self, request: MotionRequest) -> str:
        """Build the standard motion prompt. Providers may append to it."""
        context = request.context
        code = request.code_context
        surrounding = "\n".join(code.surrounding_lines[:10])

        return f"""You are a vim expert helping a user learn efficient vim motions.

CONTEXT:
- User is currently at line {context.current_position.line + 1}, column {context.current_position.character + 1}
- They need to navigate to line {context.target_position.line + 1}, column {context.target_position.character + 1}
- Action needed: {context.action_type}
- Language: {code.language}
- User level: {request.user_level}

CODE CONTEXT:
Current line: "{code.current_line}"
Target line: "{code.target_line}"

Surrounding code:
{surrounding}

REQUIREMENTS:
- Suggest the most efficient vim motion sequence for a {request.user_level} user
- Consider code structure (functions, blocks, brackets, etc.)
- Prefer commonly-used motions over obscure ones
- Be concise but clear in explanation

RESPONSE FORMAT (JSON only):
{{
  "keys": "5j2w",
  "explanation": "5 lines down, 2 words right",
  "confidence": 0.9
}}"""

    def parse_response(self, text: str) -> MotionResult:
        """Extract the first JSON object from model output.

        Falls back to a low-confidence single-line motion if the output
        cannot be parsed.
        """
        try:
            match = _JSON_OBJECT.search(text)
            if not match:
                raise ValueError("No JSON found in response")

            parsed = json.loads(match.group(0))
            keys = parsed.get("keys")
            if not keys or not isinstance(keys, str):
                raise ValueError("Invalid or missing keys field")

            explanation = parsed.get("explanation")
            if not explanation or not isinstance(explanation, str):
                explanation = "Move to target position"

            alternatives = parsed.get("alternatives")
            if isinstance(alternatives, list):
                alternatives = tuple(a for a in alternatives if isinstance(a, str))
            else:
                alternatives = None
            return MotionResult(
                keys=sanitize_keys(keys),
                explanation=explanation,
                confidence=normalize_confidence(parsed.get("confidence")),
                computed_at=time.time(),
                provider_name=self.name,
                alternatives=alternatives,
            )
        except (ValueError, AttributeError) as e:
            logger.error(f"{self.name}: Failed to parse response: {e}")
            logger.debug(f"{self.name}: Raw response: {text}")
            return self.fallback_result()

    def fallback_result(self) -> MotionResult:
        return MotionResult(
            keys="j",
            explanation="Move down one line (fallback)",
            confidence=0.3,
            computed_at=time.time(),
            provider_name=self.name,
        )

    def basic_motion(self, request: MotionRequest) -> MotionResult:
        """Rule-based motion from line and column deltas."""
        context = request.context
        line_diff = context.target_position.line - context.current_position.line
        col_diff = context.target_position.character - context.current_position.character

        keys = ""
        parts: list[str] = []

        if line_diff > 0:
            keys += f"{line_diff}j"
            parts.append(f"{line_diff} lines down")
        elif line_diff < 0:
            keys += f"{-line_diff}k"
            parts.append(f"{-line_diff} lines up")

        if col_diff > 0:
            keys += f"{col_diff}l"
            parts.append(f"{col_diff} chars right")
        elif col_diff < 0:
            keys += f"{-col_diff}h"
            parts.append(f"{-col_diff} chars left")

        explanation = ", ".join(parts)
        if context.action_type == "insert":
            keys += "i"
            explanation += (", then " if explanation else "") + "insert mode"
        elif context.action_type == "delete":
            keys += "x"
            explanation += (", then " if explanation else "") + "delete character"

        return MotionResult(
            keys=keys or "j",
            explanation=explanation or "Move down one line",
            confidence=0.7,
            computed_at=time.time(),
            provider_name=self.name,
        )


def sanitize_keys(keys: str) -> str:
    """Strip characters that are not vim keystrokes and cap the length."""
    return _INVALID_KEY_CHARS.sub("", keys).strip()[:MAX_KEYS_LENGTH]


def normalize_confidence(confidence: Any) -> float:
    """Clamp to [0, 1]. Non-numeric or non-finite values get ``DEFAULT_CONFIDENCE``."""
    if isinstance(confidence, bool) or not isinstance(confidence, int | float):
        return DEFAULT_CONFIDENCE
    if not math.isfinite(confidence):
        return DEFAULT_CONFIDENCE
    return min(max(float(confidence), 0.0), 1.0)
