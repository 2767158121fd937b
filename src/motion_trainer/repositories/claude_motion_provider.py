"""Claude-based motion provider.

Uses the Anthropic Messages API over httpx to compute motions.

Requirements:
    - An API key from https://console.anthropic.com/
"""

import logging
from typing import Any

import httpx

from motion_trainer.entities import ConfigField, MotionRequest, MotionResult, ProviderCapabilities
from motion_trainer.errors import ProviderError

from .base_motion_provider import BaseMotionProvider

logger = logging.getLogger(__name__)

CLAUDE_API_URL = "https://api.anthropic.com/v1/messages"
ANTHROPIC_VERSION = "2023-06-01"
DEFAULT_MODEL = "claude-3-5-sonnet-20241022"
DEFAULT_MAX_TOKENS = 150
MIN_API_KEY_LENGTH = 20

CLAUDE_MODELS = (
    "claude-3-5-sonnet-20241022",
    "claude-3-haiku-20240307",
    "claude-3-opus-20240229",
)

COMPLEXITY_HINTS = {
    "beginner": "basic motions (h,j,k,l with counts, 0, $)",
    "intermediate": "word motions (w,b,e), search (f,t), and simple text objects",
    "advanced": "complex motions, text objects, marks, and efficient combinations",
}


class ClaudeMotionProvider(BaseMotionProvider):
    """Claude implementation of the MotionProvider protocol.

    Example:
        ```python
        provider = ClaudeMotionProvider()
        await provider.initialize({"apiKey": "sk-ant-..."})
        if await provider.test_connection():
            motion = await provider.compute(request)
        ```
    """

    name = "claude"
    version = "3.5-sonnet"
    capabilities = ProviderCapabilities(
        supports_code_context=True,
        max_context_length=200000,
        supports_streaming=False,
        supports_batch=False,
        cost_per_request=0.3,
    )

    def __init__(
        self,
        base_url: str = CLAUDE_API_URL,
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize the Claude provider.

        Args:
            base_url: Messages API endpoint.
            timeout: Request timeout in seconds.
            transport: Optional httpx transport (used to stub the API in tests).
        """
        super().__init__()
        self._base_url = base_url
        self._timeout = timeout
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    @property
    def client(self) -> httpx.AsyncClient:
        """Lazy-load the async HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self._timeout, transport=self._transport)
        return self._client

    def config_schema(self) -> list[ConfigField]:
        return [
            ConfigField(
                name="apiKey",
                type="string",
                required=True,
                secure=True,
                description="Claude API key from Anthropic console (https://console.anthropic.com/)",
            ),
            ConfigField(
                name="model",
                type="string",
                default=DEFAULT_MODEL,
                options=CLAUDE_MODELS,
                description="Claude model to use for motion calculation",
            ),
            ConfigField(
                name="maxTokens",
                type="number",
                default=DEFAULT_MAX_TOKENS,
                minimum=50,
                maximum=1000,
                description="Maximum tokens in response",
            ),
        ]

    def validate_config(self) -> None:
        super().validate_config()
        if len(self._config["apiKey"]) < MIN_API_KEY_LENGTH:
            raise ProviderError("Claude API key appears to be invalid (too short)", self.name)

    async def send_message(self, prompt: str) -> str:
        """Send a single user message and return the first text block.

        Raises:
            ProviderError: On HTTP errors, network errors or malformed responses
        """
        self.ensure_initialized()
        payload = {
            "model": self.config_value("model"),
            "max_tokens": self.config_value("maxTokens"),
            "messages": [{"role": "user", "content": prompt}],
        }
        headers = {
            "x-api-key": self._config["apiKey"],
            "anthropic-version": ANTHROPIC_VERSION,
        }

        try:
            response = await self.client.post(self._base_url, json=payload, headers=headers)
        except httpx.HTTPError as e:
            raise ProviderError(f"Failed to communicate with Claude API: {e}", self.name) from e

        if response.is_error:
            raise ProviderError(
                f"Claude API error: {response.status_code} {response.reason_phrase}\n{response.text}",
                self.name,
                status_code=response.status_code,
            )

        try:
            data: dict[str, Any] = response.json()
            return data["content"][0]["text"]
        except (ValueError, KeyError, IndexError, TypeError) as e:
            raise ProviderError("Invalid response format from Claude API", self.name) from e

    async def compute(self, request: MotionRequest) -> MotionResult:
        text = await self.send_message(self.build_claude_prompt(request))
        return self.parse_response(text)

    async def test_connection(self) -> bool:
        if not self.is_initialized:
            return False
        try:
            await self.send_message('Test connection. Respond with: {"test": true}')
            return True
        except ProviderError as e:
            logger.error(f"Claude connection test failed: {e}")
            return False

    def build_claude_prompt(self, request: MotionRequest) -> str:
        hint = COMPLEXITY_HINTS.get(request.user_level, "intermediate-level motions")
        return self.build_prompt(request) + f"""

CLAUDE-SPECIFIC INSTRUCTIONS:
- Focus on practical, commonly-used vim motions that work in most vim/neovim setups
- Consider code structure when suggesting motions (use }}, ), ], etc. for code blocks)
- For {request.user_level} users, prefer {hint}
- Always respond with valid JSON only - no additional text before or after
- Ensure the "keys" field contains only valid vim keystrokes"""

    async def dispose(self) -> None:
        """Close the async HTTP client and forget the configuration."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None
        await super().dispose()
