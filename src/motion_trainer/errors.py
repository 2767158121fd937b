"""Exception taxonomy.

A cache miss is not an error: lookups return ``None``. Exceptions are reserved
for invalid configuration, provider failures and storage I/O.
"""


class MotionTrainerError(Exception):
    """Base error carrying a machine-readable code and optional provider."""

    def __init__(self, message: str, code: str, provider: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.code = code
        self.provider = provider


class ProviderError(MotionTrainerError):
    """Provider construction, health check or computation failure."""

    def __init__(self, message: str, provider: str, status_code: int | None = None) -> None:
        super().__init__(message, "PROVIDER_ERROR", provider)
        self.status_code = status_code


class ConfigurationError(MotionTrainerError):
    """Invalid cache bounds or malformed provider configuration."""

    def __init__(self, message: str, setting: str | None = None) -> None:
        super().__init__(message, "CONFIG_ERROR")
        self.setting = setting


class PersistenceError(MotionTrainerError):
    """Load or save failure against durable storage."""

    def __init__(self, message: str) -> None:
        super().__init__(message, "PERSISTENCE_ERROR")
