"""Error types raised by providers, the dispatcher and configuration."""

from __future__ import annotations


class AICLIError(Exception):
    """Base class for all ai-cli errors."""


class ConfigError(AICLIError):
    """Raised when configuration is missing or invalid (API key, provider name)."""


class InputError(AICLIError):
    """Raised when the prompt or an image file cannot be read."""


class ProviderError(AICLIError):
    """An error attributed to a specific provider and call phase."""

    def __init__(self, provider: str, message: str, phase: str = "generate") -> None:
        super().__init__(message)
        self.provider = provider
        self.phase = phase
        self.message = message

    def __str__(self) -> str:
        return f"{self.provider}: {self.message}"


class CapabilityError(ProviderError):
    """The provider does not support the requested feature (e.g. images)."""


class NetworkError(ProviderError):
    """Transport-level failure: connection refused, DNS, timeout."""


class APIError(ProviderError):
    """The provider answered with a non-2xx HTTP status."""

    def __init__(
        self,
        provider: str,
        status_code: int,
        message: str,
        phase: str = "generate",
    ) -> None:
        super().__init__(provider, f"API error [{status_code}]: {message}", phase)
        self.status_code = status_code
        self.detail = message


class DecodeError(ProviderError):
    """A 2xx response body could not be decoded into the expected shape."""


class EmptyResultError(ProviderError):
    """A well-formed completion response carried zero choices."""
