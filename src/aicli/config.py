"""Configuration management — loads .env and validates with Pydantic."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from pydantic import Field
from pydantic_settings import BaseSettings

from aicli.errors import ConfigError

DEFAULT_TIMEOUT = 30.0

# Environment variable holding each provider's API key
API_KEY_ENV_VARS = {
    "openai": "OPENAI_API_KEY",
    "deepseek": "DEEPSEEK_API_KEY",
    "mistral": "MISTRAL_API_KEY",
}

# Load .env from the working directory (if it exists)
_env_path = Path.cwd() / ".env"
ENV_FILE_FOUND = _env_path.exists()
if ENV_FILE_FOUND:
    load_dotenv(_env_path)


def mask_api_key(key: str) -> str:
    """Return a display-safe form of an API key: first and last 4 chars only."""
    if len(key) < 8:
        return "****"
    return f"{key[:4]}...{key[-4:]}"


@dataclass(frozen=True)
class ProviderConfig:
    """Per-provider construction parameters, built once per invocation."""

    api_key: str = field(repr=False)
    model: Optional[str] = None
    timeout: Optional[float] = None
    debug: bool = False

    @property
    def masked_key(self) -> str:
        return mask_api_key(self.api_key)


class Settings(BaseSettings):
    """All ai-cli configuration, loaded from env vars / .env file."""

    # ── Provider credentials ──────────────────────────────────────────
    openai_api_key: str = Field(default="", description="OpenAI API key")
    deepseek_api_key: str = Field(default="", description="DeepSeek API key")
    mistral_api_key: str = Field(default="", description="Mistral API key")

    # ── Provider defaults ─────────────────────────────────────────────
    default_provider: str = Field(
        default="openai", description="Provider used when --provider is not given"
    )
    openai_model: str = Field(default="", description="OpenAI text model override")
    deepseek_model: str = Field(default="", description="DeepSeek model override")
    mistral_model: str = Field(default="", description="Mistral model override")
    request_timeout: float = Field(
        default=DEFAULT_TIMEOUT, description="HTTP request timeout seconds"
    )

    # ── Logging ───────────────────────────────────────────────────────
    log_level: str = Field(default="WARNING", description="Logging level")
    log_file: str = Field(default="", description="Log file path (empty = no file)")
    log_json: bool = Field(default=False, description="Output logs in JSON")

    model_config = {
        "env_file": str(_env_path),
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }

    def api_key_for(self, provider: str) -> str:
        return getattr(self, f"{provider.lower()}_api_key", "") or ""

    def model_for(self, provider: str) -> str | None:
        return getattr(self, f"{provider.lower()}_model", "") or None

    def resolve_api_key(self, provider: str, override: str | None = None) -> str:
        """Resolve an API key: explicit override > environment > ConfigError."""
        name = provider.lower()
        if name not in API_KEY_ENV_VARS:
            raise ConfigError(f"unsupported provider: {provider}")
        if override:
            return override
        key = self.api_key_for(name)
        if not key:
            raise ConfigError(
                f"API key required for {name}. "
                f"Set via --apikey or the {API_KEY_ENV_VARS[name]} environment variable"
            )
        return key

    def provider_config(
        self,
        provider: str,
        api_key: str | None = None,
        model: str | None = None,
        timeout: float | None = None,
        debug: bool = False,
    ) -> ProviderConfig:
        """Build the ProviderConfig for one invocation."""
        return ProviderConfig(
            api_key=self.resolve_api_key(provider, api_key),
            model=model or self.model_for(provider),
            timeout=timeout or self.request_timeout,
            debug=debug,
        )

    def as_display_dict(self) -> dict[str, str]:
        """Return a sanitized dict of all config values for display."""
        display: dict[str, str] = {}
        for name, env_var in API_KEY_ENV_VARS.items():
            key = self.api_key_for(name)
            display[env_var] = mask_api_key(key) if key else "(not set)"
        display.update({
            "DEFAULT_PROVIDER": self.default_provider,
            "OPENAI_MODEL": self.openai_model or "(default)",
            "DEEPSEEK_MODEL": self.deepseek_model or "(default)",
            "MISTRAL_MODEL": self.mistral_model or "(default)",
            "REQUEST_TIMEOUT": str(self.request_timeout),
            "LOG_LEVEL": self.log_level,
            "LOG_FILE": self.log_file or "(not set)",
            "LOG_JSON": str(self.log_json),
            ".env": str(_env_path) if ENV_FILE_FOUND else "(not found)",
        })
        return display


# ── Singleton accessor ────────────────────────────────────────────────

_settings_instance: Settings | None = None


def get_settings() -> Settings:
    """Return a cached Settings instance."""
    global _settings_instance
    if _settings_instance is None:
        _settings_instance = Settings()
    return _settings_instance


def reset_settings() -> None:
    """Invalidate the cached Settings so the next call to get_settings() reloads."""
    global _settings_instance
    _settings_instance = None
