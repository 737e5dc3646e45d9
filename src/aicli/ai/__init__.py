"""Provider layer: OpenAI, DeepSeek and Mistral behind one interface."""

from __future__ import annotations

import httpx

from aicli.ai.base import AIProvider, Feature, ImageInput, Inputs, Model
from aicli.ai.deepseek import DeepSeekProvider
from aicli.ai.mistral import MistralProvider
from aicli.ai.openai import OpenAIProvider
from aicli.config import ProviderConfig
from aicli.errors import ConfigError

PROVIDERS: dict[str, type[AIProvider]] = {
    "openai": OpenAIProvider,
    "deepseek": DeepSeekProvider,
    "mistral": MistralProvider,
}

__all__ = [
    "AIProvider",
    "DeepSeekProvider",
    "Feature",
    "ImageInput",
    "Inputs",
    "MistralProvider",
    "Model",
    "OpenAIProvider",
    "PROVIDERS",
    "get_provider",
]


def get_provider(
    provider_name: str,
    config: ProviderConfig,
    transport: httpx.BaseTransport | None = None,
) -> AIProvider:
    """Factory to get the named AI provider."""
    cls = PROVIDERS.get(provider_name.lower())
    if cls is None:
        raise ConfigError(
            f"Unknown AI provider: {provider_name!r}. "
            f"Available: {', '.join(PROVIDERS.keys())}"
        )
    return cls(config, transport=transport)
