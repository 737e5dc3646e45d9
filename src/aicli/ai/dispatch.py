"""Dispatcher: resolve config, build the provider, check capabilities, call it."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Iterable

import httpx

from aicli.ai import PROVIDERS, get_provider
from aicli.ai.base import Inputs, Model
from aicli.config import Settings, get_settings
from aicli.errors import AICLIError

logger = logging.getLogger(__name__)


@dataclass
class ModelListing:
    """Models grouped by provider, plus the providers that failed and why."""

    models: dict[str, list[Model]] = field(default_factory=dict)
    errors: dict[str, str] = field(default_factory=dict)

    def as_json(self) -> dict[str, list[dict]]:
        return {name: [m.to_dict() for m in models] for name, models in self.models.items()}


def generate(
    provider_name: str,
    inputs: Inputs,
    api_key: str | None = None,
    model: str | None = None,
    timeout: float | None = None,
    debug: bool = False,
    settings: Settings | None = None,
    transport: httpx.BaseTransport | None = None,
) -> str:
    """Run one prompt against the named provider and return its text.

    Configuration problems raise ConfigError and capability mismatches raise
    CapabilityError, both before any request is sent.
    """
    settings = settings or get_settings()
    name = provider_name.lower()
    config = settings.provider_config(name, api_key=api_key, model=model, timeout=timeout, debug=debug)

    with get_provider(name, config, transport=transport) as provider:
        provider.check_capabilities(inputs)
        logger.info("Generating with %s (key %s)", name, config.masked_key, extra={"provider": name})
        return provider.generate(inputs)


def list_models(
    provider_names: Iterable[str] | None = None,
    settings: Settings | None = None,
    transport: httpx.BaseTransport | None = None,
) -> ModelListing:
    """List models for each provider, collecting per-provider failures."""
    settings = settings or get_settings()
    names = [n.lower() for n in (provider_names or PROVIDERS.keys())]
    listing = ModelListing()

    for name in names:
        try:
            config = settings.provider_config(name)
            with get_provider(name, config, transport=transport) as provider:
                listing.models[name] = provider.list_models()
        except AICLIError as exc:
            logger.warning("Listing models failed for %s: %s", name, exc, extra={"provider": name})
            listing.errors[name] = str(exc)

    return listing
