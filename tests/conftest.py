"""Shared fixtures."""

from __future__ import annotations

import httpx
import pytest

from aicli.config import ProviderConfig, reset_settings

_ENV_VARS = (
    "OPENAI_API_KEY",
    "DEEPSEEK_API_KEY",
    "MISTRAL_API_KEY",
    "DEFAULT_PROVIDER",
    "OPENAI_MODEL",
    "DEEPSEEK_MODEL",
    "MISTRAL_MODEL",
    "REQUEST_TIMEOUT",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for var in _ENV_VARS:
        monkeypatch.delenv(var, raising=False)
    reset_settings()
    yield
    reset_settings()


class Recorder:
    """httpx.MockTransport handler that replays responses and records requests.

    Each call returns the next queued item; the last item repeats once the
    queue runs out. Exception instances are raised instead of returned.
    """

    def __init__(self, *responses):
        self.responses = list(responses)
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        item = self.responses[min(len(self.requests), len(self.responses)) - 1]
        if isinstance(item, BaseException):
            raise item
        return item

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self)

    @property
    def count(self) -> int:
        return len(self.requests)


def completion(content: str = "hello") -> httpx.Response:
    return httpx.Response(200, json={"choices": [{"message": {"role": "assistant", "content": content}}]})


@pytest.fixture
def config() -> ProviderConfig:
    return ProviderConfig(api_key="sk-test-1234567890")
