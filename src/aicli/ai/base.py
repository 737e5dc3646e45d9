"""Abstract base for AI providers, plus the capability and input value types."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import asdict, dataclass
from enum import Enum
from typing import Any, TypeVar

import httpx
from pydantic import BaseModel, ValidationError

from aicli.ai.schemas import ChatMessage, ChatRequest, ChatResponse, MessageErrorEnvelope
from aicli.config import DEFAULT_TIMEOUT, ProviderConfig
from aicli.errors import APIError, CapabilityError, DecodeError, EmptyResultError, NetworkError

logger = logging.getLogger(__name__)

SchemaT = TypeVar("SchemaT", bound=BaseModel)


class Feature(Enum):
    """Capability tags a provider may declare."""

    TEXT_GENERATION = "text_generation"
    VISION = "vision"
    MULTI_MODAL = "multi_modal"


@dataclass(frozen=True)
class ImageInput:
    """One image attachment: raw bytes plus the filename it was read from."""

    data: bytes
    filename: str


@dataclass(frozen=True)
class Inputs:
    """A single request: prompt text and zero or more images."""

    prompt: str
    images: tuple[ImageInput, ...] = ()


@dataclass(frozen=True)
class Model:
    """Normalized descriptor of a provider-hosted model."""

    id: str
    description: str
    context_window: int
    supports_vision: bool = False

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


class AIProvider(ABC):
    """Base class for the chat-completion providers.

    Subclasses set ``name``, ``display_name``, ``base_url``, ``default_model``
    and ``features``, and implement ``parse_models``. Everything else (HTTP
    client, status handling, completion decoding) is shared.
    """

    name: str = ""
    display_name: str = ""
    base_url: str = ""
    default_model: str = ""
    features: frozenset[Feature] = frozenset({Feature.TEXT_GENERATION})

    def __init__(
        self,
        config: ProviderConfig,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self.config = config
        self.timeout = httpx.Timeout(config.timeout or DEFAULT_TIMEOUT)
        self._transport = transport
        self._client: httpx.Client | None = None

    # ── HTTP plumbing ─────────────────────────────────────────────────

    def _build_client(self) -> httpx.Client:
        headers = {
            "Accept": "application/json",
            "Authorization": f"Bearer {self.config.api_key}",
        }
        return httpx.Client(
            base_url=self.base_url,
            headers=headers,
            timeout=self.timeout,
            transport=self._transport,
        )

    @property
    def client(self) -> httpx.Client:
        if self._client is None:
            self._client = self._build_client()
        return self._client

    def close(self) -> None:
        if self._client is not None:
            self._client.close()
            self._client = None

    def __enter__(self) -> AIProvider:
        return self

    def __exit__(self, *exc: object) -> None:
        self.close()

    def _send(self, method: str, path: str, phase: str = "generate", **kwargs: Any) -> httpx.Response:
        """Issue one request; map transport failures and non-2xx statuses to errors."""
        try:
            resp = self.client.request(method, path, **kwargs)
        except httpx.TransportError as exc:
            raise NetworkError(self.name, f"API request failed: {exc}", phase) from exc

        if not resp.is_success:
            raise APIError(self.name, resp.status_code, self.extract_error_message(resp.text), phase)
        return resp

    def extract_error_message(self, body: str) -> str:
        """Pull the message out of a ``{"message": ...}`` error body, else return the raw body."""
        try:
            envelope = MessageErrorEnvelope.model_validate_json(body)
        except ValidationError:
            return body.strip()
        return envelope.message or body.strip()

    def _decode(self, schema: type[SchemaT], body: str | bytes, phase: str) -> SchemaT:
        try:
            return schema.model_validate_json(body)
        except ValidationError as exc:
            raise DecodeError(self.name, f"response parsing failed: {exc}", phase) from exc

    # ── Capability contract ───────────────────────────────────────────

    def supports(self, feature: Feature) -> bool:
        return feature in self.features

    @property
    def model(self) -> str:
        return self.config.model or self.default_model

    def check_capabilities(self, inputs: Inputs) -> None:
        """Reject inputs this provider cannot handle, before any network I/O."""
        if inputs.images and not self.supports(Feature.VISION):
            raise CapabilityError(self.name, f"{self.display_name} does not support image analysis")

    def build_request(self, inputs: Inputs) -> ChatRequest:
        """Build the chat-completion payload: one user message with the raw prompt."""
        return ChatRequest(
            model=self.model,
            messages=[ChatMessage(role="user", content=inputs.prompt)],
        )

    def post_completion(self, request: ChatRequest) -> httpx.Response:
        return self._send("POST", "/chat/completions", json=request.model_dump())

    def parse_completion(self, body: str | bytes) -> str:
        """Decode a chat-completion body and return the first choice's content."""
        response = self._decode(ChatResponse, body, "generate")
        if not response.choices:
            raise EmptyResultError(self.name, "no content in response")
        return response.choices[0].message.content or ""

    def generate(self, inputs: Inputs) -> str:
        """Generate a response for the given inputs.

        Raises:
            CapabilityError: images given to a text-only provider.
            NetworkError: transport failure or timeout.
            APIError: non-2xx response.
            DecodeError: malformed 2xx body.
            EmptyResultError: zero choices.
        """
        self.check_capabilities(inputs)
        request = self.build_request(inputs)
        logger.debug("%s: POST /chat/completions model=%s images=%d", self.name, request.model, len(inputs.images))
        resp = self.post_completion(request)
        return self.parse_completion(resp.content)

    def list_models(self) -> list[Model]:
        """List the models this provider hosts, mapped to the common Model shape."""
        resp = self._send("GET", "/models", phase="list_models")
        return self.parse_models(resp.content)

    @abstractmethod
    def parse_models(self, body: str | bytes) -> list[Model]:
        """Decode a provider-specific ``/models`` body into Model records."""
