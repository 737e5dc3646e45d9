"""Mistral provider — text-only chat completions with a bounded retry.

Models:
- ministral-8b-latest: lightweight text generation (32K context)
- mixtral-8x7b-instruct: high-quality text (32K context)
- mistral-large-latest: advanced reasoning (128K context)
"""

from __future__ import annotations

import logging
import time

import httpx

from aicli.ai.base import AIProvider, Feature, Model
from aicli.ai.schemas import ChatRequest, MistralModelList
from aicli.config import ProviderConfig
from aicli.errors import NetworkError

logger = logging.getLogger(__name__)

MISTRAL_BASE_URL = "https://api.mistral.ai/v1"
MISTRAL_DEFAULT_MODEL = "mistral-small-latest"
MISTRAL_MAX_RETRIES = 2
MISTRAL_RETRY_DELAY = 1.0


def guess_context_window(model_id: str) -> int:
    """Best-effort context size from the model id; /models does not report it."""
    if "large" in model_id:
        return 128000
    if "8x22b" in model_id or "8x7b" in model_id or "ministral-8b" in model_id:
        return 32000
    return 32000


class MistralProvider(AIProvider):
    """Mistral chat-completions provider.

    Transport failures are retried up to ``max_retries`` attempts with a fixed
    delay. HTTP error statuses are returned on the first attempt.
    """

    name = "mistral"
    display_name = "Mistral"
    base_url = MISTRAL_BASE_URL
    default_model = MISTRAL_DEFAULT_MODEL
    features = frozenset({Feature.TEXT_GENERATION})

    def __init__(
        self,
        config: ProviderConfig,
        transport: httpx.BaseTransport | None = None,
        max_retries: int = MISTRAL_MAX_RETRIES,
        retry_delay: float = MISTRAL_RETRY_DELAY,
    ) -> None:
        super().__init__(config, transport=transport)
        self.max_retries = max_retries
        self.retry_delay = retry_delay

    def _trace(self, msg: str, *args: object) -> None:
        if self.config.debug:
            logger.debug(msg, *args)

    def post_completion(self, request: ChatRequest) -> httpx.Response:
        url = f"{self.base_url}/chat/completions"
        last_error: NetworkError | None = None

        for attempt in range(1, self.max_retries + 1):
            start = time.monotonic()
            self._trace(
                "Attempt %d: POST %s model=%s api_key=%s",
                attempt, url, request.model, self.config.masked_key,
            )
            try:
                resp = self._send("POST", "/chat/completions", json=request.model_dump())
            except NetworkError as exc:
                last_error = exc
                self._trace("Attempt %d failed after %.2fs: %s", attempt, time.monotonic() - start, exc)
                if attempt < self.max_retries:
                    logger.warning(
                        "Mistral request failed (attempt %d/%d), retrying in %.1fs: %s",
                        attempt, self.max_retries, self.retry_delay, exc,
                    )
                    time.sleep(self.retry_delay)
                continue
            except Exception as exc:
                self._trace("Attempt %d: %s (%.2fs)", attempt, exc, time.monotonic() - start)
                raise

            self._trace(
                "Attempt %d: status=%d elapsed=%.2fs body=%s",
                attempt, resp.status_code, time.monotonic() - start, resp.text,
            )
            return resp

        if last_error is None:
            raise NetworkError(self.name, "no request attempts were made")  # pragma: no cover
        raise last_error

    def parse_models(self, body: str | bytes) -> list[Model]:
        listing = self._decode(MistralModelList, body, "list_models")
        return [
            Model(
                id=m.id,
                description=f"Mistral model: {m.id}",
                context_window=guess_context_window(m.id),
                supports_vision=False,
            )
            for m in listing.data
        ]
