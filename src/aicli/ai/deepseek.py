"""DeepSeek provider — text-only chat completions.

Models: deepseek-chat (V3, general purpose) and deepseek-reasoner (R1),
both with a 64K context window and no image input.
"""

from __future__ import annotations

from aicli.ai.base import AIProvider, Feature, Model
from aicli.ai.schemas import DeepSeekModelList

DEEPSEEK_BASE_URL = "https://api.deepseek.com/v1"
DEEPSEEK_DEFAULT_MODEL = "deepseek-chat"
DEEPSEEK_DEFAULT_CONTEXT_WINDOW = 64000


class DeepSeekProvider(AIProvider):
    """DeepSeek chat-completions provider."""

    name = "deepseek"
    display_name = "DeepSeek"
    base_url = DEEPSEEK_BASE_URL
    default_model = DEEPSEEK_DEFAULT_MODEL
    features = frozenset({Feature.TEXT_GENERATION})

    def parse_models(self, body: str | bytes) -> list[Model]:
        listing = self._decode(DeepSeekModelList, body, "list_models")
        return [
            Model(
                id=m.id,
                description=m.capabilities.description or f"DeepSeek model: {m.id}",
                context_window=m.capabilities.context_length or DEEPSEEK_DEFAULT_CONTEXT_WINDOW,
                supports_vision=False,
            )
            for m in listing.data
        ]
