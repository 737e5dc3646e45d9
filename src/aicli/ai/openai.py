"""OpenAI provider — text and vision chat completions over the REST API."""

from __future__ import annotations

import base64
import logging
from pathlib import PurePath

from pydantic import ValidationError

from aicli.ai.base import AIProvider, Feature, Inputs, Model
from aicli.ai.schemas import (
    ChatMessage,
    ChatRequest,
    ImageBlock,
    ImageURL,
    OpenAIErrorEnvelope,
    OpenAIModelList,
    TextBlock,
)

logger = logging.getLogger(__name__)

OPENAI_BASE_URL = "https://api.openai.com/v1"
OPENAI_DEFAULT_TEXT_MODEL = "gpt-4"
# Any image-capable model works here: gpt-4o, gpt-4o-mini, gpt-4-turbo, o1
OPENAI_VISION_MODEL = "gpt-4o-mini"
OPENAI_DEFAULT_CONTEXT_WINDOW = 4096

_MIME_TYPES = {
    ".png": "png",
    ".jpg": "jpeg",
    ".jpeg": "jpeg",
    ".gif": "gif",
}


def image_mime_type(filename: str) -> str:
    """Map a filename extension to the image subtype used in data URLs."""
    return _MIME_TYPES.get(PurePath(filename).suffix.lower(), "jpeg")


def image_data_url(data: bytes, filename: str) -> str:
    encoded = base64.b64encode(data).decode("ascii")
    return f"data:image/{image_mime_type(filename)};base64,{encoded}"


# Best-effort guesses from the model id. The /models endpoint does not report
# context size or modalities, so these stand in until a real lookup exists.

def guess_context_window(model_id: str) -> int:
    if "128k" in model_id:
        return 128000
    if "32k" in model_id:
        return 32000
    if "16k" in model_id:
        return 16000
    return OPENAI_DEFAULT_CONTEXT_WINDOW


def guess_vision_support(model_id: str) -> bool:
    return "vision" in model_id or "gpt-4o" in model_id or "turbo-vision" in model_id


class OpenAIProvider(AIProvider):
    """OpenAI chat-completions provider with image input support."""

    name = "openai"
    display_name = "OpenAI"
    base_url = OPENAI_BASE_URL
    default_model = OPENAI_DEFAULT_TEXT_MODEL
    features = frozenset({Feature.TEXT_GENERATION, Feature.VISION, Feature.MULTI_MODAL})

    def build_request(self, inputs: Inputs) -> ChatRequest:
        if not inputs.images:
            return super().build_request(inputs)

        # Vision requests always go to the vision model, whatever the text override
        content: list[TextBlock | ImageBlock] = [TextBlock(text=inputs.prompt)]
        for image in inputs.images:
            content.append(ImageBlock(image_url=ImageURL(url=image_data_url(image.data, image.filename))))
        return ChatRequest(
            model=OPENAI_VISION_MODEL,
            messages=[ChatMessage(role="user", content=content)],
        )

    def extract_error_message(self, body: str) -> str:
        try:
            envelope = OpenAIErrorEnvelope.model_validate_json(body)
        except ValidationError:
            return body.strip()
        return envelope.error.message or body.strip()

    def parse_models(self, body: str | bytes) -> list[Model]:
        listing = self._decode(OpenAIModelList, body, "list_models")
        return [
            Model(
                id=m.id,
                description=f"{m.id} ({m.owned_by})" if m.owned_by else m.id,
                context_window=guess_context_window(m.id),
                supports_vision=guess_vision_support(m.id),
            )
            for m in listing.data
        ]
