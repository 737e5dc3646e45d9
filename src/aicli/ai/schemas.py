"""Wire records for the chat-completion and model-listing endpoints.

Requests are built from these models and serialized with ``model_dump``;
responses are decoded with ``model_validate_json`` so an unexpected shape
surfaces as a ``ValidationError`` instead of a silent missing key.
"""

from __future__ import annotations

from typing import Literal, Optional, Union

from pydantic import BaseModel, Field

MAX_TOKENS = 1000


# ── Requests ──────────────────────────────────────────────────────────


class TextBlock(BaseModel):
    type: Literal["text"] = "text"
    text: str


class ImageURL(BaseModel):
    url: str


class ImageBlock(BaseModel):
    type: Literal["image_url"] = "image_url"
    image_url: ImageURL


class ChatMessage(BaseModel):
    role: str = "user"
    content: Union[str, list[Union[TextBlock, ImageBlock]]]


class ChatRequest(BaseModel):
    model: str
    messages: list[ChatMessage]
    max_tokens: int = MAX_TOKENS


# ── Responses ─────────────────────────────────────────────────────────


class ChoiceMessage(BaseModel):
    role: Optional[str] = None
    content: Optional[str] = None


class Choice(BaseModel):
    index: int = 0
    message: ChoiceMessage
    finish_reason: Optional[str] = None


class ChatResponse(BaseModel):
    choices: list[Choice]


class OpenAIErrorDetail(BaseModel):
    message: str = ""


class OpenAIErrorEnvelope(BaseModel):
    """OpenAI nests the message: ``{"error": {"message": ...}}``."""

    error: OpenAIErrorDetail


class MessageErrorEnvelope(BaseModel):
    """DeepSeek and Mistral use a flat ``{"message": ...}`` body."""

    message: str = ""


class OpenAIModelEntry(BaseModel):
    id: str
    owned_by: str = ""
    created: Optional[int] = None


class OpenAIModelList(BaseModel):
    data: list[OpenAIModelEntry] = Field(default_factory=list)


class DeepSeekCapabilities(BaseModel):
    description: Optional[str] = None
    context_length: Optional[int] = None


class DeepSeekModelEntry(BaseModel):
    id: str
    capabilities: DeepSeekCapabilities = Field(default_factory=DeepSeekCapabilities)


class DeepSeekModelList(BaseModel):
    data: list[DeepSeekModelEntry] = Field(default_factory=list)


class MistralModelEntry(BaseModel):
    id: str
    owned_by: str = ""
    created: Optional[int] = None


class MistralModelList(BaseModel):
    data: list[MistralModelEntry] = Field(default_factory=list)
