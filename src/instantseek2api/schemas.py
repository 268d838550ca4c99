"""OpenAI-compatible and InstantSeek request/response models."""
from typing import Optional
from pydantic import BaseModel, Field, field_validator

SUPPORTED_MODEL = "deepseek-chat"


# ── Request (OpenAI side) ────────────────────────────────────────────

class ChatMessage(BaseModel):
    role: str = ""
    content: str = ""

    @field_validator("role", "content", mode="before")
    @classmethod
    def _null_as_empty(cls, value):
        # JSON null reads as an empty string, like a missing field
        return "" if value is None else value


class ChatCompletionRequest(BaseModel):
    model: str = ""
    messages: list[ChatMessage] = []
    stream: bool = False


# ── Upstream (InstantSeek side) ──────────────────────────────────────

class UpstreamRequest(BaseModel):
    message: str
    # Always null: every request starts a fresh upstream conversation
    conversation_id: Optional[str] = Field(default=None, serialization_alias="conversationId")


class UpstreamResponse(BaseModel):
    response: str
    conversation_id: str = ""


# ── Response (non-streaming) ─────────────────────────────────────────

class ChatCompletionChoice(BaseModel):
    message: ChatMessage
    finish_reason: str = "stop"
    index: int = 0


class ChatCompletionResponse(BaseModel):
    id: str
    object: str = "chat.completion"
    created: int
    model: str = SUPPORTED_MODEL
    choices: list[ChatCompletionChoice]


# ── Response (streaming) ─────────────────────────────────────────────

class DeltaContent(BaseModel):
    role: Optional[str] = None
    content: Optional[str] = None


class StreamChoice(BaseModel):
    index: int = 0
    delta: DeltaContent
    finish_reason: Optional[str] = None


class ChatCompletionChunk(BaseModel):
    id: str
    object: str = "chat.completion.chunk"
    created: int
    model: str = SUPPORTED_MODEL
    choices: list[StreamChoice]
