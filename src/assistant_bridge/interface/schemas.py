"""Pydantic request / response DTOs for the API boundary."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from assistant_bridge.domain.entities import (
    ContentPart,
    IncomingMessage,
    IncomingMessageType,
    Message,
    Prompt,
    Role,
)

# ── Completions ─────────────────────────────────────────────────────────────


class ImageUrlSchema(BaseModel):
    url: str


class ContentPartSchema(BaseModel):
    """One part of a multi-part message, in the OpenAI wire shape."""

    type: Literal["text", "image_url"]
    text: str | None = None
    image_url: ImageUrlSchema | None = None

    @model_validator(mode="after")
    def _image_part_has_url(self) -> ContentPartSchema:
        if self.type == "image_url" and self.image_url is None:
            msg = "image_url part requires an image_url object."
            raise ValueError(msg)
        return self

    def to_domain(self) -> ContentPart:
        if self.image_url is not None and self.type == "image_url":
            return ContentPart.of_image(self.image_url.url)
        return ContentPart.of_text(self.text or "")


class MessageSchema(BaseModel):
    role: Literal["system", "assistant", "user"]
    content: str | list[ContentPartSchema]

    def to_domain(self) -> Message:
        if isinstance(self.content, str):
            return Message(role=Role(self.role), content=self.content)
        return Message(
            role=Role(self.role),
            content=tuple(part.to_domain() for part in self.content),
        )


class CompletionRequest(BaseModel):
    """Request body for ``POST /completions``."""

    messages: list[MessageSchema]

    @field_validator("messages")
    @classmethod
    def _must_not_be_empty(cls, v: list[MessageSchema]) -> list[MessageSchema]:
        if not v:
            msg = "messages must not be empty."
            raise ValueError(msg)
        return v

    def to_prompt(self) -> Prompt:
        return Prompt.of([message.to_domain() for message in self.messages])


class CompletionResponse(BaseModel):
    """Successful response from ``POST /completions``."""

    text: str
    finish_reason: str
    is_finish_reason_stop: bool


# ── Images ──────────────────────────────────────────────────────────────────


class ImageRequest(BaseModel):
    """Request body for ``POST /images``."""

    prompt: str = Field(min_length=1)
    size: str | None = None
    quality: str | None = None
    n: int = Field(default=1, ge=1, le=10)


class ImageResponse(BaseModel):
    urls: list[str]


# ── LINE webhook ────────────────────────────────────────────────────────────


class LineMessagePayload(BaseModel):
    id: str
    type: str
    text: str | None = None


class LineEventPayload(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    type: str
    reply_token: str | None = Field(default=None, alias="replyToken")
    message: LineMessagePayload | None = None


class LineWebhookRequest(BaseModel):
    """Body LINE posts to the webhook endpoint."""

    destination: str | None = None
    events: list[LineEventPayload] = Field(default_factory=list)

    def to_incoming_messages(self) -> list[IncomingMessage]:
        """Keep only message events the bot can answer."""
        supported = {t.value for t in IncomingMessageType}
        incoming: list[IncomingMessage] = []
        for event in self.events:
            if event.type != "message" or not event.reply_token or event.message is None:
                continue
            if event.message.type not in supported:
                continue
            incoming.append(
                IncomingMessage(
                    reply_token=event.reply_token,
                    message_id=event.message.id,
                    type=IncomingMessageType(event.message.type),
                    text=event.message.text,
                )
            )
        return incoming


class WebhookResponse(BaseModel):
    status: str = "ok"
    replied: int = 0


class ErrorResponse(BaseModel):
    """Standard error envelope returned on all failure paths."""

    status: str = "error"
    message: str
