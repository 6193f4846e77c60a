"""Domain entities — pure data structures with no external dependencies."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Sequence


class Role(str, Enum):
    """Author of a conversation message."""

    SYSTEM = "system"
    ASSISTANT = "assistant"
    USER = "user"


class FinishReason(str, Enum):
    """Why the provider stopped producing tokens."""

    STOP = "stop"
    LENGTH = "length"
    UNKNOWN = "unknown"

    @classmethod
    def from_raw(cls, value: str | None) -> FinishReason:
        """Map a provider-reported reason onto the known set."""
        try:
            return cls(value)
        except ValueError:
            return cls.UNKNOWN


@dataclass(frozen=True, slots=True)
class ContentPart:
    """One segment of a multi-part message: text or an image reference."""

    type: str  # "text" or "image_url"
    text: str | None = None
    image_url: str | None = None

    @classmethod
    def of_text(cls, text: str) -> ContentPart:
        return cls(type="text", text=text)

    @classmethod
    def of_image(cls, url: str) -> ContentPart:
        return cls(type="image_url", image_url=url)

    @property
    def is_image(self) -> bool:
        return self.image_url is not None

    def to_payload(self) -> dict[str, Any]:
        if self.is_image:
            return {"type": "image_url", "image_url": {"url": self.image_url}}
        return {"type": "text", "text": self.text or ""}


@dataclass(frozen=True, slots=True)
class Message:
    """A single chat message; ``content`` is plain text or a tuple of parts."""

    role: Role
    content: str | tuple[ContentPart, ...]

    @property
    def has_image(self) -> bool:
        if isinstance(self.content, str):
            return False
        return any(part.is_image for part in self.content)

    def content_payload(self) -> str | list[dict[str, Any]]:
        if isinstance(self.content, str):
            return self.content
        return [part.to_payload() for part in self.content]

    def to_payload(self) -> dict[str, Any]:
        return {"role": self.role.value, "content": self.content_payload()}


@dataclass(frozen=True, slots=True)
class Prompt:
    """An ordered, chronological sequence of messages owned by the caller."""

    messages: tuple[Message, ...]

    @classmethod
    def of(cls, messages: Sequence[Message]) -> Prompt:
        return cls(messages=tuple(messages))

    def last_user_message(self) -> Message | None:
        """Return the most recent ``user`` message, if any."""
        for message in reversed(self.messages):
            if message.role is Role.USER:
                return message
        return None

    def to_payload(self) -> list[dict[str, Any]]:
        return [message.to_payload() for message in self.messages]


@dataclass(frozen=True, slots=True)
class Completion:
    """Normalized completion result handed back to callers."""

    text: str
    finish_reason: FinishReason = FinishReason.UNKNOWN

    @property
    def is_finish_reason_stop(self) -> bool:
        return self.finish_reason is FinishReason.STOP


class IncomingMessageType(str, Enum):
    """Kinds of chat-platform messages the bot knows how to answer."""

    TEXT = "text"
    IMAGE = "image"
    AUDIO = "audio"


@dataclass(frozen=True, slots=True)
class IncomingMessage:
    """A user message received from the chat platform's webhook."""

    reply_token: str
    message_id: str
    type: IncomingMessageType
    text: str | None = None


@dataclass(frozen=True, slots=True)
class CompletionParams:
    """Tunable parameters for a single chat-completion call."""

    model: str
    temperature: float = 1.0
    max_tokens: int = 64
    frequency_penalty: float = 0.0
    presence_penalty: float = 0.6
