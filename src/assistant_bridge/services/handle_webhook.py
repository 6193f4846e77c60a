"""Handle-webhook use case — answer chat-platform messages with completions."""

from __future__ import annotations

import base64
import logging
from typing import Sequence

from assistant_bridge.domain.entities import (
    ContentPart,
    IncomingMessage,
    IncomingMessageType,
    Message,
    Prompt,
    Role,
)
from assistant_bridge.domain.exceptions import AssistantBridgeError, MessagingError
from assistant_bridge.domain.ports.media_gateway import MediaGateway
from assistant_bridge.domain.ports.messaging_gateway import MessagingGateway
from assistant_bridge.services.generate_completion import CompletionOrchestrator

logger = logging.getLogger(__name__)


class HandleWebhookUseCase:
    """Builds a prompt per incoming message, generates, and replies.

    No conversation history is kept: each prompt is the optional init prompt
    followed by the single message just received.
    """

    def __init__(
        self,
        orchestrator: CompletionOrchestrator,
        messaging: MessagingGateway,
        media: MediaGateway,
        init_prompt: str = "",
        error_message_disabled: bool = False,
        bot_deactivated: bool = False,
    ) -> None:
        self._orchestrator = orchestrator
        self._messaging = messaging
        self._media = media
        self._init_prompt = init_prompt
        self._error_message_disabled = error_message_disabled
        self._bot_deactivated = bot_deactivated

    async def execute(self, messages: Sequence[IncomingMessage]) -> int:
        """Answer every message in order; return how many replies were sent."""
        if self._bot_deactivated:
            logger.info("Bot is deactivated, ignoring %d message(s)", len(messages))
            return 0

        replied = 0
        for message in messages:
            if await self._handle(message):
                replied += 1
        return replied

    async def build_prompt(self, message: IncomingMessage) -> Prompt:
        """Translate one incoming message into a prompt."""
        messages: list[Message] = []
        if self._init_prompt:
            messages.append(Message(role=Role.SYSTEM, content=self._init_prompt))

        if message.type is IncomingMessageType.IMAGE:
            raw = await self._messaging.fetch_content(message.message_id)
            data_url = "data:image/jpeg;base64," + base64.b64encode(raw).decode("ascii")
            messages.append(Message(role=Role.USER, content=(ContentPart.of_image(data_url),)))
        elif message.type is IncomingMessageType.AUDIO:
            raw = await self._messaging.fetch_content(message.message_id)
            text = await self._media.create_audio_transcription(raw, f"{message.message_id}.m4a")
            messages.append(Message(role=Role.USER, content=text))
        else:
            messages.append(Message(role=Role.USER, content=message.text or ""))
        return Prompt.of(messages)

    async def _handle(self, message: IncomingMessage) -> bool:
        try:
            prompt = await self.build_prompt(message)
            completion = await self._orchestrator.generate(prompt)
        except AssistantBridgeError as exc:
            logger.error("Failed to answer message %s: %s", message.message_id, exc)
            if self._error_message_disabled:
                return False
            text = str(exc)
        else:
            text = completion.text

        try:
            await self._messaging.reply(message.reply_token, text)
        except MessagingError as exc:
            logger.error("Failed to reply to message %s: %s", message.message_id, exc)
            return False
        return True
