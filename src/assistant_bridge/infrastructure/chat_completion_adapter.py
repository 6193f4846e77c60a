"""Chat-completions adapter — the stateless ``CompletionStrategy``."""

from __future__ import annotations

import logging
from typing import Any

from openai.types.chat import ChatCompletionMessage

from assistant_bridge.domain.entities import (
    Completion,
    CompletionParams,
    FinishReason,
    Prompt,
)
from assistant_bridge.domain.exceptions import ProviderError
from assistant_bridge.infrastructure.openai_transport import OpenAITransport
from assistant_bridge.services.request_shaper import MODEL_GPT_4_OMNI, select_model

logger = logging.getLogger(__name__)


class ChatCompletionStrategy:
    """Produces a completion with a single ``chat.completions.create`` call."""

    def __init__(
        self,
        transport: OpenAITransport,
        defaults: CompletionParams,
        vision_model: str = MODEL_GPT_4_OMNI,
    ) -> None:
        self._transport = transport
        self._defaults = defaults
        self._vision_model = vision_model

    def build_body(
        self, prompt: Prompt, params: CompletionParams | None = None
    ) -> dict[str, Any]:
        """Assemble the request body for *prompt*."""
        params = params or self._defaults
        return {
            "model": select_model(prompt.messages, params.model, self._vision_model),
            "messages": prompt.to_payload(),
            "temperature": params.temperature,
            "max_tokens": params.max_tokens,
            "frequency_penalty": params.frequency_penalty,
            "presence_penalty": params.presence_penalty,
        }

    async def complete(
        self, prompt: Prompt, params: CompletionParams | None = None
    ) -> Completion:
        """Send *prompt* and return the first choice, trimmed."""
        body = self.build_body(prompt, params)
        logger.debug("Chat completion with model %s", body["model"])
        response = await self._transport.call(
            lambda client: client.chat.completions.create(**body),
            "chat completion",
        )

        choices = getattr(response, "choices", None)
        if not isinstance(choices, list) or not choices:
            raise ProviderError("Chat completion response contained no choices.")

        choice = choices[0]
        message = getattr(choice, "message", None)
        content = getattr(message, "content", None)
        if not isinstance(message, ChatCompletionMessage) or not (
            content is None or isinstance(content, str)
        ):
            raise ProviderError("Malformed chat completion choice.")

        return Completion(
            text=(content or "").strip(),
            finish_reason=FinishReason.from_raw(getattr(choice, "finish_reason", None)),
        )
