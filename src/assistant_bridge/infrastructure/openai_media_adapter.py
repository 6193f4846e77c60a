"""OpenAI media adapter — implements the MediaGateway port."""

from __future__ import annotations

import logging

from assistant_bridge.domain.exceptions import ProviderError
from assistant_bridge.infrastructure.openai_transport import OpenAITransport
from assistant_bridge.services.request_shaper import (
    IMAGE_SIZE_256,
    MODEL_DALL_E_2,
    MODEL_WHISPER_1,
    clamp_image_size,
)

logger = logging.getLogger(__name__)


class OpenAIMediaAdapter:
    """Image generation and audio transcription over the shared transport."""

    def __init__(
        self,
        transport: OpenAITransport,
        image_model: str = MODEL_DALL_E_2,
        image_size: str = IMAGE_SIZE_256,
        image_quality: str = "standard",
        transcription_model: str = MODEL_WHISPER_1,
    ) -> None:
        self._transport = transport
        self._image_model = image_model
        self._image_size = image_size
        self._image_quality = image_quality
        self._transcription_model = transcription_model

    async def create_image(
        self,
        prompt: str,
        *,
        model: str | None = None,
        size: str | None = None,
        quality: str | None = None,
        n: int = 1,
    ) -> list[str]:
        """Generate *n* images for *prompt* and return their URLs."""
        model = model or self._image_model
        size = clamp_image_size(model, size or self._image_size)
        response = await self._transport.call(
            lambda client: client.images.generate(
                model=model,
                prompt=prompt,
                size=size,  # type: ignore[arg-type]
                quality=quality or self._image_quality,  # type: ignore[arg-type]
                n=n,
            ),
            "image generation",
        )
        items = getattr(response, "data", None) or []
        urls = [
            url
            for url in (getattr(item, "url", None) for item in items)
            if isinstance(url, str) and url
        ]
        if not urls:
            raise ProviderError("Image generation returned no images.")
        logger.info("Generated %d image(s) with %s at %s", len(urls), model, size)
        return urls

    async def create_audio_transcription(
        self, buffer: bytes, filename: str, *, model: str | None = None
    ) -> str:
        """Upload *buffer* as *filename* and return the transcript."""
        result = await self._transport.call(
            lambda client: client.audio.transcriptions.create(
                model=model or self._transcription_model,
                file=(filename, buffer),
            ),
            "audio transcription",
        )
        text = getattr(result, "text", None)
        if not isinstance(text, str):
            raise ProviderError("Transcription response contained no text.")
        return text
