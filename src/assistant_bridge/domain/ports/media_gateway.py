"""Port: media gateway — image generation and speech-to-text."""

from __future__ import annotations

from typing import Protocol


class MediaGateway(Protocol):
    """Abstract contract for the provider's non-chat endpoints."""

    async def create_image(
        self,
        prompt: str,
        *,
        model: str | None = None,
        size: str | None = None,
        quality: str | None = None,
        n: int = 1,
    ) -> list[str]:
        """Generate images for *prompt* and return their URLs."""
        ...

    async def create_audio_transcription(
        self, buffer: bytes, filename: str, *, model: str | None = None
    ) -> str:
        """Transcribe an audio file and return the text."""
        ...
