"""Tests for infrastructure/openai_media_adapter.py — images and transcription."""

from __future__ import annotations

import pytest

from assistant_bridge.domain.exceptions import ProviderError
from assistant_bridge.infrastructure.openai_media_adapter import OpenAIMediaAdapter

_IMAGES = "/v1/images/generations"
_TRANSCRIPTIONS = "/v1/audio/transcriptions"


class TestCreateImage:
    @pytest.mark.asyncio
    async def test_uses_defaults(self, handler, make_transport):
        handler.on("POST", _IMAGES, {"data": [{"url": "https://img/1.png"}]})
        adapter = OpenAIMediaAdapter(make_transport(handler))

        urls = await adapter.create_image("a red fox")

        assert urls == ["https://img/1.png"]
        assert handler.body(handler.requests[0]) == {
            "model": "dall-e-2",
            "prompt": "a red fox",
            "size": "256x256",
            "quality": "standard",
            "n": 1,
        }

    @pytest.mark.asyncio
    async def test_large_model_size_is_clamped(self, handler, make_transport):
        handler.on("POST", _IMAGES, {"data": [{"url": "https://img/1.png"}]})
        adapter = OpenAIMediaAdapter(make_transport(handler), image_model="dall-e-3", image_size="512x512")

        await adapter.create_image("a red fox", quality="hd")

        body = handler.body(handler.requests[0])
        assert body["size"] == "1024x1024"
        assert body["quality"] == "hd"

    @pytest.mark.asyncio
    async def test_empty_result(self, handler, make_transport):
        handler.on("POST", _IMAGES, {"data": []})

        with pytest.raises(ProviderError):
            await OpenAIMediaAdapter(make_transport(handler)).create_image("nothing")


class TestCreateAudioTranscription:
    @pytest.mark.asyncio
    async def test_multipart_upload(self, handler, make_transport):
        handler.on("POST", _TRANSCRIPTIONS, {"text": "hello world"})
        adapter = OpenAIMediaAdapter(make_transport(handler))

        text = await adapter.create_audio_transcription(b"\x00\x01audio", "voice.m4a")

        assert text == "hello world"
        request = handler.requests[0]
        assert request.headers["content-type"].startswith("multipart/form-data")
        assert b'name="model"' in request.content
        assert b"whisper-1" in request.content
        assert b'filename="voice.m4a"' in request.content

    @pytest.mark.asyncio
    async def test_missing_text(self, handler, make_transport):
        handler.on("POST", _TRANSCRIPTIONS, {})

        with pytest.raises(ProviderError):
            await OpenAIMediaAdapter(make_transport(handler)).create_audio_transcription(b"x", "a.m4a")
