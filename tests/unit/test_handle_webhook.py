"""Tests for services/handle_webhook.py — prompt building and replies."""

from __future__ import annotations

from unittest.mock import AsyncMock

import pytest

from assistant_bridge.domain.entities import (
    Completion,
    FinishReason,
    IncomingMessage,
    IncomingMessageType,
    Role,
)
from assistant_bridge.domain.exceptions import MessagingError, ProviderError
from assistant_bridge.services.handle_webhook import HandleWebhookUseCase


def _text(text: str = "hello", token: str = "tok") -> IncomingMessage:
    return IncomingMessage(reply_token=token, message_id="m1", type=IncomingMessageType.TEXT, text=text)


@pytest.fixture
def orchestrator() -> AsyncMock:
    mock = AsyncMock()
    mock.generate.return_value = Completion(text="answer", finish_reason=FinishReason.STOP)
    return mock


@pytest.fixture
def messaging() -> AsyncMock:
    mock = AsyncMock()
    mock.fetch_content.return_value = b"\x01\x02"
    return mock


@pytest.fixture
def media() -> AsyncMock:
    mock = AsyncMock()
    mock.create_audio_transcription.return_value = "transcribed words"
    return mock


def _use_case(orchestrator, messaging, media, **kwargs) -> HandleWebhookUseCase:
    return HandleWebhookUseCase(orchestrator=orchestrator, messaging=messaging, media=media, **kwargs)


class TestBuildPrompt:
    @pytest.mark.asyncio
    async def test_text_with_init_prompt(self, orchestrator, messaging, media):
        uc = _use_case(orchestrator, messaging, media, init_prompt="You are helpful.")

        prompt = await uc.build_prompt(_text("hi"))

        assert [m.role for m in prompt.messages] == [Role.SYSTEM, Role.USER]
        assert prompt.messages[1].content == "hi"

    @pytest.mark.asyncio
    async def test_text_without_init_prompt(self, orchestrator, messaging, media):
        prompt = await _use_case(orchestrator, messaging, media).build_prompt(_text("hi"))
        assert len(prompt.messages) == 1

    @pytest.mark.asyncio
    async def test_image_becomes_data_url_part(self, orchestrator, messaging, media):
        msg = IncomingMessage(reply_token="t", message_id="img1", type=IncomingMessageType.IMAGE)

        prompt = await _use_case(orchestrator, messaging, media).build_prompt(msg)

        messaging.fetch_content.assert_awaited_once_with("img1")
        user = prompt.messages[-1]
        assert user.has_image
        assert user.content[0].image_url == "data:image/jpeg;base64,AQI="

    @pytest.mark.asyncio
    async def test_audio_is_transcribed(self, orchestrator, messaging, media):
        msg = IncomingMessage(reply_token="t", message_id="aud1", type=IncomingMessageType.AUDIO)

        prompt = await _use_case(orchestrator, messaging, media).build_prompt(msg)

        media.create_audio_transcription.assert_awaited_once_with(b"\x01\x02", "aud1.m4a")
        assert prompt.messages[-1].content == "transcribed words"


class TestExecute:
    @pytest.mark.asyncio
    async def test_replies_with_completion(self, orchestrator, messaging, media):
        replied = await _use_case(orchestrator, messaging, media).execute([_text(token="abc")])

        assert replied == 1
        messaging.reply.assert_awaited_once_with("abc", "answer")

    @pytest.mark.asyncio
    async def test_handles_each_message(self, orchestrator, messaging, media):
        replied = await _use_case(orchestrator, messaging, media).execute(
            [_text(token="a"), _text(token="b")]
        )
        assert replied == 2
        assert orchestrator.generate.await_count == 2

    @pytest.mark.asyncio
    async def test_error_is_replied(self, orchestrator, messaging, media):
        orchestrator.generate.side_effect = ProviderError("quota exceeded")

        replied = await _use_case(orchestrator, messaging, media).execute([_text(token="abc")])

        assert replied == 1
        messaging.reply.assert_awaited_once_with("abc", "quota exceeded")

    @pytest.mark.asyncio
    async def test_error_message_disabled(self, orchestrator, messaging, media):
        orchestrator.generate.side_effect = ProviderError("quota exceeded")
        uc = _use_case(orchestrator, messaging, media, error_message_disabled=True)

        assert await uc.execute([_text()]) == 0
        messaging.reply.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_deactivated_bot_ignores_messages(self, orchestrator, messaging, media):
        uc = _use_case(orchestrator, messaging, media, bot_deactivated=True)

        assert await uc.execute([_text()]) == 0
        orchestrator.generate.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_delivery_failure_does_not_stop_remaining_events(self, orchestrator, messaging, media):
        messaging.reply.side_effect = [MessagingError("token expired"), None]
        uc = _use_case(orchestrator, messaging, media)

        replied = await uc.execute([_text("first", token="t1"), _text("second", token="t2")])

        assert replied == 1
        assert orchestrator.generate.await_count == 2
        assert messaging.reply.await_args_list[1].args == ("t2", "answer")
