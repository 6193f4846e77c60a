"""Tests for domain/entities.py — messages, prompts and completions."""

from __future__ import annotations

import dataclasses

import pytest

from assistant_bridge.domain.entities import (
    Completion,
    ContentPart,
    FinishReason,
    Message,
    Prompt,
    Role,
)


class TestFinishReason:
    def test_known_values(self):
        assert FinishReason.from_raw("stop") is FinishReason.STOP
        assert FinishReason.from_raw("length") is FinishReason.LENGTH

    def test_unknown_values_collapse(self):
        assert FinishReason.from_raw("content_filter") is FinishReason.UNKNOWN
        assert FinishReason.from_raw(None) is FinishReason.UNKNOWN


class TestMessage:
    def test_text_payload(self):
        m = Message(role=Role.USER, content="hi")
        assert m.to_payload() == {"role": "user", "content": "hi"}
        assert not m.has_image

    def test_multipart_payload(self):
        m = Message(
            role=Role.USER,
            content=(ContentPart.of_text("what is this?"), ContentPart.of_image("https://x/y.png")),
        )
        assert m.has_image
        assert m.to_payload()["content"] == [
            {"type": "text", "text": "what is this?"},
            {"type": "image_url", "image_url": {"url": "https://x/y.png"}},
        ]

    def test_immutable(self):
        m = Message(role=Role.USER, content="hi")
        with pytest.raises(dataclasses.FrozenInstanceError):
            m.content = "changed"  # type: ignore[misc]


class TestPrompt:
    def test_last_user_message(self):
        prompt = Prompt.of([
            Message(role=Role.SYSTEM, content="be brief"),
            Message(role=Role.USER, content="first"),
            Message(role=Role.ASSISTANT, content="reply"),
            Message(role=Role.USER, content="second"),
            Message(role=Role.ASSISTANT, content="reply 2"),
        ])
        last = prompt.last_user_message()
        assert last is not None
        assert last.content == "second"

    def test_no_user_message(self):
        prompt = Prompt.of([Message(role=Role.SYSTEM, content="be brief")])
        assert prompt.last_user_message() is None

    def test_of_copies_into_tuple(self):
        source = [Message(role=Role.USER, content="a")]
        prompt = Prompt.of(source)
        source.append(Message(role=Role.USER, content="b"))
        assert len(prompt.messages) == 1


class TestCompletion:
    def test_stop(self):
        c = Completion(text="4", finish_reason=FinishReason.STOP)
        assert c.is_finish_reason_stop

    def test_length_is_not_stop(self):
        assert not Completion(text="4", finish_reason=FinishReason.LENGTH).is_finish_reason_stop

    def test_default_reason_unknown(self):
        assert Completion(text="x").finish_reason is FinishReason.UNKNOWN
