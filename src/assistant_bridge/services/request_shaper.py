"""Request shaping — pick the model and image size a call should use.

Pure functions only; no I/O.
"""

from __future__ import annotations

from typing import Iterable

from assistant_bridge.domain.entities import Message

MODEL_GPT_4_OMNI = "gpt-4o"
MODEL_WHISPER_1 = "whisper-1"
MODEL_DALL_E_2 = "dall-e-2"
MODEL_DALL_E_3 = "dall-e-3"

IMAGE_SIZE_256 = "256x256"
IMAGE_SIZE_512 = "512x512"
IMAGE_SIZE_1024 = "1024x1024"

# dall-e-3 rejects the two smallest sizes.
_UNSUPPORTED_BY_LARGE_TIER = frozenset({IMAGE_SIZE_256, IMAGE_SIZE_512})


def has_image(messages: Iterable[Message]) -> bool:
    """Return ``True`` if any message carries an image reference."""
    return any(message.has_image for message in messages)


def select_model(
    messages: Iterable[Message],
    requested_model: str,
    vision_model: str = MODEL_GPT_4_OMNI,
) -> str:
    """Substitute *vision_model* when the conversation contains an image."""
    if has_image(messages):
        return vision_model
    return requested_model


def clamp_image_size(model: str, requested_size: str) -> str:
    """Upgrade sizes the large image model cannot produce to 1024x1024."""
    if model == MODEL_DALL_E_3 and requested_size in _UNSUPPORTED_BY_LARGE_TIER:
        return IMAGE_SIZE_1024
    return requested_size
