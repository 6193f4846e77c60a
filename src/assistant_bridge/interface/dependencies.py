"""FastAPI dependency injection wiring."""

from __future__ import annotations

import httpx
from fastapi import Depends, Header, Request
from openai import AsyncOpenAI

from assistant_bridge.domain.exceptions import InvalidSignatureError, MessagingError
from assistant_bridge.infrastructure.assistant_adapter import AssistantCompletionStrategy
from assistant_bridge.infrastructure.chat_completion_adapter import ChatCompletionStrategy
from assistant_bridge.infrastructure.config import Settings, get_settings
from assistant_bridge.infrastructure.line_messaging_adapter import (
    LineMessagingAdapter,
    verify_signature,
)
from assistant_bridge.infrastructure.openai_media_adapter import OpenAIMediaAdapter
from assistant_bridge.infrastructure.openai_transport import OpenAITransport, build_client
from assistant_bridge.services.generate_completion import (
    CompletionOrchestrator,
    StaticCompletionStrategy,
)
from assistant_bridge.services.handle_webhook import HandleWebhookUseCase

_http_client: httpx.AsyncClient | None = None
_openai_client: AsyncOpenAI | None = None


async def startup(settings: Settings | None = None) -> None:
    """Initialise shared resources — called from the lifespan context manager."""
    global _http_client, _openai_client  # noqa: PLW0603

    settings = settings or get_settings()
    _http_client = httpx.AsyncClient()
    _openai_client = build_client(
        settings.openai_api_key.get_secret_value(),
        base_url=settings.openai_base_url,
        timeout=settings.openai_timeout,
    )


async def shutdown() -> None:
    """Release shared resources."""
    global _http_client, _openai_client  # noqa: PLW0603

    if _openai_client:
        await _openai_client.close()
        _openai_client = None
    if _http_client:
        await _http_client.aclose()
        _http_client = None


def _client() -> httpx.AsyncClient:
    assert _http_client is not None, "startup() was not called"
    return _http_client


def _openai() -> AsyncOpenAI:
    assert _openai_client is not None, "startup() was not called"
    return _openai_client


def build_transport(settings: Settings, client: AsyncOpenAI) -> OpenAITransport:
    return OpenAITransport(client, timeout=settings.openai_timeout)


def build_orchestrator(settings: Settings, client: AsyncOpenAI) -> CompletionOrchestrator:
    """Compose the completion strategies the settings ask for."""
    if not settings.is_production:
        return CompletionOrchestrator(StaticCompletionStrategy(settings.mock_text))

    transport = build_transport(settings, client)
    stateless = ChatCompletionStrategy(
        transport,
        defaults=settings.completion_params(),
        vision_model=settings.openai_vision_model,
    )
    stateful = None
    if settings.assistant_id:
        stateful = AssistantCompletionStrategy(
            transport,
            assistant_id=settings.assistant_id,
            poll_interval=settings.assistant_poll_interval,
            run_timeout=settings.assistant_run_timeout,
        )
    return CompletionOrchestrator(stateless, stateful)


def get_orchestrator() -> CompletionOrchestrator:
    return build_orchestrator(get_settings(), _openai())


def get_media_gateway() -> OpenAIMediaAdapter:
    settings = get_settings()
    return OpenAIMediaAdapter(
        build_transport(settings, _openai()),
        image_model=settings.openai_image_generation_model,
        image_size=settings.openai_image_generation_size,
        image_quality=settings.openai_image_generation_quality,
        transcription_model=settings.openai_transcription_model,
    )


async def get_verified_body(
    request: Request,
    x_line_signature: str | None = Header(default=None),
    settings: Settings = Depends(get_settings),
) -> bytes:
    """Return the raw webhook body once its LINE signature checks out."""
    raw = await request.body()
    if settings.line_channel_secret is not None:
        secret = settings.line_channel_secret.get_secret_value()
        if not x_line_signature or not verify_signature(raw, x_line_signature, secret):
            raise InvalidSignatureError("Invalid LINE signature.")
    return raw


def get_webhook_use_case(
    orchestrator: CompletionOrchestrator = Depends(get_orchestrator),
    media: OpenAIMediaAdapter = Depends(get_media_gateway),
) -> HandleWebhookUseCase:
    """Build the webhook use case with injected adapters."""
    settings = get_settings()
    if settings.line_channel_access_token is None:
        raise MessagingError("LINE_CHANNEL_ACCESS_TOKEN is not configured.")

    messaging = LineMessagingAdapter(
        client=_client(),
        access_token=settings.line_channel_access_token.get_secret_value(),
        base_url=settings.line_base_url,
        data_url=settings.line_data_url,
        timeout=settings.line_timeout,
    )
    return HandleWebhookUseCase(
        orchestrator=orchestrator,
        messaging=messaging,
        media=media,
        init_prompt=settings.app_init_prompt,
        error_message_disabled=settings.error_message_disabled,
        bot_deactivated=settings.bot_deactivated,
    )
