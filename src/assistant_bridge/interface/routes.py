"""API routes — thin controllers that delegate to the use cases."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends
from pydantic import ValidationError

from assistant_bridge.domain.exceptions import InvalidWebhookPayloadError
from assistant_bridge.infrastructure.openai_media_adapter import OpenAIMediaAdapter
from assistant_bridge.interface.dependencies import (
    get_media_gateway,
    get_orchestrator,
    get_verified_body,
    get_webhook_use_case,
)
from assistant_bridge.interface.schemas import (
    CompletionRequest,
    CompletionResponse,
    ErrorResponse,
    ImageRequest,
    ImageResponse,
    LineWebhookRequest,
    WebhookResponse,
)
from assistant_bridge.services.generate_completion import CompletionOrchestrator
from assistant_bridge.services.handle_webhook import HandleWebhookUseCase

logger = logging.getLogger(__name__)

router = APIRouter()

_PROVIDER_ERROR = {"model": ErrorResponse, "description": "LLM provider error"}


@router.post(
    "/completions",
    response_model=CompletionResponse,
    responses={502: _PROVIDER_ERROR},
)
async def create_completion(
    body: CompletionRequest,
    orchestrator: CompletionOrchestrator = Depends(get_orchestrator),
) -> CompletionResponse:
    """Generate one completion for the supplied conversation."""
    completion = await orchestrator.generate(body.to_prompt())
    return CompletionResponse(
        text=completion.text,
        finish_reason=completion.finish_reason.value,
        is_finish_reason_stop=completion.is_finish_reason_stop,
    )


@router.post(
    "/images",
    response_model=ImageResponse,
    responses={502: _PROVIDER_ERROR},
)
async def create_image(
    body: ImageRequest,
    media: OpenAIMediaAdapter = Depends(get_media_gateway),
) -> ImageResponse:
    """Generate images from a text prompt."""
    urls = await media.create_image(
        body.prompt, size=body.size, quality=body.quality, n=body.n
    )
    return ImageResponse(urls=urls)


async def line_webhook(
    raw: bytes = Depends(get_verified_body),
    use_case: HandleWebhookUseCase = Depends(get_webhook_use_case),
) -> WebhookResponse:
    """Receive LINE events and reply to each message.

    The signature dependency is declared first so an unsigned request is
    rejected before any adapter is built.
    """
    try:
        payload = LineWebhookRequest.model_validate_json(raw)
    except ValidationError as exc:
        raise InvalidWebhookPayloadError(f"Malformed webhook body: {exc.error_count()} error(s)") from exc

    if not payload.events:
        raise InvalidWebhookPayloadError("Webhook body contains no events.")

    replied = await use_case.execute(payload.to_incoming_messages())
    logger.info("Webhook handled %d event(s), sent %d reply(ies)", len(payload.events), replied)
    return WebhookResponse(replied=replied)


def build_webhook_router(path: str) -> APIRouter:
    """Mount the LINE webhook handler at the configured *path*."""
    webhook_router = APIRouter()
    webhook_router.add_api_route(
        path,
        line_webhook,
        methods=["POST"],
        response_model=WebhookResponse,
        responses={
            400: {"model": ErrorResponse, "description": "Webhook body carries no usable event"},
            401: {"model": ErrorResponse, "description": "Invalid LINE signature"},
            502: {"model": ErrorResponse, "description": "LLM or messaging provider error"},
        },
    )
    return webhook_router
