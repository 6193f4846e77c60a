"""FastAPI application factory."""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI

from assistant_bridge.infrastructure.config import Settings, get_settings
from assistant_bridge.interface.dependencies import shutdown, startup
from assistant_bridge.interface.error_handlers import register_error_handlers
from assistant_bridge.interface.routes import build_webhook_router, router


@asynccontextmanager
async def _lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Manage startup / shutdown of shared resources."""
    await startup(app.state.settings)
    yield
    await shutdown()


def create_app(settings: Settings | None = None) -> FastAPI:
    """Build and wire the FastAPI application."""
    settings = settings or get_settings()
    app = FastAPI(
        title="Assistant Bridge",
        version="1.0.0",
        description=(
            "Answers chat-platform messages with LLM completions, using an "
            "OpenAI assistant when one is configured and falling back to "
            "plain chat completions otherwise."
        ),
        lifespan=_lifespan,
    )
    app.state.settings = settings

    register_error_handlers(app)
    app.include_router(router)
    app.include_router(build_webhook_router(settings.app_webhook_path))

    # ── Health check (liveness) ────────────────────────────

    @app.get("/health", include_in_schema=False)
    async def health() -> dict[str, str]:
        return {"status": "ok"}

    return app
