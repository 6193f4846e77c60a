"""Application configuration — loaded from environment variables."""

from __future__ import annotations

from functools import lru_cache

from pydantic import SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict

from assistant_bridge.domain.entities import CompletionParams


class Settings(BaseSettings):
    """Central configuration loaded from env vars (or ``.env`` file).

    The instance is frozen: it is resolved once at start-up and shared
    read-only by every request.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        frozen=True,
    )

    # ── Provider ────────────────────────────────────────────────────────
    openai_api_key: SecretStr
    openai_base_url: str = "https://api.openai.com"
    openai_timeout: float = 9.0
    openai_completion_model: str = "gpt-3.5-turbo"
    openai_completion_temperature: float = 1.0
    openai_completion_max_tokens: int = 64
    openai_completion_frequency_penalty: float = 0.0
    openai_completion_presence_penalty: float = 0.6
    openai_vision_model: str = "gpt-4o"
    openai_image_generation_model: str = "dall-e-2"
    openai_image_generation_size: str = "256x256"
    openai_image_generation_quality: str = "standard"
    openai_transcription_model: str = "whisper-1"

    # ── Assistant (stateful strategy) ───────────────────────────────────
    assistant_id: str | None = None
    assistant_poll_interval: float = 1.0
    assistant_run_timeout: float = 30.0

    # ── Application ─────────────────────────────────────────────────────
    app_env: str = "production"
    app_init_prompt: str = ""
    app_webhook_path: str = "/webhook"
    mock_text: str = "OK"
    bot_deactivated: bool = False
    error_message_disabled: bool = False

    # ── LINE messaging ──────────────────────────────────────────────────
    line_channel_access_token: SecretStr | None = None
    line_channel_secret: SecretStr | None = None
    line_base_url: str = "https://api.line.me"
    line_data_url: str = "https://api-data.line.me"
    line_timeout: float = 9.0

    log_level: str = "INFO"
    host: str = "0.0.0.0"
    port: int = 8000

    @property
    def is_production(self) -> bool:
        return self.app_env == "production"

    def completion_params(self) -> CompletionParams:
        """Default chat-completion parameters derived from the settings."""
        return CompletionParams(
            model=self.openai_completion_model,
            temperature=self.openai_completion_temperature,
            max_tokens=self.openai_completion_max_tokens,
            frequency_penalty=self.openai_completion_frequency_penalty,
            presence_penalty=self.openai_completion_presence_penalty,
        )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return the singleton application settings (cached after first call)."""
    return Settings()  # type: ignore[call-arg]
