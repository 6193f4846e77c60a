"""OpenAI transport — one authenticated SDK call with normalized errors.

The shared :class:`AsyncOpenAI` client is never mutated: every call goes
through ``with_options(timeout=...)``, which hands back a fresh client copy
carrying the per-request settings while reusing the same connection pool.
"""

from __future__ import annotations

import logging
from typing import Any, Awaitable, Callable, TypeVar

import httpx
from openai import (
    APIConnectionError,
    APIStatusError,
    APITimeoutError,
    AsyncOpenAI,
    OpenAIError,
)

from assistant_bridge.domain.exceptions import ProviderError, TransportError

logger = logging.getLogger(__name__)

T = TypeVar("T")


def build_client(
    api_key: str,
    base_url: str = "https://api.openai.com",
    timeout: float = 9.0,
    http_client: httpx.AsyncClient | None = None,
) -> AsyncOpenAI:
    """Return an SDK client with retries disabled.

    *base_url* is the provider root; the ``/v1`` API prefix is appended here.
    """
    return AsyncOpenAI(
        api_key=api_key,
        base_url=f"{base_url.rstrip('/')}/v1",
        timeout=timeout,
        max_retries=0,
        http_client=http_client,
    )


def _error_message(exc: APIStatusError) -> str | None:
    """Extract ``error.message`` from the provider's error body, if present."""
    body: Any = exc.body
    if isinstance(body, dict) and body.get("message"):
        return str(body["message"])
    return None


class OpenAITransport:
    """Runs provider calls and translates every failure to a
    :class:`ProviderError`.
    """

    def __init__(self, client: AsyncOpenAI, timeout: float = 9.0) -> None:
        self._client = client
        self._timeout = timeout

    async def call(
        self,
        operation: Callable[[AsyncOpenAI], Awaitable[T]],
        description: str,
    ) -> T:
        """Run *operation* against a per-call client and return its result."""
        client = self._client.with_options(timeout=self._timeout)
        try:
            return await operation(client)
        except APITimeoutError as exc:
            raise TransportError(f"{description} timed out after {self._timeout}s") from exc
        except APIConnectionError as exc:
            raise TransportError(f"Network error during {description}: {exc}") from exc
        except APIStatusError as exc:
            logger.debug("%s -> HTTP %s", description, exc.status_code)
            message = _error_message(exc)
            if message:
                raise ProviderError(message, status_code=exc.status_code) from exc
            raise TransportError(
                f"OpenAI API returned HTTP {exc.status_code} for {description}",
                status_code=exc.status_code,
            ) from exc
        except OpenAIError as exc:
            raise ProviderError(f"{description} failed: {exc}") from exc
