"""LINE Messaging API adapter — implements the MessagingGateway port."""

from __future__ import annotations

import base64
import hashlib
import hmac
import logging

import httpx

from assistant_bridge.domain.exceptions import MessagingError

logger = logging.getLogger(__name__)

_LINE_API = "https://api.line.me"
_LINE_DATA_API = "https://api-data.line.me"
_MAX_REPLY_CHARS = 5000


def verify_signature(body: bytes, signature: str, secret: str) -> bool:
    """Check an ``X-Line-Signature`` header against the raw request body."""
    digest = hmac.new(secret.encode("utf-8"), body, hashlib.sha256).digest()
    expected = base64.b64encode(digest).decode("ascii")
    return hmac.compare_digest(expected, signature)


class LineMessagingAdapter:
    """Concrete MessagingGateway backed by the LINE Messaging REST API."""

    def __init__(
        self,
        client: httpx.AsyncClient,
        access_token: str,
        base_url: str = _LINE_API,
        data_url: str = _LINE_DATA_API,
        timeout: float = 9.0,
    ) -> None:
        self._client = client
        self._headers = {"Authorization": f"Bearer {access_token}"}
        self._base_url = base_url.rstrip("/")
        self._data_url = data_url.rstrip("/")
        self._timeout = timeout

    async def reply(self, reply_token: str, text: str) -> None:
        """POST /v2/bot/message/reply with a single text message."""
        url = f"{self._base_url}/v2/bot/message/reply"
        body = {
            "replyToken": reply_token,
            "messages": [{"type": "text", "text": text[:_MAX_REPLY_CHARS]}],
        }
        try:
            resp = await self._client.post(
                url, headers=self._headers, json=body, timeout=self._timeout
            )
        except httpx.HTTPError as exc:
            raise MessagingError(f"Network error replying to LINE: {exc}") from exc

        if not resp.is_success:
            raise MessagingError(
                f"LINE reply API returned HTTP {resp.status_code}: {_detail(resp)}"
            )

    async def fetch_content(self, message_id: str) -> bytes:
        """GET /v2/bot/message/{id}/content → raw bytes."""
        url = f"{self._data_url}/v2/bot/message/{message_id}/content"
        try:
            resp = await self._client.get(url, headers=self._headers, timeout=self._timeout)
        except httpx.HTTPError as exc:
            raise MessagingError(f"Network error fetching LINE content: {exc}") from exc

        if resp.status_code == 200:
            return resp.content

        raise MessagingError(
            f"LINE content API returned HTTP {resp.status_code} for message {message_id}"
        )


def _detail(resp: httpx.Response) -> str:
    try:
        payload = resp.json()
    except ValueError:
        return resp.text
    if isinstance(payload, dict) and payload.get("message"):
        return str(payload["message"])
    return resp.text
