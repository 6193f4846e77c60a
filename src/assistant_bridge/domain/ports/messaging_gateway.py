"""Port: messaging gateway — defined by the domain, implemented by infrastructure."""

from __future__ import annotations

from typing import Protocol


class MessagingGateway(Protocol):
    """Abstract contract for the chat platform that receives the replies."""

    async def reply(self, reply_token: str, text: str) -> None:
        """Send *text* as the reply bound to *reply_token*."""
        ...

    async def fetch_content(self, message_id: str) -> bytes:
        """Download the binary payload (image, audio) of a received message."""
        ...
