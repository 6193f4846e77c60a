"""Domain exception hierarchy.

Each exception maps to a specific HTTP status code at the interface layer.
Inner layers raise these; the outermost error-handler translates them.
"""

from __future__ import annotations


class AssistantBridgeError(Exception):
    """Base exception for the entire application."""


# ── Provider errors ─────────────────────────────────────────────────────────


class ProviderError(AssistantBridgeError):
    """Any failed call to the LLM provider.

    The message is taken from the provider's structured error payload when
    one is returned, otherwise it describes the transport failure.
    """

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class TransportError(ProviderError):
    """Network failure, timeout, or non-2xx status without an error payload."""


# ── Assistant (thread / run) errors ─────────────────────────────────────────


class NoUserMessageError(AssistantBridgeError):
    """The prompt holds no message with the ``user`` role."""


class RunFailedError(AssistantBridgeError):
    """The remote run reached a terminal failure state."""

    def __init__(self, run_id: str, status: str, detail: str | None = None) -> None:
        message = f"Assistant run {run_id} ended with status '{status}'"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message)
        self.run_id = run_id
        self.status = status


class RunTimeoutError(AssistantBridgeError):
    """The remote run did not finish before the polling deadline."""


# ── Messaging / webhook errors ──────────────────────────────────────────────


class MessagingError(AssistantBridgeError):
    """Delivery to (or download from) the messaging provider failed."""


class InvalidSignatureError(AssistantBridgeError):
    """The webhook request signature does not match the channel secret."""


class InvalidWebhookPayloadError(AssistantBridgeError):
    """The webhook body carries no usable event."""
