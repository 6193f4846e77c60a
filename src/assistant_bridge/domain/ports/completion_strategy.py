"""Port: completion strategy — defined by the domain, implemented by infrastructure."""

from __future__ import annotations

from typing import Protocol

from assistant_bridge.domain.entities import Completion, Prompt


class CompletionStrategy(Protocol):
    """Abstract contract for turning a prompt into a single completion."""

    async def complete(self, prompt: Prompt) -> Completion:
        """Return exactly one completion for *prompt* or raise."""
        ...
