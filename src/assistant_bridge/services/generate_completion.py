"""Generate-completion use case — strategy composition and fallback.

The orchestrator depends only on the :class:`CompletionStrategy` port.  When a
stateful (assistant) strategy is supplied it is wrapped in a
:class:`FallbackCompletionStrategy` so that any failure of the stateful path is
logged and retried exactly once through the stateless path.
"""

from __future__ import annotations

import logging

from assistant_bridge.domain.entities import Completion, FinishReason, Prompt
from assistant_bridge.domain.ports.completion_strategy import CompletionStrategy

logger = logging.getLogger(__name__)


class FallbackCompletionStrategy:
    """Try *primary*; on any failure, fall back to *fallback* once.

    Errors raised by *fallback* propagate unchanged.  Cancellation is not an
    ``Exception`` and therefore always propagates.
    """

    def __init__(self, primary: CompletionStrategy, fallback: CompletionStrategy) -> None:
        self._primary = primary
        self._fallback = fallback

    async def complete(self, prompt: Prompt) -> Completion:
        try:
            return await self._primary.complete(prompt)
        except Exception as exc:
            logger.warning(
                "Assistant completion failed, falling back to chat completions: %s: %s",
                type(exc).__name__,
                exc,
            )
        return await self._fallback.complete(prompt)


class StaticCompletionStrategy:
    """Returns a fixed text without calling the provider (non-production only)."""

    def __init__(self, text: str) -> None:
        self._text = text

    async def complete(self, prompt: Prompt) -> Completion:
        return Completion(text=self._text, finish_reason=FinishReason.STOP)


class CompletionOrchestrator:
    """Single entry point for turning a prompt into a completion.

    Parameters
    ----------
    stateless:
        The single-call strategy; always available.
    stateful:
        The assistant strategy, present only when an assistant is configured.
    """

    def __init__(
        self,
        stateless: CompletionStrategy,
        stateful: CompletionStrategy | None = None,
    ) -> None:
        self._strategy: CompletionStrategy
        if stateful is None:
            self._strategy = stateless
        else:
            self._strategy = FallbackCompletionStrategy(stateful, stateless)
        self._uses_assistant = stateful is not None

    @property
    def uses_assistant(self) -> bool:
        return self._uses_assistant

    async def generate(self, prompt: Prompt) -> Completion:
        """Return exactly one completion for *prompt* or raise."""
        logger.info(
            "Generating completion for %d message(s) via %s",
            len(prompt.messages),
            "assistant" if self._uses_assistant else "chat completions",
        )
        return await self._strategy.complete(prompt)
