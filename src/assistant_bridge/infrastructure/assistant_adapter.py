"""Assistants adapter — the stateful, poll-until-done ``CompletionStrategy``.

One completion walks through a fixed sequence of provider calls::

    create thread → append user message → start run → poll run → fetch result

The thread and run identifiers live only in local variables of a single
:meth:`AssistantCompletionStrategy.complete` call and are never reused.
Failures are raised to the caller; the fallback wrapper decides what to do
with them.
"""

from __future__ import annotations

import asyncio
import logging
import time
from typing import Any, Awaitable, Callable

from assistant_bridge.domain.entities import Completion, FinishReason, Message, Prompt
from assistant_bridge.domain.exceptions import (
    NoUserMessageError,
    ProviderError,
    RunFailedError,
    RunTimeoutError,
)
from assistant_bridge.infrastructure.openai_transport import OpenAITransport

logger = logging.getLogger(__name__)

RUN_COMPLETED = "completed"
RUN_FAILURE_STATUSES = frozenset({"failed", "cancelled", "expired", "incomplete"})


class AssistantCompletionStrategy:
    """Produces a completion by running a configured assistant on a new thread.

    Parameters
    ----------
    transport:
        Authenticated provider transport.
    assistant_id:
        Identifier of the remote assistant to run.
    poll_interval:
        Seconds to wait before each run-status poll.
    run_timeout:
        Wall-clock budget, in seconds, for the run to reach a terminal state.
    """

    def __init__(
        self,
        transport: OpenAITransport,
        assistant_id: str,
        poll_interval: float = 1.0,
        run_timeout: float = 30.0,
        *,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._transport = transport
        self._assistant_id = assistant_id
        self._poll_interval = poll_interval
        self._run_timeout = run_timeout
        self._sleep = sleep
        self._clock = clock

    async def complete(self, prompt: Prompt) -> Completion:
        user_message = prompt.last_user_message()
        if user_message is None:
            raise NoUserMessageError("Prompt contains no user message.")

        thread_id = await self._create_thread()
        await self._append_message(thread_id, user_message)
        run_id = await self._start_run(thread_id)
        logger.debug("Assistant run %s started on thread %s", run_id, thread_id)

        await self._wait_for_run(thread_id, run_id)
        return await self._fetch_result(thread_id)

    # ── Steps ───────────────────────────────────────────────────────────
    async def _create_thread(self) -> str:
        thread = await self._transport.call(
            lambda client: client.beta.threads.create(), "create thread"
        )
        return _require_id(thread, "thread")

    async def _append_message(self, thread_id: str, message: Message) -> None:
        await self._transport.call(
            lambda client: client.beta.threads.messages.create(
                thread_id,
                role="user",
                content=message.content_payload(),  # type: ignore[arg-type]
            ),
            "append message",
        )

    async def _start_run(self, thread_id: str) -> str:
        run = await self._transport.call(
            lambda client: client.beta.threads.runs.create(
                thread_id=thread_id, assistant_id=self._assistant_id
            ),
            "start run",
        )
        return _require_id(run, "run")

    async def _wait_for_run(self, thread_id: str, run_id: str) -> None:
        """Poll the run until it completes, fails, or the deadline passes."""
        deadline = self._clock() + self._run_timeout
        while True:
            await self._sleep(self._poll_interval)
            if self._clock() >= deadline:
                raise RunTimeoutError(
                    f"Assistant run {run_id} did not finish within {self._run_timeout}s"
                )

            run = await self._transport.call(
                lambda client: client.beta.threads.runs.retrieve(run_id, thread_id=thread_id),
                "retrieve run",
            )
            status = getattr(run, "status", None)
            if status == RUN_COMPLETED:
                return
            if status in RUN_FAILURE_STATUSES:
                last_error = getattr(run, "last_error", None)
                raise RunFailedError(run_id, status, getattr(last_error, "message", None))
            logger.debug("Assistant run %s is %s", run_id, status)

    async def _fetch_result(self, thread_id: str) -> Completion:
        page = await self._transport.call(
            lambda client: client.beta.threads.messages.list(thread_id, order="desc", limit=1),
            "list messages",
        )
        messages = getattr(page, "data", None) or []
        if not messages:
            raise ProviderError(f"Thread {thread_id} returned no messages.")

        for part in getattr(messages[0], "content", None) or []:
            value = getattr(getattr(part, "text", None), "value", None)
            if isinstance(value, str):
                return Completion(text=value.strip(), finish_reason=FinishReason.STOP)
        raise ProviderError(f"Latest message on thread {thread_id} has no text.")


def _require_id(obj: Any, kind: str) -> str:
    identifier = getattr(obj, "id", None)
    if not isinstance(identifier, str) or not identifier:
        raise ProviderError(f"Provider did not return a {kind} id.")
    return identifier
