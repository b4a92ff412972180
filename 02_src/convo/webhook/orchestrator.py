"""Webhook orchestrator: dedup, command routing and the reply pipeline."""

import asyncio
from contextlib import asynccontextmanager, nullcontext
from typing import AsyncIterator

from ..dedup import IDedupFilter
from ..delivery import IDelivery
from ..dialogue import IContinuityResolver
from ..dialogue.language import (
    HELP_COMMANDS,
    RESET_COMMANDS,
    detect_language,
    localized,
    normalize_token,
    system_prompt,
)
from ..llm import GenerationExhausted, IGenerationInvoker
from ..logging_config import get_logger
from ..models import GenerationRequest, HandleOutcome, InboundEvent

logger = get_logger(__name__)


class ConversationLocks:
    """Reference-counted asyncio locks, one per active conversation."""

    def __init__(self) -> None:
        self._locks: dict[str, asyncio.Lock] = {}
        self._holders: dict[str, int] = {}

    @asynccontextmanager
    async def hold(self, key: str) -> AsyncIterator[None]:
        lock = self._locks.setdefault(key, asyncio.Lock())
        self._holders[key] = self._holders.get(key, 0) + 1
        try:
            async with lock:
                yield
        finally:
            self._holders[key] -= 1
            if not self._holders[key]:
                del self._holders[key]
                del self._locks[key]

    def __len__(self) -> int:
        return len(self._locks)


class WebhookOrchestrator:
    """Drives one inbound event through dedup, commands and generation.

    Nothing raised while handling an event escapes handle(); failures turn
    into a best-effort apology to the conversation.
    """

    def __init__(
        self,
        dedup: IDedupFilter,
        resolver: IContinuityResolver,
        invoker: IGenerationInvoker,
        delivery: IDelivery,
        model_candidates: list[str],
        bot_name: str = "Assistant",
        max_output_tokens: int = 500,
        timeout_ms: int = 30000,
        serialize_conversations: bool = True,
    ):
        self._dedup = dedup
        self._resolver = resolver
        self._invoker = invoker
        self._delivery = delivery
        self._model_candidates = list(model_candidates)
        self._bot_name = bot_name
        self._max_output_tokens = max_output_tokens
        self._timeout_ms = timeout_ms
        self._locks = ConversationLocks() if serialize_conversations else None
        self._tasks: set[asyncio.Task] = set()

    def dispatch(self, event: InboundEvent | None) -> asyncio.Task:
        """Schedule handle(event) without waiting for it."""
        task = asyncio.create_task(self.handle(event))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    async def drain(self) -> None:
        """Wait for every dispatched event to finish."""
        if self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    @property
    def pending(self) -> int:
        return len(self._tasks)

    async def handle(self, event: InboundEvent | None) -> HandleOutcome:
        """Handle one inbound event end to end."""
        conversation_id = event.conversation_id if event else None
        language = detect_language(event.text if event else None)

        try:
            if not event or not conversation_id:
                logger.debug("Dropping event without conversation id")
                return HandleOutcome.DROPPED

            if self._dedup.seen(event.event_id):
                return HandleOutcome.DUPLICATE

            if event.message_type != "text":
                await self._delivery.deliver(
                    conversation_id, localized("text_only", language)
                )
                return HandleOutcome.UNSUPPORTED

            text = (event.text or "").strip()
            if not text:
                logger.debug(f"Dropping empty text from {conversation_id}")
                return HandleOutcome.DROPPED

            logger.info(
                "Message received",
                extra={
                    "context": {
                        "conversation_id": conversation_id,
                        "event_id": event.event_id,
                        "text": text[:100],
                    }
                },
            )

            command = normalize_token(text)
            if command in HELP_COMMANDS:
                await self._delivery.deliver(
                    conversation_id, localized("help", language, bot_name=self._bot_name)
                )
                return HandleOutcome.COMMAND

            if command in RESET_COMMANDS:
                await self._resolver.reset(conversation_id)
                await self._delivery.deliver(
                    conversation_id, localized("reset_ack", language)
                )
                return HandleOutcome.COMMAND

            if self._locks is not None:
                lock = self._locks.hold(conversation_id)
            else:
                lock = nullcontext()
            async with lock:
                return await self._converse(conversation_id, text, language)

        except Exception as e:
            logger.error(f"Failed to handle event for {conversation_id}: {e}", exc_info=True)
            if conversation_id:
                await self._apologize(conversation_id, language)
            return HandleOutcome.FAILED

    async def _converse(self, conversation_id: str, text: str, language: str) -> HandleOutcome:
        """Resolver -> invoker -> session update -> delivery."""
        resolved = await self._resolver.resolve(conversation_id, text)
        request = GenerationRequest(
            system_prompt=system_prompt(language, self._bot_name),
            user_text=resolved.user_text,
            prior_turns=resolved.prior_turns,
            model_candidates=self._model_candidates,
            max_output_tokens=self._max_output_tokens,
            timeout_ms=self._timeout_ms,
        )

        try:
            reply = await self._invoker.invoke(request)
        except GenerationExhausted as e:
            logger.error(
                "Generation exhausted",
                extra={
                    "context": {
                        "conversation_id": conversation_id,
                        "models": e.models,
                        "attempts": e.attempt_count,
                    }
                },
            )
            await self._delivery.deliver(
                conversation_id, localized("generation_fallback", language)
            )
            return HandleOutcome.GENERATION_FAILED

        await self._resolver.record(conversation_id, text, reply, epoch=resolved.epoch)
        report = await self._delivery.deliver(conversation_id, reply)

        logger.info(
            "Reply delivered",
            extra={
                "context": {
                    "conversation_id": conversation_id,
                    "kind": resolved.classification.kind,
                    "chunks": report.total,
                    "failed_chunks": report.failed,
                }
            },
        )
        return HandleOutcome.REPLIED

    async def _apologize(self, conversation_id: str, language: str) -> None:
        try:
            await self._delivery.deliver(conversation_id, localized("apology", language))
        except Exception as e:
            logger.error(f"Apology to {conversation_id} failed: {e}")
