"""Ordered, paced delivery of chunked replies."""

import asyncio
from typing import Awaitable, Callable, Protocol

from ..logging_config import get_logger
from ..models import DeliveryReport
from .chunker import DEFAULT_MAX_CHARS, split_into_chunks
from .transport import ITransport

logger = get_logger(__name__)

DEFAULT_PAUSE_SECONDS = 0.25


class IDelivery(Protocol):
    """Delivers one reply to a conversation."""

    async def deliver(self, conversation_id: str, text: str) -> DeliveryReport:
        """Chunk and send text in order."""
        ...


class ChunkedDelivery:
    """Sends chunks one at a time, pausing between them."""

    def __init__(
        self,
        transport: ITransport,
        max_chars: int = DEFAULT_MAX_CHARS,
        pause_seconds: float = DEFAULT_PAUSE_SECONDS,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        self._transport = transport
        self._max_chars = max_chars
        self._pause = pause_seconds
        self._sleep = sleep

    async def deliver(self, conversation_id: str, text: str) -> DeliveryReport:
        """Chunk and send text in order.

        A failed chunk is logged and skipped; later chunks are still sent.
        Empty text sends nothing.
        """
        chunks = split_into_chunks(text, self._max_chars)
        report = DeliveryReport(total=len(chunks))

        for index, chunk in enumerate(chunks):
            try:
                ok = await self._transport.send(conversation_id, chunk)
            except Exception as e:
                logger.error(f"Transport raised on chunk {index + 1}: {e}", exc_info=True)
                ok = False

            if ok:
                report.sent += 1
            else:
                report.failed += 1
                logger.warning(
                    "Chunk delivery failed",
                    extra={
                        "context": {
                            "conversation_id": conversation_id,
                            "chunk": index + 1,
                            "total": len(chunks),
                        }
                    },
                )

            if index < len(chunks) - 1 and self._pause > 0:
                await self._sleep(self._pause)

        return report
