"""Recency-window filter for redelivered webhook events."""

import time
from typing import Callable, Protocol

from ..logging_config import get_logger
from ..models import DedupEntry

logger = get_logger(__name__)

DEFAULT_WINDOW_SECONDS = 10 * 60


class IDedupFilter(Protocol):
    """Suppresses re-processing of recently seen event ids."""

    def seen(self, event_id: str | None) -> bool:
        """Return True if event_id was already seen within the window."""
        ...

    def clear(self) -> None:
        """Forget every entry."""
        ...


class DedupFilter:
    """In-memory dedup map with lazy purge on every check."""

    def __init__(
        self,
        window_seconds: float = DEFAULT_WINDOW_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ):
        self._window = window_seconds
        self._clock = clock
        self._entries: dict[str, DedupEntry] = {}

    def seen(self, event_id: str | None) -> bool:
        """Record event_id and report whether it is a duplicate.

        Events without an id are always treated as novel.
        """
        if not event_id:
            return False

        now = self._clock()
        self._purge(now)

        if event_id in self._entries:
            logger.info(
                "Duplicate event suppressed",
                extra={"context": {"event_id": event_id}},
            )
            return True

        self._entries[event_id] = DedupEntry(event_id=event_id, first_seen_at=now)
        return False

    def clear(self) -> None:
        """Forget every entry."""
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)

    def _purge(self, now: float) -> None:
        expired = [
            key
            for key, entry in self._entries.items()
            if now - entry.first_seen_at > self._window
        ]
        for key in expired:
            del self._entries[key]
