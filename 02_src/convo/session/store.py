"""In-memory conversation session store."""

import time
from dataclasses import replace
from typing import Any, Callable, Protocol

from ..models import SESSION_FIELDS, ConversationSession

DEFAULT_TTL_SECONDS = 30 * 60


class ISessionStore(Protocol):
    """Time-bounded continuity state keyed by conversation id."""

    async def get(self, conversation_id: str) -> ConversationSession | None:
        """Get the live session, or None if absent or expired."""
        ...

    async def set(self, conversation_id: str, **patch: Any) -> ConversationSession:
        """Merge patch into the session (creating it) and refresh updated_at."""
        ...

    async def clear(self, conversation_id: str) -> None:
        """Drop the session for one conversation."""
        ...

    async def clear_all(self) -> None:
        """Drop every session."""
        ...


def validate_patch(patch: dict[str, Any]) -> None:
    """Reject fields a session does not have."""
    unknown = set(patch) - SESSION_FIELDS
    if unknown:
        raise ValueError(f"Unknown session fields: {sorted(unknown)}")


class InMemorySessionStore:
    """Process-local session map with TTL enforced on read."""

    def __init__(
        self,
        ttl_seconds: float = DEFAULT_TTL_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ):
        self._ttl = ttl_seconds
        self._clock = clock
        self._sessions: dict[str, ConversationSession] = {}

    async def get(self, conversation_id: str) -> ConversationSession | None:
        """Get the live session, evicting it if the TTL has passed."""
        session = self._sessions.get(conversation_id)
        if session is None:
            return None

        if self._clock() - session.updated_at > self._ttl:
            del self._sessions[conversation_id]
            return None

        return replace(session)

    async def set(self, conversation_id: str, **patch: Any) -> ConversationSession:
        """Merge patch into the session (creating it) and refresh updated_at."""
        validate_patch(patch)
        current = await self.get(conversation_id)
        if current is None:
            current = ConversationSession(conversation_id=conversation_id)

        session = replace(current, **patch, updated_at=self._clock())
        self._sessions[conversation_id] = session
        return replace(session)

    async def clear(self, conversation_id: str) -> None:
        """Drop the session for one conversation."""
        self._sessions.pop(conversation_id, None)

    async def clear_all(self) -> None:
        """Drop every session."""
        self._sessions.clear()

    def __len__(self) -> int:
        return len(self._sessions)
