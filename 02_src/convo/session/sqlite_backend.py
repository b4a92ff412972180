"""SQLite session backend for durability across restarts."""

import time
from dataclasses import replace
from pathlib import Path
from typing import Any, Callable

import aiosqlite

from ..config import resolve_db_path
from ..logging_config import get_logger
from ..models import ConversationSession, Turn
from .store import DEFAULT_TTL_SECONDS, validate_patch

logger = get_logger(__name__)


class SqliteSessionBackend:
    """Turn log plus follow-up state per conversation (aiosqlite)."""

    def __init__(self, db_path: str | Path | None = None, max_turns: int = 10):
        self._db_path = resolve_db_path(db_path)
        self._max_turns = max_turns
        self._conn: aiosqlite.Connection | None = None

    async def init(self) -> None:
        """Open the database and create tables."""
        self._conn = await aiosqlite.connect(self._db_path)

        schema_path = Path(__file__).parent / "schema.sql"
        with open(schema_path, "r", encoding="utf-8") as f:
            schema_sql = f.read()
        await self._conn.executescript(schema_sql)
        await self._conn.commit()

    async def close(self) -> None:
        """Close database connection."""
        if self._conn is not None:
            await self._conn.close()
            self._conn = None

    def _require_conn(self) -> aiosqlite.Connection:
        if self._conn is None:
            raise RuntimeError("Session backend not initialized")
        return self._conn

    # Turns
    async def load(self, conversation_id: str, limit: int = 10) -> list[Turn]:
        """Get the most recent turns for a conversation, oldest first."""
        conn = self._require_conn()
        cursor = await conn.execute(
            """
            SELECT role, content FROM (
                SELECT seq, role, content
                FROM turns
                WHERE conversation_id = ?
                ORDER BY seq DESC
                LIMIT ?
            )
            ORDER BY seq ASC
            """,
            (conversation_id, limit),
        )
        rows = await cursor.fetchall()
        return [Turn(role=row[0], text=row[1]) for row in rows]

    async def append(self, conversation_id: str, role: str, text: str) -> None:
        """Append one turn, keeping only the newest max_turns for the conversation."""
        conn = self._require_conn()
        await conn.execute(
            """
            INSERT INTO turns (conversation_id, role, content, created_at)
            VALUES (?, ?, ?, ?)
            """,
            (conversation_id, role, text, time.time()),
        )
        await conn.execute(
            """
            DELETE FROM turns
            WHERE conversation_id = ?
              AND seq NOT IN (
                SELECT seq FROM turns
                WHERE conversation_id = ?
                ORDER BY seq DESC
                LIMIT ?
              )
            """,
            (conversation_id, conversation_id, self._max_turns),
        )
        await conn.commit()

    async def clear(self, conversation_id: str) -> None:
        """Delete turns and state for one conversation."""
        conn = self._require_conn()
        await conn.execute("DELETE FROM turns WHERE conversation_id = ?", (conversation_id,))
        await conn.execute(
            "DELETE FROM sessions WHERE conversation_id = ?", (conversation_id,)
        )
        await conn.commit()

    # Follow-up state
    async def get_state(self, conversation_id: str) -> tuple[str | None, bool, float] | None:
        """Get (pending_followup_question, awaiting_confirmation, updated_at)."""
        conn = self._require_conn()
        cursor = await conn.execute(
            """
            SELECT pending_followup_question, awaiting_confirmation, updated_at
            FROM sessions
            WHERE conversation_id = ?
            """,
            (conversation_id,),
        )
        row = await cursor.fetchone()
        if not row:
            return None
        return row[0], bool(row[1]), float(row[2])

    async def save_state(
        self,
        conversation_id: str,
        pending_followup_question: str | None,
        awaiting_confirmation: bool,
        updated_at: float,
    ) -> None:
        """Upsert follow-up state."""
        conn = self._require_conn()
        await conn.execute(
            """
            INSERT OR REPLACE INTO sessions
            (conversation_id, pending_followup_question, awaiting_confirmation, updated_at)
            VALUES (?, ?, ?, ?)
            """,
            (
                conversation_id,
                pending_followup_question,
                int(awaiting_confirmation),
                updated_at,
            ),
        )
        await conn.commit()

    async def clear_all(self) -> None:
        """Clear all data."""
        conn = self._require_conn()
        for table in ["turns", "sessions"]:
            await conn.execute(f"DELETE FROM {table}")
        await conn.commit()


class DurableSessionStore:
    """Session store contract on top of SqliteSessionBackend.

    The last user and assistant turns in the log stand in for
    last_user_text / last_reply_text; TTL uses wall-clock time so it
    survives restarts.
    """

    def __init__(
        self,
        backend: SqliteSessionBackend,
        ttl_seconds: float = DEFAULT_TTL_SECONDS,
        clock: Callable[[], float] = time.time,
        history_limit: int = 10,
    ):
        self._backend = backend
        self._ttl = ttl_seconds
        self._clock = clock
        self._history_limit = history_limit

    async def get(self, conversation_id: str) -> ConversationSession | None:
        """Get the live session, clearing it if the TTL has passed."""
        state = await self._backend.get_state(conversation_id)
        if state is None:
            return None

        pending, awaiting, updated_at = state
        if self._clock() - updated_at > self._ttl:
            await self._backend.clear(conversation_id)
            return None

        turns = await self._backend.load(conversation_id, limit=self._history_limit)
        last_user = next((t.text for t in reversed(turns) if t.role == "user"), None)
        last_reply = next((t.text for t in reversed(turns) if t.role == "assistant"), None)

        return ConversationSession(
            conversation_id=conversation_id,
            last_user_text=last_user,
            last_reply_text=last_reply,
            pending_followup_question=pending,
            awaiting_confirmation=awaiting,
            updated_at=updated_at,
        )

    async def set(self, conversation_id: str, **patch: Any) -> ConversationSession:
        """Append changed turns, upsert follow-up state."""
        validate_patch(patch)
        current = await self.get(conversation_id)
        if current is None:
            current = ConversationSession(conversation_id=conversation_id)

        session = replace(current, **patch, updated_at=self._clock())

        if patch.get("last_user_text"):
            await self._backend.append(conversation_id, "user", patch["last_user_text"])
        if patch.get("last_reply_text"):
            await self._backend.append(
                conversation_id, "assistant", patch["last_reply_text"]
            )

        await self._backend.save_state(
            conversation_id,
            session.pending_followup_question,
            session.awaiting_confirmation,
            session.updated_at,
        )
        return session

    async def clear(self, conversation_id: str) -> None:
        """Drop turns and state for one conversation."""
        await self._backend.clear(conversation_id)

    async def clear_all(self) -> None:
        """Drop every session."""
        await self._backend.clear_all()

    async def close(self) -> None:
        """Close the underlying backend."""
        await self._backend.close()
