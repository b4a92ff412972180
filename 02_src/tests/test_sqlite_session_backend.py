"""Tests for SqliteSessionBackend and DurableSessionStore."""

import pytest

from conftest import FakeClock
from convo.models import Turn
from convo.session import DurableSessionStore


class TestSqliteSessionBackend:
    """Tests for the raw SQLite backend."""

    @pytest.mark.asyncio
    async def test_append_and_load(self, sqlite_backend):
        """Test that turns come back oldest first."""
        await sqlite_backend.append("c1", "user", "q1")
        await sqlite_backend.append("c1", "assistant", "a1")
        await sqlite_backend.append("c2", "user", "other")

        turns = await sqlite_backend.load("c1")
        assert turns == [Turn("user", "q1"), Turn("assistant", "a1")]

    @pytest.mark.asyncio
    async def test_load_limit_keeps_latest(self, sqlite_backend):
        """Test that the limit keeps the most recent turns."""
        for i in range(5):
            await sqlite_backend.append("c1", "user", f"m{i}")

        turns = await sqlite_backend.load("c1", limit=2)
        assert [t.text for t in turns] == ["m3", "m4"]

    @pytest.mark.asyncio
    async def test_append_trims_to_max_turns(self):
        """Test that only the newest max_turns survive per conversation."""
        from convo.session import SqliteSessionBackend

        backend = SqliteSessionBackend(":memory:", max_turns=3)
        await backend.init()
        try:
            for i in range(5):
                await backend.append("c1", "user", f"m{i}")
            await backend.append("c2", "user", "other")

            turns = await backend.load("c1", limit=100)
            assert [t.text for t in turns] == ["m2", "m3", "m4"]
            assert len(await backend.load("c2", limit=100)) == 1
        finally:
            await backend.close()

    @pytest.mark.asyncio
    async def test_state_round_trip(self, sqlite_backend):
        """Test that follow-up state is upserted."""
        await sqlite_backend.save_state("c1", "Q?", True, 100.0)
        await sqlite_backend.save_state("c1", None, False, 200.0)

        assert await sqlite_backend.get_state("c1") == (None, False, 200.0)
        assert await sqlite_backend.get_state("missing") is None

    @pytest.mark.asyncio
    async def test_clear(self, sqlite_backend):
        """Test that clear removes turns and state for one conversation."""
        await sqlite_backend.append("c1", "user", "q1")
        await sqlite_backend.save_state("c1", "Q?", True, 100.0)
        await sqlite_backend.append("c2", "user", "q2")

        await sqlite_backend.clear("c1")

        assert await sqlite_backend.load("c1") == []
        assert await sqlite_backend.get_state("c1") is None
        assert len(await sqlite_backend.load("c2")) == 1

    @pytest.mark.asyncio
    async def test_uninitialized(self):
        """Test that use before init() fails loudly."""
        from convo.session import SqliteSessionBackend

        backend = SqliteSessionBackend(":memory:")
        with pytest.raises(RuntimeError):
            await backend.load("c1")


class TestDurableSessionStore:
    """Tests for the session contract on top of SQLite."""

    @pytest.fixture
    def wall_clock(self):
        return FakeClock(start=1_700_000_000.0)

    @pytest.fixture
    def store(self, sqlite_backend, wall_clock):
        return DurableSessionStore(sqlite_backend, ttl_seconds=1800, clock=wall_clock)

    @pytest.mark.asyncio
    async def test_set_and_get(self, store):
        """Test that the last exchange and follow-up are visible through get()."""
        await store.set(
            "c1",
            last_user_text="q1",
            last_reply_text="a1. Need more?",
            pending_followup_question="Need more?",
            awaiting_confirmation=True,
        )

        session = await store.get("c1")
        assert session.last_user_text == "q1"
        assert session.last_reply_text == "a1. Need more?"
        assert session.pending_followup_question == "Need more?"
        assert session.awaiting_confirmation is True

    @pytest.mark.asyncio
    async def test_latest_exchange_wins(self, store):
        """Test that a second exchange replaces the visible last texts."""
        await store.set("c1", last_user_text="q1", last_reply_text="a1")
        await store.set("c1", last_user_text="q2", last_reply_text="a2")

        session = await store.get("c1")
        assert session.last_user_text == "q2"
        assert session.last_reply_text == "a2"

    @pytest.mark.asyncio
    async def test_ttl_expiry_clears(self, store, sqlite_backend, wall_clock):
        """Test that an expired session is gone, turns included."""
        await store.set("c1", last_user_text="q1", last_reply_text="a1")
        wall_clock.advance(1801)

        assert await store.get("c1") is None
        assert await sqlite_backend.load("c1") == []

    @pytest.mark.asyncio
    async def test_rejects_unknown_fields(self, store):
        """Test that the durable store validates patches too."""
        with pytest.raises(ValueError):
            await store.set("c1", colour="blue")

    @pytest.mark.asyncio
    async def test_clear_all(self, store):
        """Test that clear_all drops every conversation."""
        await store.set("c1", last_user_text="q1")
        await store.set("c2", last_user_text="q2")
        await store.clear_all()

        assert await store.get("c1") is None
        assert await store.get("c2") is None
