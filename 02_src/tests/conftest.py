"""Pytest configuration and fixtures."""

import sys
from pathlib import Path
from unittest.mock import AsyncMock, Mock

import pytest
import pytest_asyncio

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))


class FakeClock:
    """Deterministic clock in seconds."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class RecordingTransport:
    """Transport double that records sends and can fail chosen calls."""

    def __init__(self, fail_calls: set[int] | None = None, raise_calls: set[int] | None = None):
        self.sent: list[tuple[str, str]] = []
        self.calls = 0
        self._fail_calls = fail_calls or set()
        self._raise_calls = raise_calls or set()
        self.closed = False

    async def send(self, conversation_id: str, text: str) -> bool:
        self.calls += 1
        if self.calls in self._raise_calls:
            raise ConnectionError("transport down")
        if self.calls in self._fail_calls:
            return False
        self.sent.append((conversation_id, text))
        return True

    async def close(self) -> None:
        self.closed = True

    def texts(self, conversation_id: str | None = None) -> list[str]:
        return [t for c, t in self.sent if conversation_id is None or c == conversation_id]


@pytest.fixture
def clock():
    """Create a fake clock."""
    return FakeClock()


@pytest.fixture
def transport():
    """Create a recording transport."""
    return RecordingTransport()


@pytest.fixture
def mock_llm():
    """Create mock generation provider returning a flat response."""
    llm = Mock()
    llm.generate = AsyncMock(return_value={"output_text": "Test response"})
    llm.close = AsyncMock()
    return llm


@pytest.fixture
def dedup(clock):
    """Create dedup filter on the fake clock."""
    from convo.dedup import DedupFilter

    return DedupFilter(window_seconds=600, clock=clock)


@pytest.fixture
def session_store(clock):
    """Create in-memory session store on the fake clock."""
    from convo.session import InMemorySessionStore

    return InMemorySessionStore(ttl_seconds=1800, clock=clock)


@pytest.fixture
def resolver(session_store):
    """Create continuity resolver."""
    from convo.dialogue import ContinuityResolver

    return ContinuityResolver(session_store)


@pytest.fixture
def invoker(mock_llm):
    """Create generation invoker over the mock provider."""
    from convo.llm import GenerationInvoker

    return GenerationInvoker(mock_llm, attempts_per_model=2)


@pytest.fixture
def delivery(transport):
    """Create chunked delivery with no real pauses."""
    from convo.delivery import ChunkedDelivery

    return ChunkedDelivery(transport, max_chars=100, sleep=AsyncMock())


@pytest.fixture
def orchestrator(dedup, resolver, invoker, delivery):
    """Create orchestrator wired to test doubles."""
    from convo.webhook import WebhookOrchestrator

    return WebhookOrchestrator(
        dedup=dedup,
        resolver=resolver,
        invoker=invoker,
        delivery=delivery,
        model_candidates=["model-a", "model-b"],
        bot_name="TestBot",
        timeout_ms=1000,
    )


@pytest_asyncio.fixture
async def sqlite_backend():
    """Create in-memory SQLite session backend."""
    from convo.session import SqliteSessionBackend

    backend = SqliteSessionBackend(":memory:")
    await backend.init()
    yield backend
    await backend.close()


@pytest.fixture
def engine_config():
    """Config suitable for building an Application in tests."""
    from convo.config import EngineConfig

    return EngineConfig(
        bot_name="TestBot",
        model_candidates=["model-a"],
        send_delay_ms=0,
        generation_timeout_ms=1000,
    )
