"""Application bootstrap and lifecycle management."""

from typing import Protocol

from .config import EngineConfig
from .dedup import DedupFilter
from .delivery import ChunkedDelivery, ITransport, WhatsAppTransport
from .dialogue import ContinuityResolver, ContinuityRules
from .llm import GenerationInvoker, ILLMProvider, create_provider
from .logging_config import get_logger
from .session import (
    DurableSessionStore,
    InMemorySessionStore,
    ISessionStore,
    SqliteSessionBackend,
)
from .webhook import WebhookOrchestrator

logger = get_logger(__name__)


class IApplication(Protocol):
    """Bootstrap and lifecycle."""

    async def start(self) -> None:
        """Initialize components in dependency order."""
        ...

    async def stop(self) -> None:
        """Shutdown in reverse order."""
        ...

    async def reset(self) -> None:
        """Forget dedup entries and every conversation session."""
        ...


class Application:
    """Main application bootstrap."""

    def __init__(
        self,
        config: EngineConfig | None = None,
        provider: ILLMProvider | None = None,
        transport: ITransport | None = None,
    ):
        self._config = config or EngineConfig.from_env()

        # Injected collaborators win over the ones built from config
        self._provider: ILLMProvider | None = provider
        self._transport: ITransport | None = transport

        # Components (will be initialized in start())
        self._dedup: DedupFilter | None = None
        self._session_store: ISessionStore | None = None
        self._resolver: ContinuityResolver | None = None
        self._invoker: GenerationInvoker | None = None
        self._delivery: ChunkedDelivery | None = None
        self._orchestrator: WebhookOrchestrator | None = None

    async def start(self) -> None:
        """Initialize components in dependency order."""
        config = self._config
        logger.info("Starting application", extra={"context": config.env_summary()})

        # 1. Dedup filter (no dependencies)
        self._dedup = DedupFilter(window_seconds=config.dedup_window_seconds)

        # 2. Session store (memory or sqlite)
        self._session_store = await self._build_session_store()
        logger.info(f"Session store initialized ({config.session_backend})")

        # 3. Continuity resolver (depends on session store)
        self._resolver = ContinuityResolver(
            self._session_store,
            ContinuityRules(
                short_message_max_chars=config.short_message_max_chars,
                question_marks=config.question_marks,
            ),
        )

        # 4. Generation provider + invoker
        if self._provider is None:
            self._provider = create_provider(config)
        self._invoker = GenerationInvoker(
            self._provider, attempts_per_model=config.attempts_per_model
        )
        logger.info("Generation invoker initialized")

        # 5. Transport + chunked delivery
        if self._transport is None:
            self._transport = WhatsAppTransport(
                access_token=config.meta_access_token,
                phone_number_id=config.phone_number_id,
                api_version=config.graph_api_version,
            )
        self._delivery = ChunkedDelivery(
            self._transport,
            max_chars=config.chunk_max_chars,
            pause_seconds=config.send_delay_seconds,
        )

        # 6. Orchestrator (depends on everything above)
        self._orchestrator = WebhookOrchestrator(
            dedup=self._dedup,
            resolver=self._resolver,
            invoker=self._invoker,
            delivery=self._delivery,
            model_candidates=config.model_candidates,
            bot_name=config.bot_name,
            max_output_tokens=config.max_output_tokens,
            timeout_ms=config.generation_timeout_ms,
            serialize_conversations=config.serialize_conversations,
        )
        logger.info("All components initialized successfully")

    async def _build_session_store(self) -> ISessionStore:
        config = self._config
        if config.session_backend == "sqlite":
            backend = SqliteSessionBackend(config.database_url)
            await backend.init()
            return DurableSessionStore(backend, ttl_seconds=config.session_ttl_seconds)
        if config.session_backend == "memory":
            return InMemorySessionStore(ttl_seconds=config.session_ttl_seconds)
        raise ValueError(f"Unknown SESSION_BACKEND: {config.session_backend}")

    async def stop(self) -> None:
        """Shutdown in reverse order."""
        if self._orchestrator is not None:
            await self._orchestrator.drain()
        if self._transport is not None:
            await self._transport.close()
        if self._provider is not None:
            await self._provider.close()
        if isinstance(self._session_store, DurableSessionStore):
            await self._session_store.close()
            logger.info("Session backend closed")

    async def reset(self) -> None:
        """Forget dedup entries and every conversation session."""
        if self._dedup is not None:
            self._dedup.clear()
        if self._resolver is not None:
            await self._resolver.reset_all()
        logger.info("Reset complete")

    @property
    def config(self) -> EngineConfig:
        return self._config

    @property
    def orchestrator(self) -> WebhookOrchestrator:
        """Get orchestrator instance."""
        if self._orchestrator is None:
            raise RuntimeError("Application not started")
        return self._orchestrator

    @property
    def resolver(self) -> ContinuityResolver:
        """Get continuity resolver instance."""
        if self._resolver is None:
            raise RuntimeError("Application not started")
        return self._resolver

    @property
    def session_store(self) -> ISessionStore:
        """Get session store instance."""
        if self._session_store is None:
            raise RuntimeError("Application not started")
        return self._session_store

    @property
    def delivery(self) -> ChunkedDelivery:
        """Get chunked delivery instance."""
        if self._delivery is None:
            raise RuntimeError("Application not started")
        return self._delivery
