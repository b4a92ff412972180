"""Chat relay engine: dedup, conversational continuity and chunked delivery."""

from .app import Application, IApplication
from .config import EngineConfig
from .dedup import DedupFilter, IDedupFilter
from .delivery import ChunkedDelivery, IDelivery, ITransport, WhatsAppTransport
from .dialogue import ContinuityResolver, ContinuityRules, IContinuityResolver
from .llm import (
    AnthropicProvider,
    GenerationExhausted,
    GenerationInvoker,
    ILLMProvider,
    OpenAIResponsesProvider,
)
from .models import (
    ConversationSession,
    GenerationRequest,
    HandleOutcome,
    InboundEvent,
    Turn,
)
from .session import (
    DurableSessionStore,
    InMemorySessionStore,
    ISessionStore,
    SqliteSessionBackend,
)
from .webhook import WebhookOrchestrator, normalize_whatsapp_payload

__all__ = [
    # Application
    "Application",
    "IApplication",
    "EngineConfig",
    # Models
    "InboundEvent",
    "ConversationSession",
    "GenerationRequest",
    "Turn",
    "HandleOutcome",
    # Components
    "IDedupFilter",
    "DedupFilter",
    "ISessionStore",
    "InMemorySessionStore",
    "SqliteSessionBackend",
    "DurableSessionStore",
    "IContinuityResolver",
    "ContinuityResolver",
    "ContinuityRules",
    "ILLMProvider",
    "OpenAIResponsesProvider",
    "AnthropicProvider",
    "GenerationInvoker",
    "GenerationExhausted",
    "ITransport",
    "WhatsAppTransport",
    "IDelivery",
    "ChunkedDelivery",
    "WebhookOrchestrator",
    "normalize_whatsapp_payload",
]
