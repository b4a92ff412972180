"""Core data models for the chat relay."""

from .dialogue import (
    BoundYesNo,
    Classification,
    Epoch,
    ExplicitContinue,
    Fresh,
    ImplicitShort,
    ResolvedPrompt,
)
from .events import DedupEntry, HandleOutcome, InboundEvent
from .generation import (
    AttemptOutcome,
    AttemptStatus,
    DeliveryReport,
    GenerationRequest,
    Turn,
)
from .session import SESSION_FIELDS, ConversationSession

__all__ = [
    # Events
    "InboundEvent",
    "DedupEntry",
    "HandleOutcome",
    # Session
    "ConversationSession",
    "SESSION_FIELDS",
    # Generation
    "Turn",
    "GenerationRequest",
    "AttemptStatus",
    "AttemptOutcome",
    "DeliveryReport",
    # Dialogue
    "ExplicitContinue",
    "BoundYesNo",
    "ImplicitShort",
    "Fresh",
    "Classification",
    "ResolvedPrompt",
    "Epoch",
]
