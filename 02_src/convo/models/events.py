"""Inbound event and dedup data models."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum


@dataclass
class InboundEvent:
    """One normalized webhook delivery."""

    conversation_id: str | None
    event_id: str | None
    text: str | None
    received_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    message_type: str = "text"  # "text", "image", "audio", ...


@dataclass
class DedupEntry:
    """First sighting of a webhook event id."""

    event_id: str
    first_seen_at: float  # clock seconds


class HandleOutcome(str, Enum):
    """What the orchestrator did with one inbound event."""

    DROPPED = "dropped"
    DUPLICATE = "duplicate"
    UNSUPPORTED = "unsupported"
    COMMAND = "command"
    REPLIED = "replied"
    GENERATION_FAILED = "generation_failed"
    FAILED = "failed"
