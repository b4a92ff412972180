"""Conversation session data models."""

from dataclasses import dataclass


@dataclass
class ConversationSession:
    """Volatile continuity state for one conversation."""

    conversation_id: str
    last_user_text: str | None = None
    last_reply_text: str | None = None
    pending_followup_question: str | None = None
    awaiting_confirmation: bool = False
    updated_at: float = 0.0  # clock seconds of the last write


SESSION_FIELDS = frozenset(
    {
        "last_user_text",
        "last_reply_text",
        "pending_followup_question",
        "awaiting_confirmation",
    }
)
