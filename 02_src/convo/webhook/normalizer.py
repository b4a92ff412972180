"""WhatsApp Cloud API webhook payload normalization."""

from datetime import datetime, timezone
from typing import Any

from ..models import InboundEvent


def _first(items: Any) -> Any:
    return items[0] if isinstance(items, list) and items else None


def _received_at(raw: Any) -> datetime:
    try:
        return datetime.fromtimestamp(int(raw), tz=timezone.utc)
    except (TypeError, ValueError, OverflowError, OSError):
        return datetime.now(timezone.utc)


def normalize_whatsapp_payload(payload: Any) -> InboundEvent | None:
    """Extract the first inbound message, or None for status callbacks and junk."""
    if not isinstance(payload, dict):
        return None

    entry = _first(payload.get("entry"))
    change = _first(entry.get("changes")) if isinstance(entry, dict) else None
    value = change.get("value") if isinstance(change, dict) else None
    message = _first(value.get("messages")) if isinstance(value, dict) else None
    if not isinstance(message, dict):
        return None

    message_type = message.get("type") or "text"
    text = None
    if message_type == "text":
        body = message.get("text")
        text = body.get("body") if isinstance(body, dict) else None

    return InboundEvent(
        conversation_id=message.get("from") or None,
        event_id=message.get("id") or None,
        text=text,
        received_at=_received_at(message.get("timestamp")),
        message_type=message_type,
    )
