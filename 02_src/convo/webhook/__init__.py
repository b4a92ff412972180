"""Webhook handling module."""

from .normalizer import normalize_whatsapp_payload
from .orchestrator import ConversationLocks, WebhookOrchestrator

__all__ = ["normalize_whatsapp_payload", "ConversationLocks", "WebhookOrchestrator"]
