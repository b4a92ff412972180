"""WhatsApp Cloud API transport."""

import json
from typing import Protocol

import httpx

from ..logging_config import get_logger

logger = get_logger(__name__)


class ITransport(Protocol):
    """Sends one text message to a conversation."""

    async def send(self, conversation_id: str, text: str) -> bool:
        """Send text; return True on success. Never raises for network errors."""
        ...

    async def close(self) -> None:
        """Release network resources."""
        ...


class WhatsAppTransport:
    """Graph API /messages sender; logs instead of sending when unconfigured."""

    GRAPH_HOST = "https://graph.facebook.com"

    def __init__(
        self,
        access_token: str | None,
        phone_number_id: str | None,
        api_version: str = "v19.0",
        client: httpx.AsyncClient | None = None,
        timeout_seconds: float = 15.0,
    ):
        self._token = access_token
        self._phone_number_id = phone_number_id
        self._url = (
            f"{self.GRAPH_HOST}/{api_version}/{phone_number_id}/messages"
            if phone_number_id
            else None
        )
        self._client = client or httpx.AsyncClient(timeout=timeout_seconds)

    @property
    def enabled(self) -> bool:
        return bool(self._token and self._url)

    async def send(self, conversation_id: str, text: str) -> bool:
        """Send one text message."""
        payload = {
            "messaging_product": "whatsapp",
            "to": conversation_id,
            "type": "text",
            "text": {"body": text},
        }

        if not self.enabled:
            logger.info("[dry-run] %s", json.dumps(payload, ensure_ascii=False))
            return True

        try:
            response = await self._client.post(
                self._url,
                headers={"Authorization": f"Bearer {self._token}"},
                json=payload,
            )
        except httpx.HTTPError as e:
            logger.error("WhatsApp send failed: %s", e)
            return False

        if response.status_code >= 300:
            logger.error(
                "WhatsApp send failed - status=%s body=%s",
                response.status_code,
                response.text[:500],
            )
            return False

        return True

    async def close(self) -> None:
        await self._client.aclose()
