"""SIM implementation - scripted WhatsApp webhook replay for local testing."""

import asyncio
import time
import uuid
from typing import Protocol

import httpx

from convo.logging_config import get_logger

logger = get_logger(__name__)


def build_whatsapp_payload(
    conversation_id: str,
    text: str,
    message_id: str | None = None,
) -> dict:
    """Build a WhatsApp Cloud API inbound text webhook body."""
    return {
        "object": "whatsapp_business_account",
        "entry": [
            {
                "id": "sim-business-account",
                "changes": [
                    {
                        "field": "messages",
                        "value": {
                            "messaging_product": "whatsapp",
                            "messages": [
                                {
                                    "from": conversation_id,
                                    "id": message_id or f"wamid.sim-{uuid.uuid4().hex}",
                                    "timestamp": str(int(time.time())),
                                    "type": "text",
                                    "text": {"body": text},
                                }
                            ],
                        },
                    }
                ],
            }
        ],
    }


# (conversation_id, text, redeliver) - redeliver posts the same message id twice
SCENARIO: list[tuple[str, str, bool]] = [
    ("15550000001", "What are the first steps for a HACCP plan?", True),
    ("15550000002", "ما هي خطوات تطبيق HACCP؟", False),
    ("15550000001", "yes", False),
    ("15550000001", "continue", False),
    ("15550000002", "كمل", False),
    ("15550000001", "reset", False),
    ("15550000001", "ok", False),
]


class ISim(Protocol):
    """Generate test traffic against the webhook route."""

    async def start(self) -> None:
        """Start scripted scenario."""
        ...

    async def stop(self) -> None:
        """Stop scenario."""
        ...


class Sim:
    """Replays SCENARIO through POST /webhook/whatsapp."""

    def __init__(
        self,
        api_url: str = "http://localhost:8000",
        scenario: list[tuple[str, str, bool]] | None = None,
        delay_seconds: float = 3.0,
        client: httpx.AsyncClient | None = None,
    ):
        self._api_url = api_url
        self._scenario = scenario if scenario is not None else SCENARIO
        self._delay = delay_seconds
        self._running = False
        self._task: asyncio.Task | None = None
        self._client = client
        self._owns_client = client is None
        self.sent = 0

    async def start(self) -> None:
        """Start scripted scenario."""
        if self._running:
            return

        self._running = True
        if self._client is None:
            self._client = httpx.AsyncClient()

        # Start background task
        self._task = asyncio.create_task(self._run_scenario())

    async def stop(self) -> None:
        """Stop scenario."""
        self._running = False

        if self._task:
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
            self._task = None

        if self._client and self._owns_client:
            await self._client.aclose()
            self._client = None

    async def wait(self) -> None:
        """Wait for the scenario to finish."""
        if self._task:
            await self._task

    async def _run_scenario(self) -> None:
        """Run scripted scenario."""
        try:
            for conversation_id, text, redeliver in self._scenario:
                if not self._running:
                    break

                message_id = f"wamid.sim-{uuid.uuid4().hex}"
                await self._post(conversation_id, text, message_id)
                if redeliver:
                    await self._post(conversation_id, text, message_id)

                # Leave time for the reply before the follow-up
                await asyncio.sleep(self._delay)

        except asyncio.CancelledError:
            pass
        except Exception as e:
            logger.error("SIM scenario error: %s", e)
        finally:
            self._running = False
            logger.info("SIM: scenario finished, %s webhooks posted", self.sent)

    async def _post(self, conversation_id: str, text: str, message_id: str) -> None:
        """Post one webhook delivery."""
        if not self._client:
            return

        try:
            response = await self._client.post(
                f"{self._api_url}/webhook/whatsapp",
                json=build_whatsapp_payload(conversation_id, text, message_id),
                timeout=10.0,
            )

            if response.status_code == 200:
                self.sent += 1
                logger.info("SIM: %s -> %s (%s)", conversation_id, text, message_id)
            else:
                logger.error("SIM: webhook rejected: %s", response.status_code)

        except httpx.HTTPError as e:
            logger.error("SIM: Failed to post webhook: %s", e)
