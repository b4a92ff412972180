"""WhatsApp webhook routes."""

from fastapi import APIRouter, Query, Request
from fastapi.responses import PlainTextResponse

from ...app import Application
from ...logging_config import get_logger
from ...webhook import normalize_whatsapp_payload

logger = get_logger(__name__)


def create_webhook_router(app: Application) -> APIRouter:
    """Create webhook router."""
    router = APIRouter(prefix="/webhook", tags=["webhook"])

    @router.get("/whatsapp", response_class=PlainTextResponse)
    async def verify_webhook(
        mode: str | None = Query(None, alias="hub.mode"),
        token: str | None = Query(None, alias="hub.verify_token"),
        challenge: str | None = Query(None, alias="hub.challenge"),
    ) -> PlainTextResponse:
        """Answer the subscription handshake."""
        if mode == "subscribe" and token == app.config.verify_token:
            return PlainTextResponse(challenge or "", status_code=200)
        return PlainTextResponse("Forbidden", status_code=403)

    @router.post("/whatsapp")
    async def receive_webhook(request: Request) -> dict:
        """Acknowledge at once; the reply pipeline runs in the background."""
        try:
            payload = await request.json()
        except ValueError:
            logger.warning("Webhook body is not JSON")
            payload = None

        event = normalize_whatsapp_payload(payload)
        if event is not None:
            app.orchestrator.dispatch(event)

        return {"status": "ok"}

    return router
