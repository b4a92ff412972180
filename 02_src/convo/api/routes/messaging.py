"""Messaging API routes."""

from pydantic import BaseModel
from fastapi import APIRouter, HTTPException

from ...app import Application
from ...models import HandleOutcome, InboundEvent


class MessageRequest(BaseModel):
    """Request model for sending a message."""

    conversation_id: str
    text: str
    event_id: str | None = None


class MessageResponse(BaseModel):
    """Response model for message."""

    outcome: str
    reply: str | None = None


def create_messaging_router(app: Application) -> APIRouter:
    """Create messaging router."""
    router = APIRouter(prefix="/api", tags=["messaging"])

    @router.post("/messages", response_model=MessageResponse)
    async def send_message(request: MessageRequest) -> dict:
        """Run one message through the pipeline and wait for it."""
        try:
            outcome = await app.orchestrator.handle(
                InboundEvent(
                    conversation_id=request.conversation_id,
                    event_id=request.event_id,
                    text=request.text,
                )
            )
            reply = None
            if outcome is HandleOutcome.REPLIED:
                session = await app.session_store.get(request.conversation_id)
                reply = session.last_reply_text if session else None
            return {"outcome": outcome.value, "reply": reply}
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    return router
