"""Control API routes."""

from typing import Any

from pydantic import BaseModel
from fastapi import APIRouter, HTTPException

from ...app import Application


class StatusResponse(BaseModel):
    """Response model for status."""

    status: str


class SessionResponse(BaseModel):
    """Response model for a conversation session."""

    conversation_id: str
    last_user_text: str | None
    last_reply_text: str | None
    pending_followup_question: str | None
    awaiting_confirmation: bool


# Global SIM instance (will be set by main app)
_sim_instance: Any = None


def set_sim_instance(sim: Any) -> None:
    """Set the global SIM instance."""
    global _sim_instance
    _sim_instance = sim


def get_sim_instance() -> Any:
    """Get the global SIM instance."""
    return _sim_instance


def create_control_router(app: Application) -> APIRouter:
    """Create control router."""
    router = APIRouter(prefix="/api/control", tags=["control"])

    @router.post("/reset", response_model=StatusResponse)
    async def reset_system() -> dict:
        """Forget dedup entries and all sessions."""
        try:
            await app.reset()
            return {"status": "ok"}
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    @router.get("/conversations/{conversation_id}", response_model=SessionResponse)
    async def get_conversation(conversation_id: str) -> dict:
        """Inspect the live session for a conversation."""
        session = await app.session_store.get(conversation_id)
        if session is None:
            raise HTTPException(status_code=404, detail="No live session")
        return {
            "conversation_id": session.conversation_id,
            "last_user_text": session.last_user_text,
            "last_reply_text": session.last_reply_text,
            "pending_followup_question": session.pending_followup_question,
            "awaiting_confirmation": session.awaiting_confirmation,
        }

    @router.post("/conversations/{conversation_id}/reset", response_model=StatusResponse)
    async def reset_conversation(conversation_id: str) -> dict:
        """Clear continuity state for one conversation."""
        try:
            await app.resolver.reset(conversation_id)
            return {"status": "ok"}
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    @router.post("/test-send", response_model=StatusResponse)
    async def test_send() -> dict:
        """Send a fixed message to TEST_TO through the real delivery path."""
        if not app.config.test_to:
            raise HTTPException(status_code=400, detail="Set TEST_TO in environment")

        report = await app.delivery.deliver(
            app.config.test_to, f"🔥 Test message from {app.config.bot_name}"
        )
        if not report.complete:
            raise HTTPException(status_code=500, detail="Send failed (check logs)")
        return {"status": "ok"}

    @router.post("/sim/start", response_model=StatusResponse)
    async def start_sim() -> dict:
        """Start SIM webhook replay."""
        try:
            if _sim_instance:
                await _sim_instance.start()
                return {"status": "ok"}
            else:
                raise HTTPException(status_code=404, detail="SIM not configured")
        except HTTPException:
            raise
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    @router.post("/sim/stop", response_model=StatusResponse)
    async def stop_sim() -> dict:
        """Stop SIM webhook replay."""
        try:
            if _sim_instance:
                await _sim_instance.stop()
                return {"status": "ok"}
            else:
                raise HTTPException(status_code=404, detail="SIM not configured")
        except HTTPException:
            raise
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    return router
