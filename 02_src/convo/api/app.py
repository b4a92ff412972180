"""FastAPI application setup."""

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.responses import PlainTextResponse

from ..app import Application
from .routes import control, messaging, webhook


# Global application instance
_app: Application | None = None


def get_app() -> Application:
    """Get the global application instance."""
    global _app
    if _app is None:
        _app = Application()
    return _app


def create_fastapi_app(application: Application | None = None) -> FastAPI:
    """Create and configure FastAPI application."""
    if application is None:
        application = get_app()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Manage application lifespan."""
        # Startup
        await application.start()
        yield
        # Shutdown
        sim_instance = control.get_sim_instance()
        if sim_instance:
            await sim_instance.stop()
        await application.stop()

    fastapi_app = FastAPI(
        title="Chat Relay API",
        description="WhatsApp webhook relay with conversational continuity",
        version="0.1.0",
        lifespan=lifespan,
    )

    @fastapi_app.get("/", response_class=PlainTextResponse)
    async def root() -> str:
        return f"{application.config.bot_name} running ✅"

    @fastapi_app.get("/health")
    async def health() -> dict:
        return {"ok": True}

    fastapi_app.include_router(webhook.create_webhook_router(application))
    fastapi_app.include_router(messaging.create_messaging_router(application))
    fastapi_app.include_router(control.create_control_router(application))

    return fastapi_app
