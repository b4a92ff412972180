"""Main entry point for the chat relay."""

from pathlib import Path

import uvicorn
from dotenv import load_dotenv

from convo.api import create_fastapi_app
from convo.app import Application
from convo.config import EngineConfig
from convo.logging_config import get_logger, setup_logging
from sim import Sim


def main():
    """Run the application."""
    project_root = Path(__file__).resolve().parent.parent
    load_dotenv(project_root / ".env")

    config = EngineConfig.from_env()
    setup_logging(config.log_level)
    logger = get_logger("main")
    logger.info("Env check", extra={"context": config.env_summary()})

    api_url = f"http://localhost:{config.api_port}"

    # Create SIM instance
    sim = Sim(api_url=api_url)

    # Set SIM instance for control router
    from convo.api.routes import control
    control.set_sim_instance(sim)

    # Create FastAPI app
    app = create_fastapi_app(Application(config))

    # Run with uvicorn
    uvicorn.run(
        app,
        host=config.api_host,
        port=config.api_port,
        log_level="info",
    )


if __name__ == "__main__":
    main()
