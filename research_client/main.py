"""Application entry point.

Builds the client (config, session store, API client, orchestrator) and
serves the NiceGUI chat interface. Environment variables are loaded from
.env file.
"""

import logging
import os
import sys

from dotenv import load_dotenv

# Load environment variables before any other imports that might need them
load_dotenv()

# Configure logging
logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    handlers=[logging.StreamHandler(sys.stdout)],
)
logger = logging.getLogger(__name__)


def run() -> None:
    """Wire the client together and serve the chat UI.

    The session store is loaded once at startup and flushed on shutdown.
    """
    from nicegui import app, ui

    from research_client.api.client import ResearchApiClient
    from research_client.config import get_client_config
    from research_client.interaction.orchestrator import InteractionOrchestrator
    from research_client.persistence.storage import JsonFileStorage, MemoryStorage
    from research_client.sessions.store import SessionStore
    from research_client.ui.chat_page import NiceGuiNotifier, register_chat_page

    config = get_client_config()
    if config.session_store_path:
        storage = JsonFileStorage(config.session_store_path)
    else:
        logger.warning("SESSION_STORE_PATH is empty, sessions will not survive restarts")
        storage = MemoryStorage()

    store = SessionStore(storage, capacity=config.max_sessions)
    store.initialize()
    api_client = ResearchApiClient(config)
    orchestrator = InteractionOrchestrator(store, api_client, NiceGuiNotifier(), config)
    register_chat_page(store, orchestrator)

    app.on_shutdown(store.shutdown)
    app.on_shutdown(api_client.aclose)

    logger.info(f"Using research assistant backend at {config.api_base_url}")
    logger.info(f"Chat UI available at http://localhost:{os.getenv('PORT', '8080')}/")

    ui.run(
        title="Research Assistant",
        favicon="🔬",
        host=os.getenv("HOST", "0.0.0.0"),
        port=int(os.getenv("PORT", "8080")),
        reload=False,
        storage_secret=os.getenv("NICEGUI_STORAGE_SECRET", "research-client-secret"),
    )


def main() -> None:
    """Application entry point."""
    logger.info("Starting Research Client")
    run()


if __name__ in {"__main__", "__mp_main__"}:
    main()
