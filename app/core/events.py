"""
Application lifecycle events
Handles startup and shutdown tasks
"""

from fastapi import FastAPI
import logging
from contextlib import asynccontextmanager

from .backend import BackendClient
from .config import settings
from .monitoring import setup_logging
from app.services.session_service import SessionManager

logger = logging.getLogger(__name__)

@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan manager
    Connects to Supabase and restores the session before serving requests
    """
    # Startup
    setup_logging()
    logger.info(f"Starting {settings.APP_NAME}...")

    backend = await BackendClient.connect()
    manager = SessionManager(backend)
    await manager.start()

    app.state.backend = backend
    app.state.session_manager = manager
    logger.info(f"{settings.APP_NAME} started successfully")

    try:
        yield
    finally:
        # Shutdown
        logger.info(f"Shutting down {settings.APP_NAME}...")
        manager.stop()
        logger.info(f"{settings.APP_NAME} shutdown complete")
