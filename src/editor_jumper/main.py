# FastAPI application entry point
# Defines the main app instance and core routes

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from pydantic import BaseModel

from .api import ide_endpoints, jump_endpoints
from .config import configure_logging, get_config
from .context import create_context
from .services.host_bridge import NotificationHostBridge

logger = logging.getLogger(__name__)


class HealthResponse(BaseModel):
    """Health check response model."""

    status: str
    message: str
    platform: str


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Manage application lifecycle"""
    app_settings = getattr(app.state, "settings", None) or get_config()
    configure_logging(app_settings)

    try:
        # Tests may install a context before startup
        if getattr(app.state, "context", None) is None:
            logger.info("Initializing services...")
            app.state.context = create_context(app_settings, host=NotificationHostBridge())
        logger.info(f"Configuration: {app.state.context.config_manager.config_path}")
    except Exception as e:
        logger.error(f"Startup failed: {e}")
        raise

    yield

    # Shutdown
    logger.info("Waiting for launched processes to report...")
    await app.state.context.launcher.drain(timeout=5)
    logger.info("Shutdown complete")


app = FastAPI(
    title="Editor Jumper",
    description="Open the current file and cursor position in an external IDE",
    version="0.1.0",
    lifespan=lifespan,
)

app.include_router(ide_endpoints.router)
app.include_router(jump_endpoints.router)


@app.get("/health", response_model=HealthResponse)
async def health() -> HealthResponse:
    """Health check endpoint."""
    context = getattr(app.state, "context", None)
    platform = context.platform.value if context is not None else "unknown"
    return HealthResponse(status="healthy", message="Editor Jumper is running", platform=platform)
