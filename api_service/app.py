"""
FastAPI service for the Weak Ties contact tools.

Provides endpoints for LinkedIn profile lookups, contact CSV uploads and the
AI networking assistant. Contact lists are held per session in memory.
"""

import logging
from datetime import datetime, timezone

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from src.common.logger import setup_logging
from version import __version__

from .config import settings, validate_config_on_startup
from .models import HealthResponse
from .routes import ai_router, contacts_router, profiles_router
from .sessions import SessionStore

# Configure logging
setup_logging(level=settings.log_level, format=settings.log_format)
logger = logging.getLogger(__name__)

# Validate configuration at startup
validate_config_on_startup()

app = FastAPI(title="Weak Ties API", version=__version__)
app.state.sessions = SessionStore()

# Configure CORS using validated settings
if settings.cors_origins_list:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

# Include modular route handlers
app.include_router(profiles_router)
app.include_router(contacts_router)
app.include_router(ai_router)


@app.get("/health", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """
    Health check endpoint for container orchestration.
    """
    return HealthResponse(
        status="healthy",
        version=__version__,
        timestamp=datetime.now(timezone.utc),
        active_sessions=len(app.state.sessions),
    )
