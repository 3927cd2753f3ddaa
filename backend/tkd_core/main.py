"""tkd-core API: FastAPI application entry point.

Invariants:
    - Routes registered explicitly (no auto-discovery)
    - Global error handlers map TkdError -> structured JSON responses
    - CORS configured from settings (not hardcoded)
    - Logging and database initialized on startup via lifespan context manager
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from tkd_core.api.error_handlers import register_error_handlers
from tkd_core.api.routes import (
    class_sessions, groups, health, persons, promotions, ranks,
)
from tkd_core.config import get_settings
from tkd_core.infrastructure import database
from tkd_core.infrastructure.observability import setup_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle."""
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format)
    manager = database.init_db(
        settings.database_url,
        pool_size=settings.database_pool_size,
        max_overflow=settings.database_max_overflow,
    )
    logger.info("tkd-core API started")
    yield
    await manager.dispose()
    logger.info("tkd-core API shutting down")


app = FastAPI(title="tkd-core API", version="0.1.0", lifespan=lifespan)

settings = get_settings()
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(health.router)
app.include_router(ranks.router)
app.include_router(persons.router)
app.include_router(promotions.router)
app.include_router(groups.router)
app.include_router(class_sessions.router)

register_error_handlers(app)
