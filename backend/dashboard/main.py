"""Acme Dashboard API: FastAPI application entry point.

Invariants:
    - Routes registered explicitly (no auto-discovery)
    - Global error handlers map DashboardError to structured JSON responses
    - CORS and session cookie secret configured from settings
    - Database initialized on startup via lifespan context manager
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from starlette.middleware.sessions import SessionMiddleware

from dashboard import __version__
from dashboard.api.error_handlers import register_error_handlers
from dashboard.api.routes import auth, customers, health, invoices
from dashboard.config import get_settings
from dashboard.infrastructure import database
from dashboard.infrastructure.observability import setup_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle."""
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format)
    database.init_db(
        settings.database_url,
        pool_size=settings.database_pool_size,
        max_overflow=settings.database_max_overflow,
    )
    logger.info("Acme Dashboard API started")
    yield
    if database.db_manager:
        await database.db_manager.dispose()
    logger.info("Acme Dashboard API shutting down")


app = FastAPI(
    title="Acme Dashboard API", version=__version__, lifespan=lifespan,
)

settings = get_settings()
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_middleware(
    SessionMiddleware,
    secret_key=settings.auth_secret,
    max_age=settings.session_max_age_seconds,
    same_site="lax",
)

app.include_router(health.router)
app.include_router(auth.router)
app.include_router(invoices.router)
app.include_router(customers.router)

register_error_handlers(app)


def main() -> None:
    """Run the API with uvicorn (development entry point)."""
    import uvicorn

    uvicorn.run("dashboard.main:app", host="0.0.0.0", port=8000, log_level="info")
