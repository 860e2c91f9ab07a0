"""Back-Office API — FastAPI application entry point.

Invariants:
    - Routes registered explicitly (no auto-discovery)
    - Global error handlers map BackOfficeError → structured JSON responses
    - CORS configured from settings (not hardcoded)
    - Database and the LoginThrottle are created once per process in the lifespan

Design Decisions:
    - Lifespan over @app.on_event: FastAPI recommended pattern, cleaner cleanup
    - LoginThrottle lives on app.state: one shared lockout table per process,
      injected into routes through a dependency
"""

import logging
from contextlib import asynccontextmanager
from datetime import timedelta

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.api.error_handlers import register_error_handlers
from app.api.routes import authentication, health, products, sales, users
from app.config import get_settings
from app.core.login_throttle import InMemoryLoginAttemptStore, LoginThrottle
from app.infrastructure.database import init_db
from app.infrastructure.observability import setup_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle."""
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format)
    manager = init_db(
        settings.database_url,
        pool_size=settings.database_pool_size,
        max_overflow=settings.database_max_overflow,
    )
    app.state.login_throttle = LoginThrottle(
        InMemoryLoginAttemptStore(),
        max_attempts=settings.login_max_attempts,
        lockout_window=timedelta(minutes=settings.login_lockout_minutes),
    )
    logger.info("Back-office API started")
    yield
    logger.info("Back-office API shutting down")
    await manager.dispose()


app = FastAPI(
    title="Back-Office API", version="1.0.0", lifespan=lifespan,
)

settings = get_settings()
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(health.router)
app.include_router(authentication.router)
app.include_router(products.router)
app.include_router(sales.router)
app.include_router(users.router)

register_error_handlers(app)
