"""FastAPI application entry point for the behavioral fraud guard."""

import time
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from fraudguard.api.middleware.error_handler import global_exception_handler
from fraudguard.api.middleware.logging import StructuredLoggingMiddleware
from fraudguard.api.routes.banking import router as banking_router
from fraudguard.api.routes.behavior import router as behavior_router
from fraudguard.api.routes.fraud import router as fraud_router
from fraudguard.api.routes.health import router as health_router
from fraudguard.config import settings
from fraudguard.domains.behavior.worker import get_risk_worker
from fraudguard.shared.logging import setup_logging

logger = structlog.get_logger()

# Track app start time for uptime calculation
APP_START_TIME: float = 0.0


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan: startup and shutdown logic."""
    global APP_START_TIME
    APP_START_TIME = time.time()
    setup_logging(settings.log_level)

    logger.info(
        "fraudguard_starting",
        app_name=settings.app_name,
        version=settings.app_version,
        debug=settings.debug,
    )

    from fraudguard.db.database import init_db

    await init_db()

    worker = get_risk_worker()
    await worker.start()

    yield

    await worker.stop()
    logger.info("fraudguard_shutting_down", dropped_recomputes=worker.pending)


app = FastAPI(
    title="Behavioral Fraud Guard",
    description="Behavioral risk scoring and transaction gating for online banking",
    version=settings.app_version,
    lifespan=lifespan,
)

# CORS for local development
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"] if settings.debug else [],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.add_middleware(StructuredLoggingMiddleware)

# Domain errors map to 4xx responses; anything else is a 500
app.add_exception_handler(PermissionError, global_exception_handler)
app.add_exception_handler(LookupError, global_exception_handler)
app.add_exception_handler(ValueError, global_exception_handler)
app.add_exception_handler(Exception, global_exception_handler)

app.include_router(health_router)
app.include_router(behavior_router)
app.include_router(banking_router)
app.include_router(fraud_router)


def get_uptime() -> int:
    """Get application uptime in seconds."""
    if APP_START_TIME == 0.0:
        return 0
    return int(time.time() - APP_START_TIME)
