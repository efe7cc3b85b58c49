"""Health and readiness endpoints."""

from fastapi import APIRouter
from fastapi.responses import JSONResponse

from fraudguard.config import settings
from fraudguard.db.database import check_db
from fraudguard.domains.behavior.worker import get_risk_worker

router = APIRouter(tags=["health"])


@router.get("/health")
async def health() -> dict:
    from fraudguard.main import get_uptime

    return {
        "status": "healthy",
        "version": settings.app_version,
        "uptime_seconds": get_uptime(),
    }


@router.get("/ready")
async def ready() -> JSONResponse:
    db_ok = await check_db()
    worker = get_risk_worker()

    all_ready = db_ok and worker.is_running
    return JSONResponse(
        status_code=200 if all_ready else 503,
        content={
            "status": "ready" if all_ready else "degraded",
            "database": db_ok,
            "risk_worker": worker.is_running,
            "pending_recomputes": worker.pending,
        },
    )
