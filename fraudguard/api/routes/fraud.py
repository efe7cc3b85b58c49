"""Fraud alert and runtime configuration endpoints."""

import structlog
from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from fraudguard.api.dependencies import admin_user_id, current_user_id
from fraudguard.db.database import get_session
from fraudguard.domains.fraud.alerts import list_alerts
from fraudguard.domains.fraud.config_store import list_entries, set_entry
from fraudguard.domains.fraud.models import FraudConfigUpdate

logger = structlog.get_logger()
router = APIRouter(prefix="/api/v1/fraud", tags=["fraud"])


@router.get("/alerts")
async def get_fraud_alerts(
    user_id: str = Depends(current_user_id),
    session: AsyncSession = Depends(get_session),  # noqa: B008
    limit: int = Query(default=10, ge=1, le=100),
) -> dict:
    alerts = await list_alerts(user_id, session, limit=limit)
    return {
        "items": [a.model_dump(mode="json") for a in alerts],
        "total": len(alerts),
        "limit": limit,
    }


@router.get("/config")
async def get_fraud_config(
    session: AsyncSession = Depends(get_session),  # noqa: B008
) -> dict:
    entries = await list_entries(session)
    return {"items": [e.model_dump(mode="json") for e in entries], "total": len(entries)}


@router.put("/config/{config_key}")
async def put_fraud_config(
    config_key: str,
    update: FraudConfigUpdate,
    user_id: str = Depends(admin_user_id),
    session: AsyncSession = Depends(get_session),  # noqa: B008
) -> dict:
    entry = await set_entry(config_key, update.config_value, session, update.description)
    logger.info("fraud_config_changed_by", config_key=config_key, user_id=user_id)
    return entry.model_dump(mode="json")
