"""Account and transfer endpoints."""

import structlog
from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from fraudguard.api.dependencies import current_user_id
from fraudguard.db.database import get_session
from fraudguard.domains.fraud.accounts import list_active_accounts, seed_demo_accounts
from fraudguard.domains.fraud.config_store import effective_fraud_config
from fraudguard.domains.fraud.ledger import TransactionLedger
from fraudguard.domains.fraud.models import TransferRequest

logger = structlog.get_logger()
router = APIRouter(prefix="/api/v1/banking", tags=["banking"])

_ledger = TransactionLedger()


@router.get("/accounts")
async def get_accounts(
    user_id: str = Depends(current_user_id),
    session: AsyncSession = Depends(get_session),  # noqa: B008
) -> dict:
    accounts = await list_active_accounts(user_id, session)
    return {"items": [a.model_dump(mode="json") for a in accounts], "total": len(accounts)}


@router.post("/accounts/demo")
async def create_demo_accounts(
    user_id: str = Depends(current_user_id),
    session: AsyncSession = Depends(get_session),  # noqa: B008
) -> dict:
    created = await seed_demo_accounts(user_id, session)
    if not created:
        return {"message": "Accounts already exist", "items": []}
    return {
        "message": "Demo accounts created successfully",
        "items": [a.model_dump(mode="json") for a in created],
    }


@router.post("/transfers")
async def create_transfer(
    request: TransferRequest,
    user_id: str = Depends(current_user_id),
    session: AsyncSession = Depends(get_session),  # noqa: B008
) -> dict:
    """Gate a transfer on the submitting session's behavioral risk."""
    config = await effective_fraud_config(session)
    result = await _ledger.submit_transfer(user_id, request, session, config=config)
    return result.model_dump(mode="json")


@router.get("/transactions")
async def get_recent_transactions(
    user_id: str = Depends(current_user_id),
    session: AsyncSession = Depends(get_session),  # noqa: B008
    account_id: str | None = Query(default=None, description="Filter by account"),
    limit: int = Query(default=20, ge=1, le=200),
) -> dict:
    transactions = await _ledger.recent_transactions(
        user_id, session, account_id=account_id, limit=limit
    )
    return {
        "items": [t.model_dump(mode="json") for t in transactions],
        "total": len(transactions),
        "limit": limit,
    }
