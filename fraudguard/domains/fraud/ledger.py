"""Transfer ledger: gate, record, and alert on transfer requests."""

import uuid
from datetime import UTC, datetime

import structlog
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from fraudguard.db.models import BehaviorSessionDB, TransactionDB

from .accounts import get_owned_account
from .alerts import build_transaction_alert, record_alert
from .config import FraudConfig, default_config
from .models import (
    FraudFlag,
    Transaction,
    TransactionResult,
    TransactionStatus,
    TransferRequest,
)
from .policy import decide_transaction

logger = structlog.get_logger()


def transaction_from_row(row: TransactionDB) -> Transaction:
    return Transaction(
        transaction_id=row.transaction_id,
        account_id=row.account_id,
        user_id=row.user_id,
        amount=row.amount,
        type=row.transaction_type,
        recipient=row.recipient,
        description=row.description,
        session_id=row.session_id,
        risk_score=row.risk_score,
        status=TransactionStatus(row.status),
        fraud_flags=[FraudFlag(f) for f in row.fraud_flags or []],
        created_at=row.created_at,
    )


class TransactionLedger:
    """Creates transactions. Each transaction is written once and never updated."""

    def __init__(self, config: FraudConfig | None = None) -> None:
        self._config = config or default_config

    async def session_risk_score(
        self,
        user_id: str,
        session_id: str,
        db_session: AsyncSession,
        config: FraudConfig | None = None,
    ) -> float:
        """Last persisted risk score of the caller's session, or the default."""
        cfg = config or self._config
        stmt = select(BehaviorSessionDB.risk_score).where(
            BehaviorSessionDB.user_id == user_id,
            BehaviorSessionDB.session_id == session_id,
        )
        result = await db_session.execute(stmt)
        score = result.scalar_one_or_none()
        if score is None:
            return cfg.decision.default_risk_score
        return score

    async def submit_transfer(
        self,
        user_id: str,
        request: TransferRequest,
        db_session: AsyncSession,
        config: FraudConfig | None = None,
    ) -> TransactionResult:
        """Evaluate and record a transfer.

        The transaction and its alert (if any) are committed together.
        Raises PermissionError when the account is missing or not the caller's.
        """
        cfg = config or self._config
        await get_owned_account(user_id, request.account_id, db_session)

        risk_score = await self.session_risk_score(user_id, request.session_id, db_session, cfg)
        decision = decide_transaction(risk_score, request.amount, cfg.decision)

        now = datetime.now(UTC)
        transaction_id = str(uuid.uuid4())
        try:
            db_session.add(
                TransactionDB(
                    transaction_id=transaction_id,
                    account_id=request.account_id,
                    user_id=user_id,
                    amount=request.amount,
                    transaction_type=request.type,
                    recipient=request.recipient,
                    description=request.description,
                    session_id=request.session_id,
                    risk_score=decision.risk_score,
                    status=decision.status.value,
                    fraud_flags=[f.value for f in decision.fraud_flags],
                    created_at=now,
                )
            )
            alert = build_transaction_alert(
                user_id, request.session_id, transaction_id, decision, now=now
            )
            if alert is not None:
                await record_alert(alert, db_session)
            await db_session.commit()
        except Exception:
            await db_session.rollback()
            raise

        logger.info(
            "transfer_decided",
            user_id=user_id,
            transaction_id=transaction_id,
            session_id=request.session_id,
            risk_score=decision.risk_score,
            status=decision.status.value,
            fraud_flags=[f.value for f in decision.fraud_flags],
            alert_created=alert is not None,
        )
        return TransactionResult(
            transaction_id=transaction_id,
            status=decision.status,
            risk_score=decision.risk_score,
            fraud_flags=decision.fraud_flags,
        )

    async def recent_transactions(
        self,
        user_id: str,
        db_session: AsyncSession,
        account_id: str | None = None,
        limit: int = 20,
    ) -> list[Transaction]:
        """Newest-first transactions for the user, optionally for one of their accounts."""
        stmt = select(TransactionDB).where(TransactionDB.user_id == user_id)
        if account_id is not None:
            stmt = stmt.where(TransactionDB.account_id == account_id)
        stmt = stmt.order_by(TransactionDB.created_at.desc()).limit(limit)
        result = await db_session.execute(stmt)
        return [transaction_from_row(row) for row in result.scalars().all()]
