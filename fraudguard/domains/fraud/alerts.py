"""Fraud alert emission for flagged transfers and high-risk sessions.

Alerts are never deduplicated: every qualifying trigger produces its own
record.
"""

import uuid
from datetime import UTC, datetime

import structlog
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from fraudguard.db.models import FraudAlertDB

from .config import AlertSettings, default_config
from .models import (
    AlertSeverity,
    AlertStatus,
    AlertType,
    FraudAlert,
    TransactionDecision,
    TransactionStatus,
)

logger = structlog.get_logger()


def transaction_alert_severity(status: TransactionStatus) -> AlertSeverity | None:
    """Severity of the alert raised for a transfer, None when no alert is due."""
    match status:
        case TransactionStatus.APPROVED:
            return None
        case TransactionStatus.FLAGGED:
            return AlertSeverity.MEDIUM
        case TransactionStatus.BLOCKED:
            return AlertSeverity.CRITICAL
        case _:
            raise ValueError(f"Unhandled transaction status: {status!r}")


def build_transaction_alert(
    user_id: str,
    session_id: str,
    transaction_id: str,
    decision: TransactionDecision,
    now: datetime | None = None,
) -> FraudAlert | None:
    severity = transaction_alert_severity(decision.status)
    if severity is None:
        return None

    factors = [str(flag) for flag in decision.fraud_flags]
    return FraudAlert(
        alert_id=str(uuid.uuid4()),
        user_id=user_id,
        session_id=session_id,
        transaction_id=transaction_id,
        alert_type=AlertType.HIGH_RISK_TRANSACTION,
        severity=severity,
        description=(
            f"Transaction {decision.status} due to behavioral risk factors: "
            f"{', '.join(factors)}"
        ),
        risk_factors=factors,
        status=AlertStatus.OPEN,
        created_at=now or datetime.now(UTC),
    )


def build_behavioral_alert(
    user_id: str,
    session_id: str,
    risk_score: float,
    anomalies: list[str],
    settings: AlertSettings | None = None,
    now: datetime | None = None,
) -> FraudAlert | None:
    cfg = settings or default_config.alerts
    if risk_score <= cfg.behavioral_alert_threshold:
        return None

    if risk_score > cfg.behavioral_high_severity_threshold:
        severity = AlertSeverity.HIGH
    else:
        severity = AlertSeverity.MEDIUM

    factors = [str(tag) for tag in anomalies]
    return FraudAlert(
        alert_id=str(uuid.uuid4()),
        user_id=user_id,
        session_id=session_id,
        alert_type=AlertType.BEHAVIORAL_ANOMALY,
        severity=severity,
        description=f"Behavioral anomalies detected: {', '.join(factors)}",
        risk_factors=factors,
        status=AlertStatus.OPEN,
        created_at=now or datetime.now(UTC),
    )


async def record_alert(alert: FraudAlert, session: AsyncSession) -> FraudAlertDB:
    """Stage the alert in the caller's unit of work. The caller commits."""
    row = FraudAlertDB(
        alert_id=alert.alert_id,
        user_id=alert.user_id,
        session_id=alert.session_id,
        transaction_id=alert.transaction_id,
        alert_type=alert.alert_type.value,
        severity=alert.severity.value,
        description=alert.description,
        risk_factors=list(alert.risk_factors),
        status=alert.status.value,
        created_at=alert.created_at,
        investigator_notes=alert.investigator_notes,
    )
    session.add(row)

    logger.warning(
        "fraud_alert_created",
        alert_id=alert.alert_id,
        user_id=alert.user_id,
        session_id=alert.session_id,
        transaction_id=alert.transaction_id,
        alert_type=alert.alert_type.value,
        severity=alert.severity.value,
        risk_factors=alert.risk_factors,
    )
    return row


def alert_from_row(row: FraudAlertDB) -> FraudAlert:
    return FraudAlert(
        alert_id=row.alert_id,
        user_id=row.user_id,
        session_id=row.session_id,
        transaction_id=row.transaction_id,
        alert_type=AlertType(row.alert_type),
        severity=AlertSeverity(row.severity),
        description=row.description,
        risk_factors=list(row.risk_factors or []),
        status=AlertStatus(row.status),
        created_at=row.created_at,
        investigator_notes=row.investigator_notes,
    )


async def list_alerts(user_id: str, session: AsyncSession, limit: int = 10) -> list[FraudAlert]:
    """Most recent alerts for a user, newest first."""
    stmt = (
        select(FraudAlertDB)
        .where(FraudAlertDB.user_id == user_id)
        .order_by(FraudAlertDB.created_at.desc())
        .limit(limit)
    )
    result = await session.execute(stmt)
    return [alert_from_row(row) for row in result.scalars().all()]
