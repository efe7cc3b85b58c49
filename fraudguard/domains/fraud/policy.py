"""Transfer decision policy: risk score and amount to disposition."""

from decimal import Decimal

from .config import DecisionThresholds, default_config
from .models import FraudFlag, TransactionDecision, TransactionStatus


def decide_transaction(
    risk_score: float,
    amount: Decimal,
    thresholds: DecisionThresholds | None = None,
) -> TransactionDecision:
    """Decide a transfer's status from the session risk score and the amount.

    Risk alone can block; a large amount only ever escalates an approval to
    a flag.
    """
    cfg = thresholds or default_config.decision
    flags: list[FraudFlag] = []

    if risk_score > cfg.block_threshold:
        status = TransactionStatus.BLOCKED
        flags.append(FraudFlag.HIGH_RISK_BEHAVIOR)
    elif risk_score > cfg.flag_threshold:
        status = TransactionStatus.FLAGGED
        flags.append(FraudFlag.ELEVATED_RISK)
    else:
        status = TransactionStatus.APPROVED

    if amount > cfg.large_amount_threshold:
        flags.append(FraudFlag.LARGE_AMOUNT)
        if status == TransactionStatus.APPROVED:
            status = TransactionStatus.FLAGGED

    return TransactionDecision(
        status=status,
        risk_score=risk_score,
        fraud_flags=list(dict.fromkeys(flags)),
    )
