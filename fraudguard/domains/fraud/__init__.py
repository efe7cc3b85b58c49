"""Fraud decision domain: transfer gating, alerts, ledger."""

from .alerts import build_behavioral_alert, build_transaction_alert, record_alert
from .config import FraudConfig
from .ledger import TransactionLedger
from .models import (
    AlertSeverity,
    AlertStatus,
    AlertType,
    FraudAlert,
    FraudFlag,
    TransactionDecision,
    TransactionStatus,
    TransferRequest,
)
from .policy import decide_transaction

__all__ = [
    "AlertSeverity",
    "AlertStatus",
    "AlertType",
    "FraudAlert",
    "FraudConfig",
    "FraudFlag",
    "TransactionDecision",
    "TransactionLedger",
    "TransactionStatus",
    "TransferRequest",
    "build_behavioral_alert",
    "build_transaction_alert",
    "decide_transaction",
    "record_alert",
]
