"""Pydantic models for the fraud domain."""

from datetime import datetime
from decimal import Decimal
from enum import StrEnum

from pydantic import BaseModel, Field, StrictBool, StrictFloat, StrictInt, StrictStr


class TransactionStatus(StrEnum):
    APPROVED = "approved"
    FLAGGED = "flagged"
    BLOCKED = "blocked"


class FraudFlag(StrEnum):
    HIGH_RISK_BEHAVIOR = "high_risk_behavior"
    ELEVATED_RISK = "elevated_risk"
    LARGE_AMOUNT = "large_amount"


class AlertType(StrEnum):
    BEHAVIORAL_ANOMALY = "behavioral_anomaly"
    HIGH_RISK_TRANSACTION = "high_risk_transaction"
    DEVICE_CHANGE = "device_change"


class AlertSeverity(StrEnum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class AlertStatus(StrEnum):
    OPEN = "open"
    INVESTIGATING = "investigating"
    RESOLVED = "resolved"
    FALSE_POSITIVE = "false_positive"


class AccountType(StrEnum):
    CHECKING = "checking"
    SAVINGS = "savings"
    CREDIT = "credit"


class TransactionDecision(BaseModel):
    status: TransactionStatus
    risk_score: float = Field(ge=0.0, le=1.0)
    fraud_flags: list[FraudFlag] = Field(default_factory=list)


class TransferRequest(BaseModel):
    account_id: str
    amount: Decimal
    type: str = "transfer"
    recipient: str | None = None
    description: str = ""
    session_id: str


class TransactionResult(BaseModel):
    transaction_id: str
    status: TransactionStatus
    risk_score: float
    fraud_flags: list[FraudFlag] = Field(default_factory=list)


class Transaction(BaseModel):
    transaction_id: str
    account_id: str
    user_id: str
    amount: Decimal
    type: str
    recipient: str | None = None
    description: str = ""
    session_id: str
    risk_score: float
    status: TransactionStatus
    fraud_flags: list[FraudFlag] = Field(default_factory=list)
    created_at: datetime


class FraudAlert(BaseModel):
    alert_id: str
    user_id: str
    session_id: str
    transaction_id: str | None = None
    alert_type: AlertType
    severity: AlertSeverity
    description: str
    risk_factors: list[str] = Field(default_factory=list)
    status: AlertStatus = AlertStatus.OPEN
    created_at: datetime
    investigator_notes: str | None = None


class BankAccount(BaseModel):
    account_id: str
    user_id: str
    account_number: str
    account_type: AccountType
    balance: Decimal
    is_active: bool = True


# Tagged union of config values. Strict members keep "true", 1 and 1.0 apart.
ConfigValue = StrictBool | StrictInt | StrictFloat | StrictStr


class FraudConfigEntry(BaseModel):
    config_key: str
    config_value: ConfigValue
    description: str = ""
    last_modified: datetime


class FraudConfigUpdate(BaseModel):
    config_value: ConfigValue
    description: str = ""
