"""SQLAlchemy ORM models for the behavioral fraud engine."""

from datetime import datetime
from decimal import Decimal

from sqlalchemy import (
    JSON,
    BigInteger,
    Boolean,
    DateTime,
    Float,
    Numeric,
    String,
    UniqueConstraint,
    func,
)
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

# JSONB on PostgreSQL, plain JSON elsewhere
JSONType = JSON().with_variant(JSONB(), "postgresql")


class Base(DeclarativeBase):
    pass


class BehaviorProfileDB(Base):
    __tablename__ = "behavior_profiles"

    id: Mapped[int] = mapped_column(BigInteger, primary_key=True, autoincrement=True)
    user_id: Mapped[str] = mapped_column(String, unique=True, index=True)
    typing_pattern: Mapped[dict] = mapped_column(JSONType, default=dict)
    pointer_pattern: Mapped[dict] = mapped_column(JSONType, default=dict)
    navigation_pattern: Mapped[dict] = mapped_column(JSONType, default=dict)
    device_fingerprint: Mapped[dict] = mapped_column(JSONType, default=dict)
    confidence_score: Mapped[float] = mapped_column(Float, default=0.1)
    last_updated: Mapped[datetime] = mapped_column(DateTime(timezone=True))


class BehaviorSessionDB(Base):
    __tablename__ = "behavior_sessions"
    __table_args__ = (UniqueConstraint("user_id", "session_id", name="uq_behavior_session"),)

    id: Mapped[int] = mapped_column(BigInteger, primary_key=True, autoincrement=True)
    user_id: Mapped[str] = mapped_column(String, index=True)
    session_id: Mapped[str] = mapped_column(String, index=True)
    start_time: Mapped[datetime] = mapped_column(DateTime(timezone=True))
    end_time: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    keystroke_data: Mapped[list] = mapped_column(JSONType, default=list)
    pointer_data: Mapped[list] = mapped_column(JSONType, default=list)
    navigation_data: Mapped[list] = mapped_column(JSONType, default=list)
    risk_score: Mapped[float | None] = mapped_column(Float, nullable=True)
    anomalies: Mapped[list] = mapped_column(JSONType, default=list)


class BankAccountDB(Base):
    __tablename__ = "bank_accounts"

    id: Mapped[int] = mapped_column(BigInteger, primary_key=True, autoincrement=True)
    account_id: Mapped[str] = mapped_column(String, unique=True, index=True)
    user_id: Mapped[str] = mapped_column(String, index=True)
    account_number: Mapped[str] = mapped_column(String, unique=True)
    account_type: Mapped[str] = mapped_column(String)
    balance: Mapped[Decimal] = mapped_column(Numeric(14, 2), default=Decimal("0.00"))
    is_active: Mapped[bool] = mapped_column(Boolean, default=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )


class TransactionDB(Base):
    __tablename__ = "transactions"

    id: Mapped[int] = mapped_column(BigInteger, primary_key=True, autoincrement=True)
    transaction_id: Mapped[str] = mapped_column(String, unique=True, index=True)
    account_id: Mapped[str] = mapped_column(String, index=True)
    user_id: Mapped[str] = mapped_column(String, index=True)
    amount: Mapped[Decimal] = mapped_column(Numeric(14, 2))
    transaction_type: Mapped[str] = mapped_column(String)
    recipient: Mapped[str | None] = mapped_column(String, nullable=True)
    description: Mapped[str] = mapped_column(String, default="")
    session_id: Mapped[str] = mapped_column(String, index=True)
    risk_score: Mapped[float] = mapped_column(Float)
    status: Mapped[str] = mapped_column(String)
    fraud_flags: Mapped[list] = mapped_column(JSONType, default=list)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True))


class FraudAlertDB(Base):
    __tablename__ = "fraud_alerts"

    id: Mapped[int] = mapped_column(BigInteger, primary_key=True, autoincrement=True)
    alert_id: Mapped[str] = mapped_column(String, unique=True, index=True)
    user_id: Mapped[str] = mapped_column(String, index=True)
    session_id: Mapped[str] = mapped_column(String, index=True)
    transaction_id: Mapped[str | None] = mapped_column(String, nullable=True)
    alert_type: Mapped[str] = mapped_column(String)
    severity: Mapped[str] = mapped_column(String, index=True)
    description: Mapped[str] = mapped_column(String, default="")
    risk_factors: Mapped[list] = mapped_column(JSONType, default=list)
    status: Mapped[str] = mapped_column(String, default="open", index=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True))
    investigator_notes: Mapped[str | None] = mapped_column(String, nullable=True)


class FraudConfigDB(Base):
    __tablename__ = "fraud_config"

    id: Mapped[int] = mapped_column(BigInteger, primary_key=True, autoincrement=True)
    config_key: Mapped[str] = mapped_column(String, unique=True, index=True)
    config_value: Mapped[dict] = mapped_column(JSONType)
    description: Mapped[str] = mapped_column(String, default="")
    last_modified: Mapped[datetime] = mapped_column(DateTime(timezone=True))
