"""Fraud decision and alerting configuration with sensible defaults."""

import os
from dataclasses import dataclass, field
from decimal import Decimal


@dataclass
class DecisionThresholds:
    # Risk strictly above this blocks the transfer
    block_threshold: float = 0.8
    # Risk strictly above this (and not blocked) flags the transfer
    flag_threshold: float = 0.6
    # Amounts strictly above this are tagged and at least flagged
    large_amount_threshold: Decimal = Decimal("10000")
    # Used when the submitting session has no persisted risk score
    default_risk_score: float = 0.5


@dataclass
class AlertSettings:
    # Session risk strictly above this raises a behavioral alert
    behavioral_alert_threshold: float = 0.7
    # Behavioral alerts above this are "high", otherwise "medium"
    behavioral_high_severity_threshold: float = 0.8


@dataclass
class FraudConfig:
    decision: DecisionThresholds = field(default_factory=DecisionThresholds)
    alerts: AlertSettings = field(default_factory=AlertSettings)

    @classmethod
    def from_env(cls) -> "FraudConfig":
        """Load config with env var overrides. Env vars use FRAUD_ prefix."""
        config = cls()

        if v := os.getenv("FRAUD_BLOCK_THRESHOLD"):
            config.decision.block_threshold = float(v)
        if v := os.getenv("FRAUD_FLAG_THRESHOLD"):
            config.decision.flag_threshold = float(v)
        if v := os.getenv("FRAUD_LARGE_AMOUNT_THRESHOLD"):
            config.decision.large_amount_threshold = Decimal(v)
        if v := os.getenv("FRAUD_DEFAULT_RISK_SCORE"):
            config.decision.default_risk_score = float(v)

        if v := os.getenv("FRAUD_BEHAVIORAL_ALERT_THRESHOLD"):
            config.alerts.behavioral_alert_threshold = float(v)
        if v := os.getenv("FRAUD_BEHAVIORAL_HIGH_SEVERITY_THRESHOLD"):
            config.alerts.behavioral_high_severity_threshold = float(v)

        return config


# Module-level default instance
default_config = FraudConfig()
