"""Runtime fraud configuration entries stored in the database.

Values are a closed union of bool, int, float and str. A handful of keys
override the decision and alert thresholds of ``FraudConfig``; those keys
accept numbers only. Score keys must lie in [0, 1], the large amount
threshold must be non-negative, and the flag threshold stays strictly below
the block threshold.
"""

import copy
from collections.abc import Callable
from datetime import UTC, datetime
from decimal import Decimal

import structlog
from pydantic import TypeAdapter
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from fraudguard.db.models import FraudConfigDB

from .config import FraudConfig, default_config
from .models import ConfigValue, FraudConfigEntry

logger = structlog.get_logger()

_value_adapter = TypeAdapter(ConfigValue)


def _set_block(cfg: FraudConfig, v: float) -> None:
    cfg.decision.block_threshold = v


def _set_flag(cfg: FraudConfig, v: float) -> None:
    cfg.decision.flag_threshold = v


def _set_large_amount(cfg: FraudConfig, v: float) -> None:
    cfg.decision.large_amount_threshold = Decimal(str(v))


def _set_default_risk(cfg: FraudConfig, v: float) -> None:
    cfg.decision.default_risk_score = v


def _set_behavioral_alert(cfg: FraudConfig, v: float) -> None:
    cfg.alerts.behavioral_alert_threshold = v


def _set_behavioral_high(cfg: FraudConfig, v: float) -> None:
    cfg.alerts.behavioral_high_severity_threshold = v


THRESHOLD_KEYS: dict[str, Callable[[FraudConfig, float], None]] = {
    "block_threshold": _set_block,
    "flag_threshold": _set_flag,
    "large_amount_threshold": _set_large_amount,
    "default_risk_score": _set_default_risk,
    "behavioral_alert_threshold": _set_behavioral_alert,
    "behavioral_high_severity_threshold": _set_behavioral_high,
}


def _is_number(value: ConfigValue) -> bool:
    return isinstance(value, int | float) and not isinstance(value, bool)


def _check_override(config_key: str, value: ConfigValue) -> None:
    """Raise ValueError unless ``value`` is usable for threshold ``config_key``."""
    if not _is_number(value):
        raise ValueError(f"{config_key} requires a numeric value, got {type(value).__name__}")
    if config_key == "large_amount_threshold":
        if value < 0:
            raise ValueError(f"{config_key} must be non-negative, got {value}")
    elif not 0.0 <= value <= 1.0:
        raise ValueError(f"{config_key} must be between 0 and 1, got {value}")


def entry_from_row(row: FraudConfigDB) -> FraudConfigEntry:
    return FraudConfigEntry(
        config_key=row.config_key,
        config_value=_value_adapter.validate_python(row.config_value["value"]),
        description=row.description,
        last_modified=row.last_modified,
    )


def apply_overrides(base: FraudConfig, entries: list[FraudConfigEntry]) -> FraudConfig:
    """Return a copy of ``base`` with threshold entries applied.

    Unknown keys are ignored; they belong to other consumers of the table.
    """
    config = copy.deepcopy(base)
    for entry in entries:
        setter = THRESHOLD_KEYS.get(entry.config_key)
        if setter is None:
            continue
        try:
            _check_override(entry.config_key, entry.config_value)
        except ValueError as exc:
            logger.warning(
                "fraud_config_override_ignored",
                config_key=entry.config_key,
                reason=str(exc),
            )
            continue
        setter(config, float(entry.config_value))

    if config.decision.flag_threshold >= config.decision.block_threshold:
        logger.warning(
            "fraud_config_override_ignored",
            config_key="flag_threshold,block_threshold",
            reason="flag_threshold must be below block_threshold",
        )
        config.decision.flag_threshold = base.decision.flag_threshold
        config.decision.block_threshold = base.decision.block_threshold
    return config


async def list_entries(session: AsyncSession) -> list[FraudConfigEntry]:
    stmt = select(FraudConfigDB).order_by(FraudConfigDB.config_key)
    result = await session.execute(stmt)
    return [entry_from_row(row) for row in result.scalars().all()]


async def set_entry(
    config_key: str,
    value: ConfigValue,
    session: AsyncSession,
    description: str = "",
) -> FraudConfigEntry:
    """Create or replace a config entry.

    Raises ValueError when a threshold key is given a value it cannot take,
    including a flag threshold at or above the block threshold in effect.
    """
    value = _value_adapter.validate_python(value)
    if config_key in THRESHOLD_KEYS:
        _check_override(config_key, value)
    if config_key in ("block_threshold", "flag_threshold"):
        current = apply_overrides(default_config, await list_entries(session))
        block = value if config_key == "block_threshold" else current.decision.block_threshold
        flag = value if config_key == "flag_threshold" else current.decision.flag_threshold
        if flag >= block:
            raise ValueError(
                f"flag_threshold ({flag}) must be below block_threshold ({block})"
            )

    now = datetime.now(UTC)
    stmt = select(FraudConfigDB).where(FraudConfigDB.config_key == config_key)
    result = await session.execute(stmt)
    row = result.scalar_one_or_none()

    if row is None:
        row = FraudConfigDB(
            config_key=config_key,
            config_value={"value": value},
            description=description,
            last_modified=now,
        )
        session.add(row)
    else:
        row.config_value = {"value": value}
        if description:
            row.description = description
        row.last_modified = now

    await session.commit()
    logger.info("fraud_config_updated", config_key=config_key, value=value)
    return entry_from_row(row)


async def effective_fraud_config(
    session: AsyncSession, base: FraudConfig | None = None
) -> FraudConfig:
    """The static config with any stored threshold overrides applied."""
    return apply_overrides(base or default_config, await list_entries(session))
