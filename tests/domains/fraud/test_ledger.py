"""Unit tests for transfer gating and recording."""

from datetime import UTC, datetime
from decimal import Decimal
from unittest.mock import AsyncMock

import pytest

from fraudguard.db.models import BankAccountDB, FraudAlertDB, TransactionDB
from fraudguard.domains.fraud.config import DecisionThresholds, FraudConfig
from fraudguard.domains.fraud.config_store import apply_overrides
from fraudguard.domains.fraud.ledger import TransactionLedger
from fraudguard.domains.fraud.models import (
    FraudConfigEntry,
    FraudFlag,
    TransactionStatus,
    TransferRequest,
)
from tests.conftest import make_result

NOW = datetime(2026, 1, 5, 12, 0, tzinfo=UTC)


def _account(user_id: str = "user-1") -> BankAccountDB:
    return BankAccountDB(
        account_id="acct-1",
        user_id=user_id,
        account_number="CHK0000000001",
        account_type="checking",
        balance=Decimal("5000.00"),
        is_active=True,
    )


def _request(amount: str = "100.00") -> TransferRequest:
    return TransferRequest(
        account_id="acct-1",
        amount=Decimal(amount),
        recipient="landlord",
        description="rent",
        session_id="session-1",
    )


def _override(key, value) -> FraudConfigEntry:
    return FraudConfigEntry(config_key=key, config_value=value, last_modified=NOW)


def _staged(mock_db_session, cls):
    return [c.args[0] for c in mock_db_session.add.call_args_list if isinstance(c.args[0], cls)]


@pytest.fixture
def ledger() -> TransactionLedger:
    return TransactionLedger()


def _responses(mock_db_session, account, risk_score):
    mock_db_session.execute = AsyncMock(
        side_effect=[make_result(account), make_result(risk_score)]
    )


class TestSubmitTransfer:
    @pytest.mark.asyncio
    async def test_low_risk_transfer_is_approved_without_alert(self, ledger, mock_db_session):
        _responses(mock_db_session, _account(), 0.05)

        result = await ledger.submit_transfer("user-1", _request(), mock_db_session)

        assert result.status == TransactionStatus.APPROVED
        assert result.risk_score == 0.05
        assert result.fraud_flags == []
        transactions = _staged(mock_db_session, TransactionDB)
        assert len(transactions) == 1
        assert transactions[0].transaction_id == result.transaction_id
        assert transactions[0].status == "approved"
        assert transactions[0].session_id == "session-1"
        assert _staged(mock_db_session, FraudAlertDB) == []
        mock_db_session.commit.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_unscored_session_uses_default_risk(self, ledger, mock_db_session):
        _responses(mock_db_session, _account(), None)

        result = await ledger.submit_transfer("user-1", _request(), mock_db_session)

        assert result.risk_score == 0.5
        assert result.status == TransactionStatus.APPROVED

    @pytest.mark.asyncio
    async def test_out_of_range_stored_default_risk_is_not_used(self, ledger, mock_db_session):
        config = apply_overrides(FraudConfig(), [_override("default_risk_score", 1.5)])
        _responses(mock_db_session, _account(), None)

        result = await ledger.submit_transfer("user-1", _request(), mock_db_session, config)

        assert result.risk_score == 0.5
        assert result.status == TransactionStatus.APPROVED

    @pytest.mark.asyncio
    async def test_high_risk_transfer_is_blocked_with_critical_alert(
        self, ledger, mock_db_session
    ):
        _responses(mock_db_session, _account(), 0.9)

        result = await ledger.submit_transfer("user-1", _request(), mock_db_session)

        assert result.status == TransactionStatus.BLOCKED
        assert result.fraud_flags == [FraudFlag.HIGH_RISK_BEHAVIOR]
        alerts = _staged(mock_db_session, FraudAlertDB)
        assert len(alerts) == 1
        assert alerts[0].severity == "critical"
        assert alerts[0].transaction_id == result.transaction_id
        mock_db_session.commit.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_large_amount_flags_with_medium_alert(self, ledger, mock_db_session):
        _responses(mock_db_session, _account(), 0.1)

        result = await ledger.submit_transfer("user-1", _request("25000.00"), mock_db_session)

        assert result.status == TransactionStatus.FLAGGED
        assert result.fraud_flags == [FraudFlag.LARGE_AMOUNT]
        alerts = _staged(mock_db_session, FraudAlertDB)
        assert len(alerts) == 1
        assert alerts[0].severity == "medium"

    @pytest.mark.asyncio
    async def test_foreign_account_is_rejected(self, ledger, mock_db_session):
        mock_db_session.execute = AsyncMock(return_value=make_result(_account("someone-else")))

        with pytest.raises(PermissionError, match="Account not found or access denied"):
            await ledger.submit_transfer("user-1", _request(), mock_db_session)

        mock_db_session.add.assert_not_called()
        mock_db_session.commit.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_missing_account_is_rejected(self, ledger, mock_db_session):
        with pytest.raises(PermissionError):
            await ledger.submit_transfer("user-1", _request(), mock_db_session)

    @pytest.mark.asyncio
    async def test_commit_failure_rolls_back(self, ledger, mock_db_session):
        _responses(mock_db_session, _account(), 0.9)
        mock_db_session.commit = AsyncMock(side_effect=RuntimeError("connection lost"))

        with pytest.raises(RuntimeError):
            await ledger.submit_transfer("user-1", _request(), mock_db_session)

        mock_db_session.rollback.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_config_override_changes_decision(self, ledger, mock_db_session):
        _responses(mock_db_session, _account(), 0.4)
        config = FraudConfig(decision=DecisionThresholds(block_threshold=0.35))

        result = await ledger.submit_transfer(
            "user-1", _request(), mock_db_session, config=config
        )

        assert result.status == TransactionStatus.BLOCKED


class TestRecentTransactions:
    @pytest.mark.asyncio
    async def test_maps_rows(self, ledger, mock_db_session):
        row = TransactionDB(
            transaction_id="txn-1",
            account_id="acct-1",
            user_id="user-1",
            amount=Decimal("100.00"),
            transaction_type="transfer",
            recipient=None,
            description="",
            session_id="session-1",
            risk_score=0.05,
            status="approved",
            fraud_flags=[],
            created_at=NOW,
        )
        mock_db_session.execute = AsyncMock(return_value=make_result(scalars=[row]))

        transactions = await ledger.recent_transactions("user-1", mock_db_session, limit=5)

        assert len(transactions) == 1
        assert transactions[0].transaction_id == "txn-1"
        assert transactions[0].type == "transfer"
        assert transactions[0].status == TransactionStatus.APPROVED

    @pytest.mark.asyncio
    async def test_empty(self, ledger, mock_db_session):
        assert await ledger.recent_transactions("user-1", mock_db_session) == []
