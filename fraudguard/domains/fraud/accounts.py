"""Bank account lookups and demo account seeding."""

import random
import uuid
from decimal import Decimal

import structlog
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from fraudguard.db.models import BankAccountDB

from .models import AccountType, BankAccount

logger = structlog.get_logger()

DEMO_ACCOUNTS: tuple[tuple[AccountType, str, Decimal], ...] = (
    (AccountType.CHECKING, "CHK", Decimal("5000.00")),
    (AccountType.SAVINGS, "SAV", Decimal("15000.00")),
)


def account_from_row(row: BankAccountDB) -> BankAccount:
    return BankAccount(
        account_id=row.account_id,
        user_id=row.user_id,
        account_number=row.account_number,
        account_type=AccountType(row.account_type),
        balance=row.balance,
        is_active=row.is_active,
    )


def _account_number(prefix: str) -> str:
    return f"{prefix}{random.randint(0, 10**10 - 1):010d}"


async def get_owned_account(
    user_id: str, account_id: str, session: AsyncSession
) -> BankAccountDB:
    stmt = select(BankAccountDB).where(BankAccountDB.account_id == account_id)
    result = await session.execute(stmt)
    account = result.scalar_one_or_none()
    if account is None or account.user_id != user_id:
        logger.warning("account_access_denied", user_id=user_id, account_id=account_id)
        raise PermissionError("Account not found or access denied")
    return account


async def list_active_accounts(user_id: str, session: AsyncSession) -> list[BankAccount]:
    stmt = select(BankAccountDB).where(
        BankAccountDB.user_id == user_id,
        BankAccountDB.is_active.is_(True),
    )
    result = await session.execute(stmt)
    return [account_from_row(row) for row in result.scalars().all()]


async def seed_demo_accounts(user_id: str, session: AsyncSession) -> list[BankAccount]:
    """Create a checking and a savings account for a user who has none.

    Returns the created accounts, or an empty list if the user already has
    accounts.
    """
    stmt = select(BankAccountDB.id).where(BankAccountDB.user_id == user_id).limit(1)
    result = await session.execute(stmt)
    if result.scalar_one_or_none() is not None:
        return []

    rows = [
        BankAccountDB(
            account_id=str(uuid.uuid4()),
            user_id=user_id,
            account_number=_account_number(prefix),
            account_type=account_type.value,
            balance=balance,
            is_active=True,
        )
        for account_type, prefix, balance in DEMO_ACCOUNTS
    ]
    session.add_all(rows)
    await session.commit()

    logger.info("demo_accounts_seeded", user_id=user_id, count=len(rows))
    return [account_from_row(row) for row in rows]
