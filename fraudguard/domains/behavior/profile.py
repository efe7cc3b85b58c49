"""Per-user behavioral baseline profiles.

A profile is seeded with fixed default baselines the first time a user
starts a session. Nothing in this package learns from observed sessions;
callers that want to adapt a baseline plug in a ``BaselineUpdateHook``.
"""

from collections.abc import Callable
from datetime import UTC, datetime

import structlog
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from fraudguard.db.models import BehaviorProfileDB

from .models import (
    BehaviorProfile,
    BehaviorSession,
    DeviceFingerprint,
    NavigationBaseline,
    PointerBaseline,
    TypingBaseline,
)

logger = structlog.get_logger()

DEFAULT_CONFIDENCE = 0.1

# Receives the stored profile and the freshly scored session. Returns the
# profile to persist, or None to leave the stored profile untouched.
BaselineUpdateHook = Callable[[BehaviorProfile, BehaviorSession], BehaviorProfile | None]


def create_default_profile(
    user_id: str,
    device_fingerprint: DeviceFingerprint,
    now: datetime | None = None,
) -> BehaviorProfile:
    return BehaviorProfile(
        user_id=user_id,
        typing_pattern=TypingBaseline(),
        pointer_pattern=PointerBaseline(),
        navigation_pattern=NavigationBaseline(),
        device_fingerprint=device_fingerprint,
        confidence_score=DEFAULT_CONFIDENCE,
        last_updated=now or datetime.now(UTC),
    )


def profile_from_row(row: BehaviorProfileDB) -> BehaviorProfile:
    return BehaviorProfile(
        user_id=row.user_id,
        typing_pattern=TypingBaseline(**(row.typing_pattern or {})),
        pointer_pattern=PointerBaseline(**(row.pointer_pattern or {})),
        navigation_pattern=NavigationBaseline(**(row.navigation_pattern or {})),
        device_fingerprint=DeviceFingerprint(**row.device_fingerprint),
        confidence_score=row.confidence_score,
        last_updated=row.last_updated,
    )


class BehaviorProfileStore:
    """Reads and seeds behavior profiles in PostgreSQL."""

    async def get_profile(
        self, user_id: str, db_session: AsyncSession
    ) -> BehaviorProfile | None:
        row = await self._get_row(user_id, db_session)
        if row is None:
            return None
        return profile_from_row(row)

    async def ensure_profile(
        self,
        user_id: str,
        device_fingerprint: DeviceFingerprint,
        db_session: AsyncSession,
    ) -> bool:
        """Seed the default profile if the user has none.

        Returns True when a profile was created. An existing profile is left
        as-is; this is a check-then-skip, not an upsert.
        """
        if await self._get_row(user_id, db_session) is not None:
            return False

        profile = create_default_profile(user_id, device_fingerprint)
        db_session.add(
            BehaviorProfileDB(
                user_id=profile.user_id,
                typing_pattern=profile.typing_pattern.model_dump(mode="json"),
                pointer_pattern=profile.pointer_pattern.model_dump(mode="json"),
                navigation_pattern=profile.navigation_pattern.model_dump(mode="json"),
                device_fingerprint=profile.device_fingerprint.model_dump(mode="json"),
                confidence_score=profile.confidence_score,
                last_updated=profile.last_updated,
            )
        )
        try:
            await db_session.commit()
        except IntegrityError:
            # A concurrent first session seeded it already
            await db_session.rollback()
            logger.info("profile_seed_skipped", user_id=user_id)
            return False

        logger.info("profile_seeded", user_id=user_id, confidence=profile.confidence_score)
        return True

    async def save_profile(self, profile: BehaviorProfile, db_session: AsyncSession) -> None:
        """Write back a profile produced by a baseline update hook.

        Joins the caller's unit of work; the caller commits.
        """
        row = await self._get_row(profile.user_id, db_session)
        if row is None:
            raise LookupError(f"No behavior profile for user {profile.user_id}")

        row.typing_pattern = profile.typing_pattern.model_dump(mode="json")
        row.pointer_pattern = profile.pointer_pattern.model_dump(mode="json")
        row.navigation_pattern = profile.navigation_pattern.model_dump(mode="json")
        row.confidence_score = profile.confidence_score
        row.last_updated = profile.last_updated

    @staticmethod
    async def _get_row(user_id: str, db_session: AsyncSession) -> BehaviorProfileDB | None:
        stmt = select(BehaviorProfileDB).where(BehaviorProfileDB.user_id == user_id)
        result = await db_session.execute(stmt)
        return result.scalar_one_or_none()
