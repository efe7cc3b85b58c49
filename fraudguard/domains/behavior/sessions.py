"""Behavior session storage: session start, telemetry appends, risk write-back."""

from datetime import UTC, datetime
from typing import Protocol

import structlog
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from fraudguard.db.models import BehaviorSessionDB

from .config import BehaviorConfig, default_config
from .locks import SessionLocks, session_locks
from .models import (
    AppendResult,
    BehaviorSession,
    KeystrokeEvent,
    NavigationEvent,
    PointerEvent,
    RiskEvaluation,
)

logger = structlog.get_logger()


class RecomputeScheduler(Protocol):
    def enqueue(self, user_id: str, session_id: str) -> None: ...


def session_from_row(row: BehaviorSessionDB) -> BehaviorSession:
    return BehaviorSession(
        user_id=row.user_id,
        session_id=row.session_id,
        start_time=row.start_time,
        end_time=row.end_time,
        keystroke_data=[KeystrokeEvent(**k) for k in row.keystroke_data or []],
        pointer_data=[PointerEvent(**p) for p in row.pointer_data or []],
        navigation_data=[NavigationEvent(**n) for n in row.navigation_data or []],
        risk_score=row.risk_score,
        anomalies=list(row.anomalies or []),
    )


def _now_ms() -> int:
    return int(datetime.now(UTC).timestamp() * 1000)


class BehaviorSessionStore:
    """Owns every write to behavior session rows except the analyzer's output,
    which is applied through ``update_risk`` by the recompute pipeline."""

    def __init__(
        self,
        scheduler: RecomputeScheduler | None = None,
        locks: SessionLocks | None = None,
        config: BehaviorConfig | None = None,
    ) -> None:
        self._scheduler = scheduler
        self._locks = locks or session_locks
        self._config = config or default_config

    async def start_session(
        self, user_id: str, session_id: str, db_session: AsyncSession
    ) -> tuple[BehaviorSession, bool]:
        """Create the session row. Returns (session, created).

        Restarting an existing (user, session id) pair returns the stored
        session unchanged.
        """
        existing = await self._get_row(user_id, session_id, db_session)
        if existing is not None:
            return session_from_row(existing), False

        row = BehaviorSessionDB(
            user_id=user_id,
            session_id=session_id,
            start_time=datetime.now(UTC),
            keystroke_data=[],
            pointer_data=[],
            navigation_data=[],
            anomalies=[],
        )
        db_session.add(row)
        try:
            await db_session.commit()
        except IntegrityError:
            await db_session.rollback()
            existing = await self._get_row(user_id, session_id, db_session)
            if existing is None:
                raise
            return session_from_row(existing), False

        logger.info("behavior_session_started", user_id=user_id, session_id=session_id)
        return session_from_row(row), True

    async def get_session(
        self, user_id: str, session_id: str, db_session: AsyncSession
    ) -> BehaviorSession | None:
        row = await self._get_row(user_id, session_id, db_session)
        if row is None:
            return None
        return session_from_row(row)

    async def append_keystrokes(
        self,
        user_id: str,
        session_id: str,
        events: list[KeystrokeEvent],
        db_session: AsyncSession,
    ) -> AppendResult:
        async with self._locks.hold(user_id, session_id):
            row = await self._require_row(user_id, session_id, db_session)
            row.keystroke_data = [
                *(row.keystroke_data or []),
                *(e.model_dump(mode="json") for e in events),
            ]
            await db_session.commit()
            total = len(row.keystroke_data)

        # Fire-and-forget: the append never waits for analysis
        scheduled = False
        if total > self._config.recompute.keystroke_trigger_count and self._scheduler is not None:
            self._scheduler.enqueue(user_id, session_id)
            scheduled = True

        logger.debug(
            "keystrokes_appended",
            user_id=user_id,
            session_id=session_id,
            batch_size=len(events),
            buffered=total,
            recompute_scheduled=scheduled,
        )
        return AppendResult(
            session_id=session_id, buffered_count=total, risk_recompute_scheduled=scheduled
        )

    async def append_pointer_events(
        self,
        user_id: str,
        session_id: str,
        events: list[PointerEvent],
        db_session: AsyncSession,
    ) -> AppendResult:
        async with self._locks.hold(user_id, session_id):
            row = await self._require_row(user_id, session_id, db_session)
            row.pointer_data = [
                *(row.pointer_data or []),
                *(e.model_dump(mode="json") for e in events),
            ]
            await db_session.commit()
            total = len(row.pointer_data)

        logger.debug(
            "pointer_events_appended",
            user_id=user_id,
            session_id=session_id,
            batch_size=len(events),
            buffered=total,
        )
        return AppendResult(session_id=session_id, buffered_count=total)

    async def append_navigation(
        self,
        user_id: str,
        session_id: str,
        page: str,
        action: str,
        db_session: AsyncSession,
    ) -> AppendResult:
        entry = NavigationEvent(page=page, timestamp=_now_ms(), action=action)
        async with self._locks.hold(user_id, session_id):
            row = await self._require_row(user_id, session_id, db_session)
            row.navigation_data = [*(row.navigation_data or []), entry.model_dump(mode="json")]
            await db_session.commit()
            total = len(row.navigation_data)

        return AppendResult(session_id=session_id, buffered_count=total)

    async def end_session(
        self, user_id: str, session_id: str, db_session: AsyncSession
    ) -> BehaviorSession:
        async with self._locks.hold(user_id, session_id):
            row = await self._require_row(user_id, session_id, db_session)
            if row.end_time is None:
                row.end_time = datetime.now(UTC)
                await db_session.commit()

        logger.info("behavior_session_ended", user_id=user_id, session_id=session_id)
        return session_from_row(row)

    async def update_risk(
        self,
        user_id: str,
        session_id: str,
        evaluation: RiskEvaluation,
        db_session: AsyncSession,
    ) -> bool:
        """Stage the analyzer's score and anomalies on the session row.

        Joins the caller's unit of work; the caller commits. Returns False if
        the session no longer exists.
        """
        row = await self._get_row(user_id, session_id, db_session)
        if row is None:
            return False
        row.risk_score = evaluation.risk_score
        row.anomalies = [str(tag) for tag in evaluation.anomalies]
        return True

    async def _require_row(
        self, user_id: str, session_id: str, db_session: AsyncSession
    ) -> BehaviorSessionDB:
        row = await self._get_row(user_id, session_id, db_session)
        if row is None:
            raise LookupError(f"Session not found: {session_id}")
        return row

    @staticmethod
    async def _get_row(
        user_id: str, session_id: str, db_session: AsyncSession
    ) -> BehaviorSessionDB | None:
        stmt = select(BehaviorSessionDB).where(
            BehaviorSessionDB.user_id == user_id,
            BehaviorSessionDB.session_id == session_id,
        )
        result = await db_session.execute(stmt)
        return result.scalar_one_or_none()
