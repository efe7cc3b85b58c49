"""Background risk recomputation.

Telemetry appends enqueue a job keyed by (user_id, session_id) and return
immediately. Consumer tasks drain the queue and run the session risk
pipeline under the session's lock, each job in its own database session.
Failed jobs are logged and dropped.
"""

import asyncio
import contextlib
from collections.abc import Callable
from dataclasses import dataclass

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from .locks import SessionLocks, session_locks
from .scoring import SessionRiskScorer

logger = structlog.get_logger()


@dataclass(frozen=True)
class RecomputeJob:
    user_id: str
    session_id: str


class RiskRecomputeWorker:
    def __init__(
        self,
        scorer: SessionRiskScorer | None = None,
        session_factory: Callable[[], AsyncSession] | None = None,
        locks: SessionLocks | None = None,
        concurrency: int = 1,
    ) -> None:
        self._scorer = scorer or SessionRiskScorer()
        self._session_factory = session_factory
        self._locks = locks or session_locks
        self._concurrency = max(concurrency, 1)
        self._queue: asyncio.Queue[RecomputeJob] = asyncio.Queue()
        self._tasks: list[asyncio.Task] = []

    @property
    def is_running(self) -> bool:
        return bool(self._tasks)

    @property
    def pending(self) -> int:
        return self._queue.qsize()

    def enqueue(self, user_id: str, session_id: str) -> None:
        self._queue.put_nowait(RecomputeJob(user_id=user_id, session_id=session_id))
        logger.debug(
            "risk_recompute_enqueued",
            user_id=user_id,
            session_id=session_id,
            pending=self._queue.qsize(),
        )

    async def start(self) -> None:
        if self._tasks:
            return
        if self._session_factory is None:
            from fraudguard.db.database import async_session_factory

            self._session_factory = async_session_factory
        for i in range(self._concurrency):
            self._tasks.append(asyncio.create_task(self._run(), name=f"risk-recompute-{i}"))
        logger.info("risk_worker_started", concurrency=self._concurrency)

    async def drain(self) -> None:
        """Wait until every enqueued job has been processed."""
        await self._queue.join()

    async def stop(self) -> None:
        for task in self._tasks:
            task.cancel()
        for task in self._tasks:
            with contextlib.suppress(asyncio.CancelledError):
                await task
        self._tasks.clear()
        logger.info("risk_worker_stopped", pending=self._queue.qsize())

    async def _run(self) -> None:
        while True:
            job = await self._queue.get()
            try:
                await self.process(job)
            except Exception:
                logger.exception(
                    "risk_recompute_failed", user_id=job.user_id, session_id=job.session_id
                )
            finally:
                self._queue.task_done()

    async def process(self, job: RecomputeJob) -> None:
        async with self._locks.hold(job.user_id, job.session_id):
            async with self._session_factory() as db_session:
                await self._scorer.score_session(job.user_id, job.session_id, db_session)


# Module-level singleton shared by the API routes and the app lifespan
_risk_worker: RiskRecomputeWorker | None = None


def get_risk_worker() -> RiskRecomputeWorker:
    """Get or create the global RiskRecomputeWorker singleton."""
    global _risk_worker
    if _risk_worker is None:
        from fraudguard.config import settings

        _risk_worker = RiskRecomputeWorker(concurrency=settings.risk_worker_concurrency)
    return _risk_worker
