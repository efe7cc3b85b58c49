"""Session risk pipeline: load -> analyze -> persist -> alert."""

from datetime import datetime

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from fraudguard.domains.fraud.alerts import build_behavioral_alert, record_alert
from fraudguard.domains.fraud.config import FraudConfig
from fraudguard.domains.fraud.config import default_config as default_fraud_config

from .analyzer import RiskAnalyzer
from .models import RiskEvaluation
from .profile import BaselineUpdateHook, BehaviorProfileStore
from .sessions import BehaviorSessionStore

logger = structlog.get_logger()


class SessionRiskScorer:
    """Recomputes and stores the risk score of one behavior session."""

    def __init__(
        self,
        analyzer: RiskAnalyzer | None = None,
        session_store: BehaviorSessionStore | None = None,
        profile_store: BehaviorProfileStore | None = None,
        fraud_config: FraudConfig | None = None,
        baseline_update_hook: BaselineUpdateHook | None = None,
    ) -> None:
        self._analyzer = analyzer or RiskAnalyzer()
        self._session_store = session_store or BehaviorSessionStore()
        self._profile_store = profile_store or BehaviorProfileStore()
        self._fraud_config = fraud_config or default_fraud_config
        self._baseline_update_hook = baseline_update_hook

    async def score_session(
        self,
        user_id: str,
        session_id: str,
        db_session: AsyncSession,
        now: datetime | None = None,
    ) -> RiskEvaluation | None:
        """Run the analyzer for a session and persist its output.

        Returns None without writing anything when the session or the
        user's profile does not exist yet.
        """
        session = await self._session_store.get_session(user_id, session_id, db_session)
        profile = await self._profile_store.get_profile(user_id, db_session)
        if session is None or profile is None:
            logger.debug(
                "session_risk_skipped",
                user_id=user_id,
                session_id=session_id,
                has_session=session is not None,
                has_profile=profile is not None,
            )
            return None

        evaluation = self._analyzer.analyze(session, profile, now=now)
        await self._session_store.update_risk(user_id, session_id, evaluation, db_session)

        alert = build_behavioral_alert(
            user_id=user_id,
            session_id=session_id,
            risk_score=evaluation.risk_score,
            anomalies=evaluation.anomalies,
            settings=self._fraud_config.alerts,
        )
        if alert is not None:
            await record_alert(alert, db_session)

        if self._baseline_update_hook is not None:
            session.risk_score = evaluation.risk_score
            session.anomalies = [str(tag) for tag in evaluation.anomalies]
            updated = self._baseline_update_hook(profile, session)
            if updated is not None:
                await self._profile_store.save_profile(updated, db_session)

        await db_session.commit()

        logger.info(
            "session_risk_scored",
            user_id=user_id,
            session_id=session_id,
            risk_score=evaluation.risk_score,
            anomalies=[str(tag) for tag in evaluation.anomalies],
            keystrokes=len(session.keystroke_data),
            pointer_events=len(session.pointer_data),
            alert_created=alert is not None,
        )
        return evaluation
