"""Session risk analyzer.

Compares a session's buffered telemetry with the user's baseline profile.
Each signal contributes a fixed weight when it deviates from the baseline;
signals without enough samples are skipped. The sum is clamped to [0, 1].
The analyzer performs no I/O.
"""

import math
from datetime import UTC, datetime

from .config import RiskAnalyzerConfig, default_config
from .models import (
    AnomalyTag,
    BehaviorProfile,
    BehaviorSession,
    KeystrokeEvent,
    NavigationBaseline,
    PointerBaseline,
    PointerEvent,
    PointerEventType,
    RiskEvaluation,
    TypingBaseline,
)


def _clamp(value: float, lo: float = 0.0, hi: float = 1.0) -> float:
    return max(lo, min(hi, value))


def _relative_deviation(observed: float, expected: float) -> float | None:
    if expected <= 0:
        return None
    return abs(observed - expected) / expected


def mean_flight_time(keystrokes: list[KeystrokeEvent]) -> float:
    return sum(k.flight_time for k in keystrokes) / len(keystrokes)


def mean_pointer_speed(moves: list[PointerEvent]) -> float | None:
    """Average instantaneous speed (distance units per ms) over consecutive moves.

    Pairs with no elapsed time are ignored. Returns None when no pair is usable.
    """
    speeds = []
    for prev, cur in zip(moves, moves[1:]):
        elapsed = cur.timestamp - prev.timestamp
        if elapsed <= 0:
            continue
        distance = math.hypot(cur.x - prev.x, cur.y - prev.y)
        speeds.append(distance / elapsed)
    if not speeds:
        return None
    return sum(speeds) / len(speeds)


class RiskAnalyzer:
    """Turns session telemetry plus a baseline profile into a risk evaluation."""

    def __init__(self, config: RiskAnalyzerConfig | None = None) -> None:
        self._config = config or default_config.analyzer

    def analyze(
        self,
        session: BehaviorSession,
        profile: BehaviorProfile,
        now: datetime | None = None,
    ) -> RiskEvaluation:
        now = now or datetime.now(UTC)
        score = 0.0
        anomalies: list[AnomalyTag] = []

        for contribution in (
            self._score_typing(session.keystroke_data, profile.typing_pattern),
            self._score_pointer(session.pointer_data, profile.pointer_pattern),
            self._score_time_of_day(
                now.hour, profile.navigation_pattern, profile.confidence_score
            ),
        ):
            if contribution is None:
                continue
            weight, tag = contribution
            score += weight
            anomalies.append(tag)

        score += self._config.base_risk

        return RiskEvaluation(
            risk_score=_clamp(score, hi=self._config.max_risk),
            anomalies=anomalies,
        )

    # --- Signals ---

    def _score_typing(
        self, keystrokes: list[KeystrokeEvent], baseline: TypingBaseline
    ) -> tuple[float, AnomalyTag] | None:
        cfg = self._config.typing
        if len(keystrokes) < cfg.min_samples:
            return None

        deviation = _relative_deviation(
            mean_flight_time(keystrokes), baseline.avg_keystroke_interval
        )
        if deviation is not None and deviation > cfg.deviation_threshold:
            return cfg.risk_weight, AnomalyTag.UNUSUAL_TYPING_RHYTHM
        return None

    def _score_pointer(
        self, events: list[PointerEvent], baseline: PointerBaseline
    ) -> tuple[float, AnomalyTag] | None:
        cfg = self._config.pointer
        if len(events) < cfg.min_samples:
            return None

        moves = [e for e in events if e.event_type == PointerEventType.MOVE]
        if len(moves) < cfg.min_moves:
            return None

        speed = mean_pointer_speed(moves)
        if speed is None:
            return None

        deviation = _relative_deviation(speed, baseline.avg_speed)
        if deviation is not None and deviation > cfg.deviation_threshold:
            return cfg.risk_weight, AnomalyTag.UNUSUAL_MOUSE_SPEED
        return None

    def _score_time_of_day(
        self, hour: int, baseline: NavigationBaseline, confidence: float
    ) -> tuple[float, AnomalyTag] | None:
        cfg = self._config.time_of_day
        usage = baseline.time_of_day_usage[hour]
        if usage < cfg.usage_threshold and confidence > cfg.min_confidence:
            return cfg.risk_weight, AnomalyTag.UNUSUAL_TIME_OF_ACCESS
        return None
