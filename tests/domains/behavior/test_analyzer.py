"""Unit tests for the session risk analyzer."""

from datetime import UTC, datetime

import pytest

from fraudguard.domains.behavior.analyzer import RiskAnalyzer, mean_flight_time, mean_pointer_speed
from fraudguard.domains.behavior.config import (
    PointerSignal,
    RiskAnalyzerConfig,
    TimeOfDaySignal,
    TypingSignal,
)
from fraudguard.domains.behavior.models import (
    AnomalyTag,
    BehaviorProfile,
    BehaviorSession,
    DeviceFingerprint,
    KeystrokeEvent,
    NavigationBaseline,
    PointerEvent,
    PointerEventType,
    TypingBaseline,
)
from fraudguard.domains.behavior.profile import create_default_profile

NOW = datetime(2026, 1, 5, 3, 0, tzinfo=UTC)


def _fingerprint() -> DeviceFingerprint:
    return DeviceFingerprint(
        screen_resolution="1920x1080",
        timezone="America/New_York",
        language="en-US",
        user_agent="test-agent",
    )


def _profile(**overrides) -> BehaviorProfile:
    profile = create_default_profile("user-1", _fingerprint(), now=NOW)
    return profile.model_copy(update=overrides)


def _keystrokes(flight_times: list[int]) -> list[KeystrokeEvent]:
    return [
        KeystrokeEvent(key="a", timestamp=1000 + i * 250, dwell_time=100, flight_time=f)
        for i, f in enumerate(flight_times)
    ]


def _moves(count: int, step_x: float, interval_ms: int = 16) -> list[PointerEvent]:
    return [
        PointerEvent(
            x=i * step_x, y=0.0, timestamp=i * interval_ms, event_type=PointerEventType.MOVE
        )
        for i in range(count)
    ]


def _clicks(count: int) -> list[PointerEvent]:
    return [
        PointerEvent(x=10, y=10, timestamp=i, event_type=PointerEventType.CLICK, pressure=0.5)
        for i in range(count)
    ]


def _session(keystrokes=None, pointer=None) -> BehaviorSession:
    return BehaviorSession(
        user_id="user-1",
        session_id="session-1",
        start_time=NOW,
        keystroke_data=keystrokes or [],
        pointer_data=pointer or [],
    )


@pytest.fixture
def analyzer() -> RiskAnalyzer:
    return RiskAnalyzer()


class TestBaseRisk:
    def test_empty_session_scores_base_risk_only(self, analyzer):
        result = analyzer.analyze(_session(), _profile(), now=NOW)
        assert result.risk_score == pytest.approx(0.05)
        assert result.anomalies == []

    def test_score_is_never_zero(self, analyzer):
        keystrokes = _keystrokes([150] * 20)
        pointer = _moves(12, step_x=3200)
        result = analyzer.analyze(_session(keystrokes, pointer), _profile(), now=NOW)
        assert result.risk_score > 0
        assert result.anomalies == []


class TestTypingSignal:
    def test_fewer_than_six_keystrokes_is_skipped(self, analyzer):
        result = analyzer.analyze(_session(_keystrokes([900] * 5)), _profile(), now=NOW)
        assert AnomalyTag.UNUSUAL_TYPING_RHYTHM not in result.anomalies
        assert result.risk_score == pytest.approx(0.05)

    def test_double_baseline_flight_time_adds_typing_weight(self, analyzer):
        result = analyzer.analyze(_session(_keystrokes([300] * 6)), _profile(), now=NOW)
        assert result.anomalies == [AnomalyTag.UNUSUAL_TYPING_RHYTHM]
        assert result.risk_score == pytest.approx(0.25)

    def test_small_deviation_is_not_flagged(self, analyzer):
        # 20% slower than the 150ms baseline, under the 30% threshold
        result = analyzer.analyze(_session(_keystrokes([180] * 8)), _profile(), now=NOW)
        assert result.anomalies == []

    def test_faster_typing_is_also_flagged(self, analyzer):
        result = analyzer.analyze(_session(_keystrokes([50] * 8)), _profile(), now=NOW)
        assert AnomalyTag.UNUSUAL_TYPING_RHYTHM in result.anomalies

    def test_non_positive_baseline_skips_signal(self, analyzer):
        profile = _profile(typing_pattern=TypingBaseline(avg_keystroke_interval=0))
        result = analyzer.analyze(_session(_keystrokes([300] * 8)), profile, now=NOW)
        assert result.anomalies == []


class TestPointerSignal:
    def test_fewer_than_eleven_events_is_skipped(self, analyzer):
        result = analyzer.analyze(_session(pointer=_moves(10, step_x=10_000)), _profile(), now=NOW)
        assert AnomalyTag.UNUSUAL_MOUSE_SPEED not in result.anomalies

    def test_fewer_than_two_moves_is_skipped(self, analyzer):
        pointer = _clicks(10) + _moves(1, step_x=10_000)
        result = analyzer.analyze(_session(pointer=pointer), _profile(), now=NOW)
        assert AnomalyTag.UNUSUAL_MOUSE_SPEED not in result.anomalies

    def test_fast_pointer_adds_pointer_weight(self, analyzer):
        # 400 units/ms against a 200 units/ms baseline
        result = analyzer.analyze(_session(pointer=_moves(11, step_x=6400)), _profile(), now=NOW)
        assert result.anomalies == [AnomalyTag.UNUSUAL_MOUSE_SPEED]
        assert result.risk_score == pytest.approx(0.2)

    def test_clicks_count_toward_sample_size(self, analyzer):
        pointer = _clicks(9) + _moves(2, step_x=6400)
        result = analyzer.analyze(_session(pointer=pointer), _profile(), now=NOW)
        assert result.anomalies == [AnomalyTag.UNUSUAL_MOUSE_SPEED]

    def test_matching_speed_is_not_flagged(self, analyzer):
        result = analyzer.analyze(_session(pointer=_moves(15, step_x=3200)), _profile(), now=NOW)
        assert result.anomalies == []

    def test_zero_elapsed_pairs_are_ignored(self, analyzer):
        pointer = [
            PointerEvent(x=i * 100.0, y=0.0, timestamp=500, event_type=PointerEventType.MOVE)
            for i in range(12)
        ]
        result = analyzer.analyze(_session(pointer=pointer), _profile(), now=NOW)
        assert result.anomalies == []
        assert result.risk_score == pytest.approx(0.05)


class TestTimeOfDaySignal:
    def test_low_confidence_profile_never_flags_off_hours(self, analyzer):
        result = analyzer.analyze(_session(), _profile(confidence_score=0.1), now=NOW)
        assert AnomalyTag.UNUSUAL_TIME_OF_ACCESS not in result.anomalies

    def test_confidence_must_exceed_threshold(self, analyzer):
        result = analyzer.analyze(_session(), _profile(confidence_score=0.5), now=NOW)
        assert AnomalyTag.UNUSUAL_TIME_OF_ACCESS not in result.anomalies

    def test_confident_profile_flags_unused_hour(self, analyzer):
        result = analyzer.analyze(_session(), _profile(confidence_score=0.9), now=NOW)
        assert result.anomalies == [AnomalyTag.UNUSUAL_TIME_OF_ACCESS]
        assert result.risk_score == pytest.approx(0.15)

    def test_usual_hour_is_not_flagged(self, analyzer):
        usage = [0.0] * 24
        usage[3] = 0.6
        usage[20] = 0.4
        profile = _profile(
            confidence_score=0.9,
            navigation_pattern=NavigationBaseline(time_of_day_usage=usage),
        )
        result = analyzer.analyze(_session(), profile, now=NOW)
        assert result.anomalies == []


class TestCombinedScore:
    def test_all_signals_sum_with_base(self, analyzer):
        session = _session(_keystrokes([300] * 8), _moves(12, step_x=6400))
        result = analyzer.analyze(session, _profile(confidence_score=0.9), now=NOW)
        assert result.risk_score == pytest.approx(0.5)
        assert result.anomalies == [
            AnomalyTag.UNUSUAL_TYPING_RHYTHM,
            AnomalyTag.UNUSUAL_MOUSE_SPEED,
            AnomalyTag.UNUSUAL_TIME_OF_ACCESS,
        ]

    def test_score_is_clamped_to_one(self):
        config = RiskAnalyzerConfig(
            typing=TypingSignal(risk_weight=0.6),
            pointer=PointerSignal(risk_weight=0.6),
            time_of_day=TimeOfDaySignal(risk_weight=0.6),
        )
        session = _session(_keystrokes([300] * 8), _moves(12, step_x=6400))
        result = RiskAnalyzer(config).analyze(session, _profile(confidence_score=0.9), now=NOW)
        assert result.risk_score == 1.0
        assert len(result.anomalies) == 3

    def test_score_stays_in_unit_interval_with_negative_base(self):
        config = RiskAnalyzerConfig(base_risk=-0.5)
        result = RiskAnalyzer(config).analyze(_session(), _profile(), now=NOW)
        assert result.risk_score == 0.0


class TestHelpers:
    def test_mean_flight_time(self):
        assert mean_flight_time(_keystrokes([0, 100, 200])) == pytest.approx(100.0)

    def test_mean_pointer_speed(self):
        assert mean_pointer_speed(_moves(3, step_x=32)) == pytest.approx(2.0)

    def test_mean_pointer_speed_without_usable_pairs(self):
        assert mean_pointer_speed(_moves(1, step_x=10)) is None
