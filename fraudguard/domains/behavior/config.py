"""Behavioral risk analysis configuration with sensible defaults.

Thresholds and weights for the per-signal risk analyzer and the
background recompute trigger.
"""

import os
from dataclasses import dataclass, field


@dataclass
class TypingSignal:
    # Minimum buffered keystrokes before the rhythm is compared
    min_samples: int = 6
    # Relative deviation of mean flight time from the baseline interval
    deviation_threshold: float = 0.3
    risk_weight: float = 0.2


@dataclass
class PointerSignal:
    # Minimum buffered pointer events (all kinds) before speed is compared
    min_samples: int = 11
    # Minimum "move" events among them
    min_moves: int = 2
    deviation_threshold: float = 0.4
    risk_weight: float = 0.15


@dataclass
class TimeOfDaySignal:
    # Usage fraction below which the current hour counts as off-hours
    usage_threshold: float = 0.1
    # Profiles at or below this confidence never flag off-hours access
    min_confidence: float = 0.5
    risk_weight: float = 0.1


@dataclass
class RiskAnalyzerConfig:
    typing: TypingSignal = field(default_factory=TypingSignal)
    pointer: PointerSignal = field(default_factory=PointerSignal)
    time_of_day: TimeOfDaySignal = field(default_factory=TimeOfDaySignal)
    # Flat contribution carried by every session
    base_risk: float = 0.05
    max_risk: float = 1.0


@dataclass
class RecomputeConfig:
    # Recompute is scheduled once the buffered keystroke count exceeds this
    keystroke_trigger_count: int = 10


@dataclass
class BehaviorConfig:
    """Top-level behavioral analytics configuration."""

    analyzer: RiskAnalyzerConfig = field(default_factory=RiskAnalyzerConfig)
    recompute: RecomputeConfig = field(default_factory=RecomputeConfig)

    @classmethod
    def from_env(cls) -> "BehaviorConfig":
        """Load config with env var overrides. Env vars use BEHAVIOR_ prefix."""
        config = cls()

        if v := os.getenv("BEHAVIOR_TYPING_DEVIATION_THRESHOLD"):
            config.analyzer.typing.deviation_threshold = float(v)
        if v := os.getenv("BEHAVIOR_TYPING_MIN_SAMPLES"):
            config.analyzer.typing.min_samples = int(v)
        if v := os.getenv("BEHAVIOR_POINTER_DEVIATION_THRESHOLD"):
            config.analyzer.pointer.deviation_threshold = float(v)
        if v := os.getenv("BEHAVIOR_POINTER_MIN_SAMPLES"):
            config.analyzer.pointer.min_samples = int(v)
        if v := os.getenv("BEHAVIOR_OFF_HOURS_MIN_CONFIDENCE"):
            config.analyzer.time_of_day.min_confidence = float(v)
        if v := os.getenv("BEHAVIOR_BASE_RISK"):
            config.analyzer.base_risk = float(v)

        if v := os.getenv("BEHAVIOR_KEYSTROKE_TRIGGER_COUNT"):
            config.recompute.keystroke_trigger_count = int(v)

        return config


# Module-level default instance
default_config = BehaviorConfig()
