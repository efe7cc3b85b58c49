"""Pydantic models for the behavioral biometrics domain."""

from datetime import datetime
from enum import StrEnum

from pydantic import BaseModel, Field, field_validator

HOURS_PER_DAY = 24


# --- Enums ---


class PointerEventType(StrEnum):
    MOVE = "move"
    CLICK = "click"
    SCROLL = "scroll"


class MovementStyle(StrEnum):
    SMOOTH = "smooth"
    JERKY = "jerky"
    PRECISE = "precise"


class AnomalyTag(StrEnum):
    UNUSUAL_TYPING_RHYTHM = "unusual_typing_rhythm"
    UNUSUAL_MOUSE_SPEED = "unusual_mouse_speed"
    UNUSUAL_TIME_OF_ACCESS = "unusual_time_of_access"


# --- Telemetry events ---


class KeystrokeEvent(BaseModel):
    key: str
    timestamp: int  # epoch ms, key-up
    dwell_time: int  # key-down -> key-up
    flight_time: int  # previous key-up -> this key-down, 0 for the first key


class PointerEvent(BaseModel):
    x: float
    y: float
    timestamp: int  # epoch ms
    event_type: PointerEventType
    pressure: float | None = None


class NavigationEvent(BaseModel):
    page: str
    timestamp: int  # epoch ms
    action: str  # "visit", "click", "form_submit"


# --- Baselines ---


class DigraphTiming(BaseModel):
    keys: str
    interval: float


class TypingBaseline(BaseModel):
    avg_keystroke_interval: float = 150.0
    avg_dwell_time: float = 100.0
    keystroke_variance: float = 50.0
    common_digraphs: list[DigraphTiming] = Field(default_factory=list)


class PointerBaseline(BaseModel):
    avg_speed: float = 200.0
    avg_acceleration: float = 50.0
    click_pressure: float = 0.5
    movement_style: MovementStyle = MovementStyle.SMOOTH


class NavigationBaseline(BaseModel):
    common_paths: list[str] = Field(default_factory=list)
    avg_session_duration: float = 300_000.0  # ms
    preferred_features: list[str] = Field(default_factory=list)
    time_of_day_usage: list[float] = Field(default_factory=lambda: [0.0] * HOURS_PER_DAY)

    @field_validator("time_of_day_usage")
    @classmethod
    def _check_usage(cls, value: list[float]) -> list[float]:
        if len(value) != HOURS_PER_DAY:
            raise ValueError(f"time_of_day_usage must have {HOURS_PER_DAY} slots, got {len(value)}")
        if any(v < 0 for v in value):
            raise ValueError("time_of_day_usage values must be non-negative")
        if sum(value) > 1.0 + 1e-9:
            raise ValueError("time_of_day_usage must sum to at most 1.0")
        return value


class DeviceFingerprint(BaseModel):
    screen_resolution: str
    timezone: str
    language: str
    user_agent: str


# --- Profile & session ---


class BehaviorProfile(BaseModel):
    user_id: str
    typing_pattern: TypingBaseline = Field(default_factory=TypingBaseline)
    pointer_pattern: PointerBaseline = Field(default_factory=PointerBaseline)
    navigation_pattern: NavigationBaseline = Field(default_factory=NavigationBaseline)
    device_fingerprint: DeviceFingerprint
    confidence_score: float = Field(default=0.1, ge=0.0, le=1.0)
    last_updated: datetime


class BehaviorSession(BaseModel):
    user_id: str
    session_id: str
    start_time: datetime
    end_time: datetime | None = None
    keystroke_data: list[KeystrokeEvent] = Field(default_factory=list)
    pointer_data: list[PointerEvent] = Field(default_factory=list)
    navigation_data: list[NavigationEvent] = Field(default_factory=list)
    risk_score: float | None = None
    anomalies: list[str] = Field(default_factory=list)


class RiskEvaluation(BaseModel):
    risk_score: float = Field(ge=0.0, le=1.0)
    anomalies: list[AnomalyTag] = Field(default_factory=list)


# --- API request/response models ---


class StartSessionRequest(BaseModel):
    session_id: str = Field(min_length=1)
    device_fingerprint: DeviceFingerprint


class KeystrokeBatch(BaseModel):
    keystroke_data: list[KeystrokeEvent]


class PointerBatch(BaseModel):
    pointer_data: list[PointerEvent]


class NavigationRequest(BaseModel):
    page: str
    action: str


class AppendResult(BaseModel):
    session_id: str
    buffered_count: int
    risk_recompute_scheduled: bool = False
