"""Keystroke and pointer telemetry generator for genuine and impostor users.

Each generated session replays synthetic key presses and pointer moves
through ``TelemetryAccumulator``, so batches carry exactly the dwell and
flight timing the capture surface would send. Genuine typists sit close
to the default behavior baseline; impostors are slower and noisier.
"""

import random
from datetime import UTC, datetime, timedelta
from typing import Any

from fraudguard.domains.behavior.capture import TelemetryAccumulator, TelemetryBatch

from .base import BaseGenerator
from .utils.distributions import positive_normal, random_heading, truncated_normal_ms

SOURCE_SERVICE = "behavior-capture"

DEFAULT_PHRASES = [
    "transfer funds to savings",
    "pay rent for march",
    "move money to checking",
    "send 250 to landlord",
]

DEFAULT_PROFILES: dict[str, dict[str, float]] = {
    "genuine": {
        "flight_mean_ms": 150.0,
        "flight_std_ms": 20.0,
        "dwell_mean_ms": 100.0,
        "dwell_std_ms": 15.0,
        "pointer_speed_mean": 200.0,
        "pointer_speed_std": 15.0,
    },
    "impostor": {
        "flight_mean_ms": 320.0,
        "flight_std_ms": 90.0,
        "dwell_mean_ms": 140.0,
        "dwell_std_ms": 45.0,
        "pointer_speed_mean": 60.0,
        "pointer_speed_std": 25.0,
    },
}

DEVICE_FINGERPRINTS = [
    {
        "screen_resolution": "1920x1080",
        "timezone": "America/New_York",
        "language": "en-US",
        "user_agent": "Mozilla/5.0 (Windows NT 10.0; Win64; x64) Chrome/122.0",
    },
    {
        "screen_resolution": "2560x1440",
        "timezone": "America/Chicago",
        "language": "en-US",
        "user_agent": "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) Safari/605.1.15",
    },
    {
        "screen_resolution": "1366x768",
        "timezone": "America/Los_Angeles",
        "language": "es-US",
        "user_agent": "Mozilla/5.0 (X11; Linux x86_64) Firefox/123.0",
    },
]


class TelemetryGenerator(BaseGenerator):
    def generate(self, num_sessions: int = 100, profile: str = "genuine") -> list[dict[str, Any]]:
        profiles = {**DEFAULT_PROFILES, **self.config.get("profiles", {})}
        if profile not in profiles:
            raise ValueError(f"Unknown typist profile: {profile}")
        typist = profiles[profile]

        time_span = self.config.get("time_span_days", 30)
        base_time = datetime(2026, 1, 1, tzinfo=UTC)
        end_time = base_time + timedelta(days=time_span)

        events: list[dict[str, Any]] = []
        for _ in range(num_sessions):
            user_id = self._uuid()
            session_id = self._uuid()
            started_at = self._random_datetime(base_time, end_time)
            events.extend(self._session_events(user_id, session_id, started_at, profile, typist))
        return events

    def _session_events(
        self,
        user_id: str,
        session_id: str,
        started_at: datetime,
        profile: str,
        typist: dict[str, float],
    ) -> list[dict[str, Any]]:
        config = self.config
        keystrokes_per_session = config.get("keystrokes_per_session", 30)
        pointer_interval_ms = config.get("pointer_interval_ms", 16)
        flush_size = config.get("keystroke_flush_size", 10)
        phrases = config.get("phrases", DEFAULT_PHRASES)

        accumulator = TelemetryAccumulator(session_id, keystroke_flush_size=flush_size)
        events = [
            self._envelope(
                "behavior-session-started",
                SOURCE_SERVICE,
                {
                    "user_id": user_id,
                    "session_id": session_id,
                    "device_fingerprint": random.choice(DEVICE_FINGERPRINTS),
                },
                timestamp=started_at,
                correlation_id=session_id,
            )
        ]

        clock = int(started_at.timestamp() * 1000)
        pointer_clock = clock
        x, y = 640.0, 360.0
        text = " ".join(random.choice(phrases) for _ in range(3))

        for i in range(keystrokes_per_session):
            key = text[i % len(text)]
            if i > 0:
                clock += truncated_normal_ms(typist["flight_mean_ms"], typist["flight_std_ms"])
            accumulator.key_down(key, clock)
            clock += truncated_normal_ms(typist["dwell_mean_ms"], typist["dwell_std_ms"], 5)
            accumulator.key_up(key, clock)

            # One pointer move per keystroke; distance tracks the sampled speed
            speed = positive_normal(typist["pointer_speed_mean"], typist["pointer_speed_std"])
            dx, dy = random_heading()
            x += dx * speed * pointer_interval_ms
            y += dy * speed * pointer_interval_ms
            pointer_clock += pointer_interval_ms
            accumulator.pointer_move(x, y, pointer_clock)

            if accumulator.should_flush:
                events.append(self._batch_event(user_id, accumulator.flush(), profile, clock))

        accumulator.pointer_click(x, y, pointer_clock + pointer_interval_ms)
        remainder = accumulator.flush()
        if remainder:
            events.append(self._batch_event(user_id, remainder, profile, clock))

        events.append(
            self._envelope(
                "behavior-session-ended",
                SOURCE_SERVICE,
                {"user_id": user_id, "session_id": session_id},
                timestamp=datetime.fromtimestamp(clock / 1000, tz=UTC),
                correlation_id=session_id,
            )
        )
        return events

    def _batch_event(
        self, user_id: str, batch: TelemetryBatch, profile: str, clock_ms: int
    ) -> dict[str, Any]:
        return self._envelope(
            "telemetry-batch-captured",
            SOURCE_SERVICE,
            {
                "user_id": user_id,
                "session_id": batch.session_id,
                "profile": profile,
                "keystroke_data": [k.model_dump(mode="json") for k in batch.keystrokes],
                "pointer_data": [p.model_dump(mode="json") for p in batch.pointer_events],
            },
            timestamp=datetime.fromtimestamp(clock_ms / 1000, tz=UTC),
            correlation_id=batch.session_id,
        )
