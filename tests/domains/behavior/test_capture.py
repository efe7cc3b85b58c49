"""Unit tests for client-side telemetry accumulation."""

import pytest

from fraudguard.domains.behavior.capture import TelemetryAccumulator
from fraudguard.domains.behavior.models import PointerEventType


@pytest.fixture
def accumulator() -> TelemetryAccumulator:
    return TelemetryAccumulator("session-1")


class TestKeystrokes:
    def test_first_key_has_zero_flight_time(self, accumulator):
        accumulator.key_down("a", 1000)
        event = accumulator.key_up("a", 1090)
        assert event.dwell_time == 90
        assert event.flight_time == 0
        assert event.timestamp == 1090

    def test_flight_is_previous_release_to_next_press(self, accumulator):
        accumulator.key_down("a", 1000)
        accumulator.key_up("a", 1100)
        accumulator.key_down("b", 1250)
        event = accumulator.key_up("b", 1320)
        assert event.flight_time == 150
        assert event.dwell_time == 70

    def test_release_without_press_is_ignored(self, accumulator):
        assert accumulator.key_up("z", 500) is None
        assert not accumulator.flush()

    def test_should_flush_after_ten_keystrokes(self, accumulator):
        for i in range(9):
            accumulator.key_down("k", i * 200)
            accumulator.key_up("k", i * 200 + 80)
        assert accumulator.should_flush is False
        accumulator.key_down("k", 2000)
        accumulator.key_up("k", 2080)
        assert accumulator.should_flush is True


class TestPointer:
    def test_click_pressure_defaults(self, accumulator):
        accumulator.pointer_click(5, 5, 100)
        event = accumulator.flush().pointer_events[0]
        assert event.event_type == PointerEventType.CLICK
        assert event.pressure == 0.5

    def test_buffer_is_trimmed_to_newest_events(self, accumulator):
        for i in range(51):
            accumulator.pointer_move(i, i, i)
        batch = accumulator.flush()
        assert len(batch.pointer_events) == 25
        assert batch.pointer_events[-1].timestamp == 50
        assert batch.pointer_events[0].timestamp == 26

    def test_scroll_events_are_recorded(self, accumulator):
        accumulator.pointer_scroll(0, 300, 10)
        assert accumulator.flush().pointer_events[0].event_type == PointerEventType.SCROLL


class TestFlush:
    def test_flush_drains_buffers(self, accumulator):
        accumulator.key_down("a", 0)
        accumulator.key_up("a", 80)
        accumulator.pointer_move(1, 1, 10)

        batch = accumulator.flush()

        assert batch.session_id == "session-1"
        assert len(batch.keystrokes) == 1
        assert len(batch.pointer_events) == 1
        assert not accumulator.flush()
