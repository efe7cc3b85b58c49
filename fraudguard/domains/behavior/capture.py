"""Client-side telemetry accumulation.

``TelemetryAccumulator`` turns raw key and pointer events for one capture
session into the keystroke/pointer records the session store expects, and
buffers them until the owner flushes. Timing follows the capture surface:
dwell is key-down to key-up, flight is previous key-up to this key-down,
and the first keystroke of a session has flight time 0.
"""

from dataclasses import dataclass, field

from .models import KeystrokeEvent, PointerEvent, PointerEventType

DEFAULT_CLICK_PRESSURE = 0.5


@dataclass
class TelemetryBatch:
    session_id: str
    keystrokes: list[KeystrokeEvent] = field(default_factory=list)
    pointer_events: list[PointerEvent] = field(default_factory=list)

    def __bool__(self) -> bool:
        return bool(self.keystrokes or self.pointer_events)


class TelemetryAccumulator:
    def __init__(
        self,
        session_id: str,
        keystroke_flush_size: int = 10,
        pointer_buffer_max: int = 50,
        pointer_trim_to: int = 25,
    ) -> None:
        self.session_id = session_id
        self._keystroke_flush_size = keystroke_flush_size
        self._pointer_buffer_max = pointer_buffer_max
        self._pointer_trim_to = pointer_trim_to
        self._keystrokes: list[KeystrokeEvent] = []
        self._pointer_events: list[PointerEvent] = []
        self._pressed: dict[str, int] = {}
        self._last_key_up = 0

    @property
    def should_flush(self) -> bool:
        return len(self._keystrokes) >= self._keystroke_flush_size

    def key_down(self, key: str, timestamp: int) -> None:
        self._pressed[key] = timestamp

    def key_up(self, key: str, timestamp: int) -> KeystrokeEvent | None:
        """Record a key release. Returns None for a key with no matching press."""
        pressed_at = self._pressed.pop(key, None)
        if pressed_at is None:
            return None

        flight = pressed_at - self._last_key_up if self._last_key_up > 0 else 0
        event = KeystrokeEvent(
            key=key,
            timestamp=timestamp,
            dwell_time=timestamp - pressed_at,
            flight_time=flight,
        )
        self._keystrokes.append(event)
        self._last_key_up = timestamp
        return event

    def pointer_move(self, x: float, y: float, timestamp: int) -> None:
        self._pointer_events.append(
            PointerEvent(x=x, y=y, timestamp=timestamp, event_type=PointerEventType.MOVE)
        )
        if len(self._pointer_events) > self._pointer_buffer_max:
            self._pointer_events = self._pointer_events[-self._pointer_trim_to :]

    def pointer_click(
        self, x: float, y: float, timestamp: int, pressure: float | None = None
    ) -> None:
        self._pointer_events.append(
            PointerEvent(
                x=x,
                y=y,
                timestamp=timestamp,
                event_type=PointerEventType.CLICK,
                pressure=pressure if pressure is not None else DEFAULT_CLICK_PRESSURE,
            )
        )

    def pointer_scroll(self, x: float, y: float, timestamp: int) -> None:
        self._pointer_events.append(
            PointerEvent(x=x, y=y, timestamp=timestamp, event_type=PointerEventType.SCROLL)
        )

    def flush(self) -> TelemetryBatch:
        """Drain and return everything buffered so far."""
        batch = TelemetryBatch(
            session_id=self.session_id,
            keystrokes=self._keystrokes,
            pointer_events=self._pointer_events,
        )
        self._keystrokes = []
        self._pointer_events = []
        return batch
