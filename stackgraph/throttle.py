from __future__ import annotations

from dataclasses import dataclass


@dataclass
class Debouncer:
    """Fires once after a burst of triggers has been quiet for `delay_s`."""

    delay_s: float = 0.2
    _last_trigger_at: float | None = None

    def __post_init__(self) -> None:
        if self.delay_s < 0:
            raise ValueError("delay_s must be >= 0")

    @property
    def pending(self) -> bool:
        return self._last_trigger_at is not None

    def trigger(self, now: float) -> None:
        self._last_trigger_at = now

    def poll(self, now: float) -> bool:
        if self._last_trigger_at is None:
            return False
        if now - self._last_trigger_at < self.delay_s:
            return False
        self._last_trigger_at = None
        return True

    def cancel(self) -> None:
        self._last_trigger_at = None


@dataclass
class PointerCoalescer:
    """Keeps the latest pointer position and releases it at most once per interval."""

    min_interval_s: float = 1.0 / 60.0
    _pending: tuple[float, float] | None = None
    _last_taken_at: float | None = None

    def __post_init__(self) -> None:
        if self.min_interval_s < 0:
            raise ValueError("min_interval_s must be >= 0")

    def submit(self, x: float, y: float) -> None:
        self._pending = (float(x), float(y))

    def take(self, now: float) -> tuple[float, float] | None:
        if self._pending is None:
            return None
        if self._last_taken_at is not None and now - self._last_taken_at < self.min_interval_s:
            return None
        out = self._pending
        self._pending = None
        self._last_taken_at = now
        return out

    def clear(self) -> None:
        self._pending = None
