import time

from .base import MonotonicClock
from ntpclock.utils.constants import DEFAULT_TICKS_WIDTH


class SystemClock(MonotonicClock):
    """Millisecond counter over time.monotonic(), truncated to `width` bits."""

    def __init__(self, width: int = DEFAULT_TICKS_WIDTH):
        if width <= 0:
            raise ValueError(f"Counter width must be positive, got {width}")
        self.width = width
        self._mask = (1 << width) - 1

    def now_millis(self) -> int:
        return int(time.monotonic() * 1000) & self._mask

    def sleep_millis(self, ms: int) -> None:
        if ms > 0:
            time.sleep(ms / 1000.0)
