from abc import ABC, abstractmethod

from ntpclock.utils.constants import DEFAULT_TICKS_WIDTH


def ticks_diff(later: int, earlier: int, width: int = DEFAULT_TICKS_WIDTH) -> int:
    """Elapsed ticks from `earlier` to `later` on a counter of `width` bits.

    Correctly handles counter wrap-around, as long as less than one full
    counter period has elapsed.
    """
    return (later - earlier) & ((1 << width) - 1)


def ticks_add(ticks: int, delta: int, width: int = DEFAULT_TICKS_WIDTH) -> int:
    """Offset a tick value by `delta` (may be negative), wrapping at `width` bits."""
    return (ticks + delta) & ((1 << width) - 1)


class MonotonicClock(ABC):
    width: int = DEFAULT_TICKS_WIDTH

    @abstractmethod
    def now_millis(self) -> int:
        pass

    @abstractmethod
    def sleep_millis(self, ms: int) -> None:
        pass

    def elapsed_since(self, ticks: int) -> int:
        return ticks_diff(self.now_millis(), ticks, self.width)
