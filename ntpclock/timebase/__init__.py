"""Timebase Layer - free-running millisecond counters."""

from .base import MonotonicClock, ticks_diff, ticks_add
from .system import SystemClock

__all__ = [
    "MonotonicClock",
    "SystemClock",
    "ticks_diff",
    "ticks_add",
]
