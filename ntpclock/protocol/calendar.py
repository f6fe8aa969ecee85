"""Wall-clock projection from a synchronized epoch.

Every function here is pure: the controller passes in its stored
`SynchronizedEpoch`, the user offset and the current tick reading.
"""

from collections import namedtuple
from dataclasses import dataclass

from ntpclock.timebase import ticks_diff
from ntpclock.utils.constants import (
    DEFAULT_TICKS_WIDTH, MONTH_DAYS, UNIX_EPOCH_YEAR,
    SECONDS_PER_DAY, SECONDS_PER_HOUR, SECONDS_PER_MINUTE,
)

CalendarDate = namedtuple("CalendarDate", ["year", "month", "day"])


@dataclass(frozen=True)
class SynchronizedEpoch:
    """Last known-good server time and the tick reading it was captured at."""
    epoch_seconds: int = 0
    captured_at_millis: int = 0

    @property
    def is_set(self) -> bool:
        return self.epoch_seconds != 0


UNSYNCHRONIZED = SynchronizedEpoch()


def current_epoch_seconds(sync: SynchronizedEpoch, time_offset: int, now_millis: int,
                          width: int = DEFAULT_TICKS_WIDTH) -> int:
    elapsed_ms = ticks_diff(now_millis, sync.captured_at_millis, width)
    return time_offset + sync.epoch_seconds + elapsed_ms // 1000


def hours(epoch: int) -> int:
    return (epoch % SECONDS_PER_DAY) // SECONDS_PER_HOUR


def minutes(epoch: int) -> int:
    return (epoch % SECONDS_PER_HOUR) // SECONDS_PER_MINUTE


def seconds(epoch: int) -> int:
    return epoch % SECONDS_PER_MINUTE


def is_leap_year(year: int) -> bool:
    return year % 4 == 0 and (year % 100 != 0 or year % 400 == 0)


def days_in_year(year: int) -> int:
    return 366 if is_leap_year(year) else 365


def days_in_month(year: int, month: int) -> int:
    if not 1 <= month <= 12:
        raise ValueError(f"Month out of range: {month}")
    if month == 2 and is_leap_year(year):
        return 29
    return MONTH_DAYS[month - 1]


def calendar_date(epoch: int) -> CalendarDate:
    """Convert epoch seconds to a proleptic Gregorian (year, month, day)."""
    days = epoch // SECONDS_PER_DAY
    year = UNIX_EPOCH_YEAR

    while days < 0:
        year -= 1
        days += days_in_year(year)
    while days >= days_in_year(year):
        days -= days_in_year(year)
        year += 1

    # days is now the zero-based day of the year
    month = 1
    while days >= days_in_month(year, month):
        days -= days_in_month(year, month)
        month += 1

    return CalendarDate(year, month, days + 1)


def formatted_time(epoch: int) -> str:
    return f"{hours(epoch):02d}:{minutes(epoch):02d}:{seconds(epoch):02d}"


def formatted_date(epoch: int) -> str:
    """ISO 8601 rendering, always suffixed 'Z' whatever offset went into `epoch`."""
    year, month, day = calendar_date(epoch)
    return f"{year:04d}-{month:02d}-{day:02d}T{formatted_time(epoch)}Z"
