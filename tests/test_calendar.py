import unittest
from datetime import date, timedelta

from ntpclock.protocol import calendar
from ntpclock.protocol.calendar import SynchronizedEpoch, current_epoch_seconds

_UNIX_EPOCH = date(1970, 1, 1)


def _epoch_of(d: date, seconds_into_day: int = 0) -> int:
    return (d - _UNIX_EPOCH).days * 86400 + seconds_into_day


class TestCalendarDate(unittest.TestCase):
    def _check_year(self, year: int):
        d = date(year, 1, 1)
        while d.year == year:
            for seconds_into_day in (0, 43210, 86399):
                got = calendar.calendar_date(_epoch_of(d, seconds_into_day))
                self.assertEqual(got, (d.year, d.month, d.day), f"{d} +{seconds_into_day}s")
            d += timedelta(days=1)

    def test_matches_datetime_century_non_leap_1900(self):
        self._check_year(1900)

    def test_matches_datetime_century_leap_2000(self):
        self._check_year(2000)

    def test_matches_datetime_2023(self):
        self._check_year(2023)

    def test_matches_datetime_2024(self):
        self._check_year(2024)

    def test_matches_datetime_century_non_leap_2100(self):
        self._check_year(2100)

    def test_unix_epoch_and_fields(self):
        self.assertEqual(calendar.calendar_date(0), (1970, 1, 1))
        result = calendar.calendar_date(1700000000)
        self.assertEqual((result.year, result.month, result.day), (2023, 11, 14))

    def test_leap_year_rule(self):
        self.assertTrue(calendar.is_leap_year(2000))
        self.assertTrue(calendar.is_leap_year(2024))
        self.assertFalse(calendar.is_leap_year(1900))
        self.assertFalse(calendar.is_leap_year(2023))
        self.assertFalse(calendar.is_leap_year(2100))
        self.assertEqual(calendar.days_in_month(2024, 2), 29)
        self.assertEqual(calendar.days_in_month(2023, 2), 28)
        with self.assertRaises(ValueError):
            calendar.days_in_month(2023, 13)


class TestTimeOfDay(unittest.TestCase):
    def test_hours_minutes_seconds(self):
        self.assertEqual(calendar.hours(1700000000), 22)
        self.assertEqual(calendar.minutes(1700000000), 13)
        self.assertEqual(calendar.seconds(1700000000), 20)

    def test_formatted_time_is_zero_padded(self):
        self.assertEqual(calendar.formatted_time(0), "00:00:00")
        self.assertEqual(calendar.formatted_time(3600 + 60 + 1), "01:01:01")

    def test_formatted_date(self):
        self.assertEqual(calendar.formatted_date(1700000000), "2023-11-14T22:13:20Z")
        self.assertEqual(calendar.formatted_date(951782400), "2000-02-29T00:00:00Z")
        self.assertEqual(calendar.formatted_date(0), "1970-01-01T00:00:00Z")


class TestCurrentEpoch(unittest.TestCase):
    def test_adds_whole_elapsed_seconds(self):
        sync = SynchronizedEpoch(1000, 500)
        self.assertEqual(current_epoch_seconds(sync, 0, 500), 1000)
        self.assertEqual(current_epoch_seconds(sync, 0, 1499), 1000)
        self.assertEqual(current_epoch_seconds(sync, 0, 2499), 1001)

    def test_time_offset(self):
        sync = SynchronizedEpoch(1700000000, 0)
        self.assertEqual(current_epoch_seconds(sync, 3600, 0), 1700003600)
        self.assertEqual(current_epoch_seconds(sync, -3600, 0), 1699996400)

    def test_counter_wraparound(self):
        sync = SynchronizedEpoch(1700000000, 2**32 - 500)
        self.assertEqual(current_epoch_seconds(sync, 0, 1500), 1700000002)

    def test_monotonic_across_wraparound(self):
        start = 2**32 - 3000
        sync = SynchronizedEpoch(1700000000, start)
        previous = None
        for elapsed in range(0, 10000, 250):
            now = (start + elapsed) % 2**32
            value = current_epoch_seconds(sync, 0, now)
            if previous is not None:
                self.assertGreaterEqual(value, previous)
            previous = value
        self.assertEqual(previous, 1700000000 + 9750 // 1000)

    def test_narrow_counter(self):
        sync = SynchronizedEpoch(100, 65000)
        self.assertEqual(current_epoch_seconds(sync, 0, 1464, width=16), 102)


if __name__ == "__main__":
    unittest.main()
