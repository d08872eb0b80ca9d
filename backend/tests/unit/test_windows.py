"""
Unit tests for shared/windows.py

Tests UTC day windows, look-ahead windows, timestamp parsing, and
independence from the host timezone.
"""

import math
import os
import time
import unittest
from datetime import datetime, timedelta, timezone
from zoneinfo import ZoneInfo

from shared.windows import (
    InvalidInstantError,
    TimeWindow,
    day_window,
    format_instant,
    look_ahead_window,
    to_utc_instant,
)

UTC = timezone.utc


class TestToUtcInstant(unittest.TestCase):
    """Tests for to_utc_instant() parsing and validation."""

    def test_aware_datetime_converted_to_utc(self):
        """Offsets are normalized to UTC."""
        value = datetime(2025, 10, 12, 20, 0, tzinfo=ZoneInfo("America/Los_Angeles"))

        result = to_utc_instant(value)

        self.assertEqual(result, datetime(2025, 10, 13, 3, 0, tzinfo=UTC))
        self.assertEqual(result.utcoffset(), timedelta(0))

    def test_naive_datetime_read_as_utc(self):
        """Naive datetimes are UTC, not host-local."""
        result = to_utc_instant(datetime(2025, 10, 12, 18, 0))

        self.assertEqual(result, datetime(2025, 10, 12, 18, 0, tzinfo=UTC))

    def test_iso_string_with_z(self):
        """ISO strings with Z parse as UTC."""
        result = to_utc_instant("2025-10-12T18:00:00Z")

        self.assertEqual(result, datetime(2025, 10, 12, 18, 0, tzinfo=UTC))

    def test_iso_string_with_offset(self):
        """ISO strings with an offset are converted."""
        result = to_utc_instant("2025-10-12T23:30:00-05:00")

        self.assertEqual(result, datetime(2025, 10, 13, 4, 30, tzinfo=UTC))

    def test_iso_string_without_offset(self):
        """ISO strings without an offset are UTC."""
        result = to_utc_instant("2025-10-12T18:00:00")

        self.assertEqual(result, datetime(2025, 10, 12, 18, 0, tzinfo=UTC))

    def test_epoch_seconds(self):
        """Numbers are epoch seconds."""
        result = to_utc_instant(0)

        self.assertEqual(result, datetime(1970, 1, 1, tzinfo=UTC))

    def test_rejects_unparseable_string(self):
        """Garbage strings fail fast with a labeled error."""
        with self.assertRaises(InvalidInstantError) as ctx:
            to_utc_instant("not a timestamp")

        self.assertIn("not a timestamp", str(ctx.exception))

    def test_rejects_empty_string(self):
        """Empty string is not a time."""
        with self.assertRaises(InvalidInstantError):
            to_utc_instant("   ")

    def test_rejects_non_finite_numbers(self):
        """NaN and infinity are rejected."""
        for value in (math.nan, math.inf, -math.inf):
            with self.subTest(value=value):
                with self.assertRaises(InvalidInstantError):
                    to_utc_instant(value)

    def test_rejects_none_and_bool(self):
        """None and booleans are not timestamps."""
        for value in (None, True, False):
            with self.subTest(value=value):
                with self.assertRaises(InvalidInstantError):
                    to_utc_instant(value)

    def test_error_is_value_error(self):
        """Callers can catch InvalidInstantError as ValueError."""
        self.assertTrue(issubclass(InvalidInstantError, ValueError))


class TestDayWindow(unittest.TestCase):
    """Tests for day_window()."""

    def test_evening_utc(self):
        """2025-10-12T18:00Z belongs to Oct 12 UTC."""
        window = day_window("2025-10-12T18:00:00Z")

        self.assertEqual(window.start, datetime(2025, 10, 12, tzinfo=UTC))
        self.assertEqual(window.end, datetime(2025, 10, 13, tzinfo=UTC))
        self.assertEqual(
            window.as_iso(),
            ("2025-10-12T00:00:00.000Z", "2025-10-13T00:00:00.000Z"),
        )

    def test_spans_exactly_one_day(self):
        """end - start is always 24 hours and contains now."""
        base = datetime(2024, 2, 28, tzinfo=UTC)
        for hours in range(0, 72, 5):
            now = base + timedelta(hours=hours, minutes=17, seconds=3)
            with self.subTest(now=now):
                window = day_window(now)
                self.assertEqual(window.end - window.start, timedelta(hours=24))
                self.assertTrue(window.start <= now < window.end)
                self.assertTrue(window.contains(now))

    def test_midnight_starts_new_day(self):
        """Exactly midnight is the start of its own day."""
        window = day_window("2025-10-13T00:00:00Z")

        self.assertEqual(window.start, datetime(2025, 10, 13, tzinfo=UTC))

    def test_last_millisecond_of_day(self):
        """23:59:59.999 is still the same day; the end is excluded."""
        window = day_window("2025-10-12T23:59:59.999Z")

        self.assertEqual(window.start, datetime(2025, 10, 12, tzinfo=UTC))
        self.assertFalse(window.contains("2025-10-13T00:00:00Z"))

    def test_offset_input_uses_utc_day(self):
        """A Chicago evening that is already tomorrow in UTC uses the UTC day."""
        now = datetime(2025, 10, 12, 20, 0, tzinfo=ZoneInfo("America/Chicago"))

        window = day_window(now)

        self.assertEqual(window.start, datetime(2025, 10, 13, tzinfo=UTC))

    @unittest.skipUnless(hasattr(time, "tzset"), "requires time.tzset")
    def test_independent_of_host_timezone(self):
        """Same instant gives the same window under different TZ settings."""
        now = datetime(2025, 10, 12, 18, 0, tzinfo=UTC)
        original_tz = os.environ.get("TZ")
        results = []
        try:
            for zone in ("UTC", "America/Los_Angeles", "Asia/Tokyo", "Pacific/Kiritimati"):
                os.environ["TZ"] = zone
                time.tzset()
                results.append(day_window(now))
                results.append(day_window(datetime(2025, 10, 12, 18, 0)))
        finally:
            if original_tz is None:
                os.environ.pop("TZ", None)
            else:
                os.environ["TZ"] = original_tz
            time.tzset()

        self.assertEqual(len(set(results)), 1)
        self.assertEqual(results[0].start, datetime(2025, 10, 12, tzinfo=UTC))

    def test_invalid_now_raises(self):
        """Bad input fails instead of producing a default window."""
        with self.assertRaises(InvalidInstantError):
            day_window("yesterday-ish")


class TestLookAheadWindow(unittest.TestCase):
    """Tests for look_ahead_window()."""

    def test_reminder_window(self):
        """23 hours ahead, one hour long."""
        window = look_ahead_window("2025-01-01T00:00:00Z", 1380, 60)

        self.assertEqual(window.start, datetime(2025, 1, 1, 23, 0, tzinfo=UTC))
        self.assertEqual(window.end, datetime(2025, 1, 2, 0, 0, tzinfo=UTC))

    def test_roll_call_window(self):
        """Minute-level windows."""
        window = look_ahead_window("2025-01-01T12:00:00Z", 5, 1)

        self.assertEqual(window.as_iso(), ("2025-01-01T12:05:00.000Z", "2025-01-01T12:06:00.000Z"))

    def test_zero_lead(self):
        """Zero lead starts at now."""
        now = datetime(2025, 1, 1, 12, 0, tzinfo=UTC)

        window = look_ahead_window(now, 0, 30)

        self.assertEqual(window, TimeWindow(now, now + timedelta(minutes=30)))

    def test_rejects_negative_minutes(self):
        """Negative minute counts fail fast."""
        with self.assertRaises(InvalidInstantError):
            look_ahead_window("2025-01-01T00:00:00Z", -5, 10)
        with self.assertRaises(InvalidInstantError):
            look_ahead_window("2025-01-01T00:00:00Z", 5, -10)

    def test_rejects_non_finite_minutes(self):
        """NaN minutes fail fast."""
        with self.assertRaises(InvalidInstantError):
            look_ahead_window("2025-01-01T00:00:00Z", math.nan, 10)


class TestFormatInstant(unittest.TestCase):
    """Tests for format_instant()."""

    def test_millisecond_precision(self):
        """Microseconds truncated to milliseconds with Z suffix."""
        value = datetime(2025, 10, 12, 5, 6, 7, 123456, tzinfo=UTC)

        self.assertEqual(format_instant(value), "2025-10-12T05:06:07.123Z")


if __name__ == "__main__":
    unittest.main()
