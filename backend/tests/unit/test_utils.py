"""
Unit tests for shared/utils.py

Tests duration estimates, display formatting and summary printing.
"""

import unittest
from datetime import datetime, timedelta, timezone
from unittest.mock import patch

from shared.utils import (
    estimate_hours,
    format_display_date,
    format_display_time,
    print_summary,
)

START = datetime(2025, 10, 12, 15, 0, tzinfo=timezone.utc)


class TestEstimateHours(unittest.TestCase):
    """Tests for estimate_hours() function."""

    def test_rounds_to_one_decimal(self):
        """90 minutes and 20 minutes."""
        self.assertEqual(estimate_hours(START, START + timedelta(minutes=90)), 1.5)
        self.assertEqual(estimate_hours(START, START + timedelta(minutes=20)), 0.3)

    def test_missing_end_uses_default(self):
        """Missing end assumes a two hour event."""
        self.assertEqual(estimate_hours(START, None), 2.0)

    def test_missing_end_without_default(self):
        self.assertEqual(estimate_hours(START, None, default=None), 0.0)

    def test_missing_start(self):
        self.assertEqual(estimate_hours(None, START), 0.0)


class TestDisplayFormatting(unittest.TestCase):
    """Tests for format_display_time() and format_display_date()."""

    def test_time_in_utc(self):
        """Offsets are converted to UTC before formatting."""
        value = datetime(2025, 10, 12, 10, 30, tzinfo=timezone(timedelta(hours=-5)))

        self.assertEqual(format_display_time(value), "October 12, 2025 at 03:30 PM UTC")

    def test_time_missing(self):
        self.assertEqual(format_display_time(None), "Time to be announced")

    def test_date(self):
        self.assertEqual(format_display_date(START), "October 12, 2025")

    def test_date_missing(self):
        self.assertEqual(format_display_date(None), "Unknown date")


class TestPrintSummary(unittest.TestCase):
    """Tests for print_summary() function."""

    @patch("builtins.print")
    def test_prints_counts(self, mock_print):
        """Output includes title and every count."""
        print_summary("Reminder Emails", {"matched": 10, "sent": 7, "failed": 1})

        printed_output = " ".join(str(call[0][0]) for call in mock_print.call_args_list)
        self.assertIn("Reminder Emails Complete", printed_output)
        self.assertIn("Matched:", printed_output)
        self.assertIn("10", printed_output)
        self.assertIn("7", printed_output)
        self.assertIn("Failed:", printed_output)


if __name__ == "__main__":
    unittest.main()
