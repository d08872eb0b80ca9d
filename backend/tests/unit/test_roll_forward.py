"""
Unit tests for opportunities/roll_forward.py

Tests owner-initiated cloning of the next occurrence and the scheduled
in-place roll forward.
"""

import unittest
from datetime import datetime, timezone
from unittest.mock import patch

from opportunities.roll_forward import (
    roll_forward_opportunities,
    roll_forward_opportunity,
)
from tests.fixtures.mock_helpers import create_mock_supabase, mock_responses
from tests.fixtures.opportunity_factory import create_test_opportunity


def _owned_row(frequency="weekly", owner="owner_1", **overrides):
    row = create_test_opportunity("opp_1", frequency=frequency, **overrides)
    row["organizations"] = {"owner": owner}
    return row


class TestRollForwardOpportunity(unittest.TestCase):
    """Tests for roll_forward_opportunity() function."""

    def test_clones_next_occurrence(self):
        """New row is one period later; the current row is closed."""
        mock_supabase = create_mock_supabase()
        mock_supabase.execute.side_effect = mock_responses(
            _owned_row(), [{"id": "opp_2"}], []
        )

        result = roll_forward_opportunity("opp_1", "owner_1", supabase=mock_supabase)

        self.assertTrue(result["success"])
        self.assertEqual(result["next_opportunity"], {"id": "opp_2"})
        self.assertNotIn("warning", result)

        new_row = mock_supabase.insert.call_args[0][0]
        self.assertEqual(new_row["start_time"], "2025-01-09T00:00:00.000Z")
        self.assertEqual(new_row["end_time"], "2025-01-09T02:00:00.000Z")
        self.assertEqual(new_row["duration_hours"], 2.0)
        self.assertEqual(new_row["frequency"], "weekly")
        self.assertEqual(new_row["title"], "Park Cleanup")
        self.assertEqual(new_row["age_group"], "all")
        self.assertIsNone(new_row["rollcall_email_sent_at"])
        self.assertNotIn("id", new_row)

        mock_supabase.update.assert_called_once_with({"closed": True})
        mock_supabase.eq.assert_called_with("id", "opp_1")

    def test_monthly_clamps_to_month_end(self):
        mock_supabase = create_mock_supabase()
        mock_supabase.execute.side_effect = mock_responses(
            _owned_row(
                frequency="monthly",
                start_time="2025-01-31T18:00:00+00:00",
                end_time="2025-01-31T20:00:00+00:00",
            ),
            [{"id": "opp_2"}],
            [],
        )

        roll_forward_opportunity("opp_1", "owner_1", supabase=mock_supabase)

        new_row = mock_supabase.insert.call_args[0][0]
        self.assertEqual(new_row["start_time"], "2025-02-28T18:00:00.000Z")
        self.assertEqual(new_row["end_time"], "2025-02-28T20:00:00.000Z")

    def test_overrides_applied(self):
        mock_supabase = create_mock_supabase()
        mock_supabase.execute.side_effect = mock_responses(
            _owned_row(), [{"id": "opp_2"}], []
        )

        roll_forward_opportunity(
            "opp_1",
            "owner_1",
            overrides={"title": "Park Cleanup II", "frequency": "daily"},
            supabase=mock_supabase,
        )

        new_row = mock_supabase.insert.call_args[0][0]
        self.assertEqual(new_row["title"], "Park Cleanup II")
        self.assertEqual(new_row["frequency"], "daily")
        self.assertEqual(new_row["start_time"], "2025-01-03T00:00:00.000Z")

    def test_not_found(self):
        mock_supabase = create_mock_supabase()
        mock_supabase.execute.side_effect = mock_responses(Exception("0 rows"))

        result = roll_forward_opportunity("missing", "owner_1", supabase=mock_supabase)

        self.assertEqual(result, {"success": False, "error": "Opportunity not found"})

    def test_forbidden_for_other_users(self):
        mock_supabase = create_mock_supabase()
        mock_supabase.execute.side_effect = mock_responses(_owned_row(owner="owner_2"))

        result = roll_forward_opportunity("opp_1", "owner_1", supabase=mock_supabase)

        self.assertEqual(result, {"success": False, "error": "Forbidden"})
        mock_supabase.insert.assert_not_called()

    def test_one_off_rejected(self):
        mock_supabase = create_mock_supabase()
        mock_supabase.execute.side_effect = mock_responses(_owned_row(frequency="one-off"))

        result = roll_forward_opportunity("opp_1", "owner_1", supabase=mock_supabase)

        self.assertFalse(result["success"])
        self.assertIn("daily/weekly/monthly", result["error"])
        mock_supabase.insert.assert_not_called()

    def test_insert_failure(self):
        mock_supabase = create_mock_supabase()
        mock_supabase.execute.side_effect = mock_responses(
            _owned_row(), Exception("insert violates constraint")
        )

        result = roll_forward_opportunity("opp_1", "owner_1", supabase=mock_supabase)

        self.assertFalse(result["success"])
        self.assertIn("violates", result["error"])
        mock_supabase.update.assert_not_called()

    @patch("builtins.print")
    def test_close_failure_is_warning(self, mock_print):
        """The new occurrence exists even if closing the old one fails."""
        mock_supabase = create_mock_supabase()
        mock_supabase.execute.side_effect = mock_responses(
            _owned_row(), [{"id": "opp_2"}], Exception("update failed")
        )

        result = roll_forward_opportunity("opp_1", "owner_1", supabase=mock_supabase)

        self.assertTrue(result["success"])
        self.assertEqual(result["next_opportunity"], {"id": "opp_2"})
        self.assertIn("failed to close", result["warning"])


@patch("builtins.print")
class TestRollForwardJob(unittest.TestCase):
    """Tests for roll_forward_opportunities() scheduled job."""

    NOW = datetime(2025, 1, 10, 12, 0, tzinfo=timezone.utc)

    def test_moves_ended_occurrences(self, mock_print):
        """A weekly event that ended is moved past now and its roll call reset."""
        row = create_test_opportunity(
            "opp_1", frequency="weekly", rollcall_email_sent_at="2025-01-01T23:55:00Z"
        )
        mock_supabase = create_mock_supabase()
        mock_supabase.execute.side_effect = mock_responses([row], [])

        stats = roll_forward_opportunities(now=self.NOW, supabase=mock_supabase)

        self.assertEqual(stats, {"matched": 1, "updated": 1, "failed": 0})
        mock_supabase.in_.assert_called_once_with("frequency", ["daily", "monthly", "weekly"])
        mock_supabase.lte.assert_called_once_with("end_time", "2025-01-10T12:00:00.000Z")
        mock_supabase.update.assert_called_once_with(
            {
                "start_time": "2025-01-16T00:00:00.000Z",
                "end_time": "2025-01-16T02:00:00.000Z",
                "rollcall_email_sent_at": None,
            }
        )

    def test_dry_run_writes_nothing(self, mock_print):
        row = create_test_opportunity("opp_1", frequency="daily")
        mock_supabase = create_mock_supabase([row])

        stats = roll_forward_opportunities(now=self.NOW, supabase=mock_supabase, dry_run=True)

        self.assertEqual(stats["updated"], 1)
        mock_supabase.update.assert_not_called()

    @patch("notifications.error_logger.log_job_error")
    def test_update_failure_counted(self, mock_log, mock_print):
        mock_log.return_value = "logs/roll-forward_error.txt"
        row = create_test_opportunity("opp_1", frequency="daily")
        mock_supabase = create_mock_supabase()
        mock_supabase.execute.side_effect = mock_responses([row], Exception("db down"))

        stats = roll_forward_opportunities(now=self.NOW, supabase=mock_supabase)

        self.assertEqual(stats, {"matched": 1, "updated": 0, "failed": 1})
        mock_log.assert_called_once()

    @patch("notifications.error_logger.log_job_error")
    def test_malformed_row_does_not_stop_run(self, mock_log, mock_print):
        """A row that fails validation is counted; the next row still moves."""
        mock_log.return_value = "logs/roll-forward_error.txt"
        bad_row = {"id": "opp_bad", "start_time": "garbage", "frequency": "daily"}
        good_row = create_test_opportunity("opp_1", frequency="daily")
        mock_supabase = create_mock_supabase()
        mock_supabase.execute.side_effect = mock_responses([bad_row, good_row], [])

        stats = roll_forward_opportunities(now=self.NOW, supabase=mock_supabase)

        self.assertEqual(stats, {"matched": 2, "updated": 1, "failed": 1})
        self.assertEqual(mock_log.call_args[0][2], {"opportunity_id": "opp_bad"})
        mock_supabase.update.assert_called_once()

    def test_nothing_to_roll(self, mock_print):
        mock_supabase = create_mock_supabase([])

        stats = roll_forward_opportunities(now=self.NOW, supabase=mock_supabase)

        self.assertEqual(stats, {"matched": 0, "updated": 0, "failed": 0})


if __name__ == "__main__":
    unittest.main()
