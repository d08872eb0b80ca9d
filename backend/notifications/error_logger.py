"""
Error logging utility for scheduled jobs.

Logs job failures to timestamped files for debugging.
"""

import os
from datetime import datetime, timezone
from typing import Any

LOG_DIR = os.path.join(os.path.dirname(__file__), "logs")


def log_job_error(
    job: str, error_message: str, context: dict[str, Any] | None = None
) -> str:
    """
    Log a job error to a timestamped file.

    Args:
        job: Job or stage that failed (e.g., 'reminder-emails', 'recommendations')
        error_message: The error message
        context: Optional dictionary with additional context (opportunity_id, org_id, etc.)

    Returns:
        Path to the log file created
    """
    os.makedirs(LOG_DIR, exist_ok=True)

    now = datetime.now(timezone.utc)
    timestamp = now.strftime("%Y%m%d_%H%M%S_%f")
    filename = os.path.join(LOG_DIR, f"{job}_error_{timestamp}.txt")

    with open(filename, "w", encoding="utf-8") as f:
        f.write(f"Job Error Report - {now.isoformat()}\n")
        f.write("=" * 60 + "\n\n")
        f.write(f"Job: {job}\n")
        f.write(f"Error Message: {error_message}\n\n")

        if context:
            f.write("Context:\n")
            f.write("-" * 60 + "\n")
            for key, value in context.items():
                f.write(f"{key}: {value}\n")

    return filename


def record_failure(
    job: str,
    stats: dict[str, int],
    error_message: str,
    context: dict[str, Any] | None = None,
) -> None:
    """Count a per-item failure in ``stats`` and log it to file."""
    stats["failed"] += 1
    error_file = log_job_error(job, error_message, context)
    print(f"  ✗ {error_message}")
    print(f"    Error details logged to: {error_file}")
