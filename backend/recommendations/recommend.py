"""
CLI script for printing a volunteer's recommended opportunities.

Usage:
    uv run python -m recommendations.recommend --user-id <uuid>

    # Recommendations as of a specific time, top 5
    uv run python -m recommendations.recommend --user-id <uuid> --now 2025-10-12T18:00:00Z --limit 5
"""

import argparse
import json
import sys

from notifications.error_logger import log_job_error
from shared.windows import InvalidInstantError
from recommendations.scorer import DEFAULT_RECOMMENDATION_LIMIT
from recommendations.service import (
    PreferencesNotFoundError,
    RecommendationError,
    get_recommendations,
)


def main(argv: list[str] | None = None) -> int:
    """CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Show recommended opportunities for a volunteer"
    )
    parser.add_argument("--user-id", required=True, help="Volunteer user ID")
    parser.add_argument(
        "--now",
        type=str,
        help="Reference time as ISO-8601 (defaults to the current UTC time)",
    )
    parser.add_argument(
        "--limit",
        type=int,
        default=DEFAULT_RECOMMENDATION_LIMIT,
        help="Maximum number of recommendations",
    )

    args = parser.parse_args(argv)

    try:
        result = get_recommendations(args.user_id, now=args.now, limit=args.limit)
    except (InvalidInstantError, PreferencesNotFoundError) as e:
        print(f"✗ {e}", file=sys.stderr)
        return 1
    except RecommendationError as e:
        error_file = log_job_error(
            "recommendations", str(e), {"user_id": args.user_id}
        )
        print(f"✗ {e}. Details logged to: {error_file}", file=sys.stderr)
        return 1

    print(json.dumps(result, indent=2))
    return 0


if __name__ == "__main__":
    sys.exit(main())
