"""
Time-related utilities for the application.

All timestamps are generated in UTC and serialized using
ISO-8601 format with timezone information so that records
written by either ingestion path sort consistently.
"""

from datetime import datetime, timezone


def utc_now_iso() -> str:
    """Return current UTC time in ISO-8601 format.

    Example:
        2024-01-15T10:42:31.123456+00:00

    This format is safe for:
    - Sorting
    - JSON serialization
    """
    return datetime.now(timezone.utc).isoformat()


def iso_to_epoch(value: object) -> float:
    """Convert an ISO-8601 timestamp to epoch seconds.

    Missing, non-string or unparseable values map to ``0.0`` so that
    such records order as the earliest possible time.
    """
    if not isinstance(value, str) or not value:
        return 0.0

    text = value.strip()
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"

    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        return 0.0

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)

    return parsed.timestamp()
