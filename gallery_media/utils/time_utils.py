# gallery_media/utils/time_utils.py
"""
Time helpers.

All persisted timestamps are timezone-aware UTC.
"""

from datetime import datetime, timezone

# Constant for UTC timezone to avoid hardcoded timezone.utc references
UTC_TIMEZONE = timezone.utc


def utc_now() -> datetime:
    """
    Get current UTC timestamp.

    Returns:
        Current timezone-aware UTC datetime object
    """
    return datetime.now(UTC_TIMEZONE)


def utc_timestamp_ms() -> int:
    """Milliseconds since the epoch, used as the time component of storage keys."""
    return int(utc_now().timestamp() * 1000)
