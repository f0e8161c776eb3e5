"""Timezone helpers.

All timestamps are handled as timezone-aware UTC datetimes. SQLite drops
tzinfo on the way back, so values read from the database go through
``ensure_utc`` again.
"""

from datetime import datetime, timezone
from typing import Optional


def ensure_utc(dt: Optional[datetime]) -> Optional[datetime]:
    """
    Return ``dt`` as an aware UTC datetime.

    Naive datetimes are assumed to already be in UTC.

    Args:
        dt: Datetime to normalize, or None

    Returns:
        Optional[datetime]: The normalized datetime, or None if dt was None
    """
    if dt is None:
        return None
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def now_utc() -> datetime:
    """Current time as an aware UTC datetime."""
    return datetime.now(timezone.utc)
