from datetime import UTC, datetime, timedelta
from typing import Optional


def utc_now() -> datetime:
    # Naive UTC: SQLite drops tzinfo on round-trip
    return datetime.now(UTC).replace(tzinfo=None)


def days(count: Optional[int]) -> Optional[int]:
    """TTL in seconds for a number of days; None means never expire"""
    if count is None:
        return None
    return int(timedelta(days=count).total_seconds())
