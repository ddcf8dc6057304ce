from datetime import datetime, timedelta, timezone
from typing import Optional


def utc_now() -> datetime:
    """Return a timezone-aware UTC datetime."""
    return datetime.now(timezone.utc)


def as_utc(value: datetime) -> datetime:
    """Attach UTC to naive datetimes read back from SQLite."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def days_before(days: float, now: Optional[datetime] = None) -> datetime:
    """Return the instant ``days`` days before ``now`` (defaults to utc_now())."""
    return (now or utc_now()) - timedelta(days=days)
