"""
Timezone-aware datetime utilities.
"""

from datetime import datetime, timedelta, timezone

# UTC timezone constant
UTC = timezone.utc


def now_utc() -> datetime:
    """
    Get current UTC datetime (timezone-aware).

    Replaces datetime.utcnow() which is deprecated in Python 3.12+.
    """
    return datetime.now(UTC)


def minutes_ago(minutes: int, now: datetime | None = None) -> datetime:
    """Return the UTC instant `minutes` before now."""
    return (now or now_utc()) - timedelta(minutes=minutes)


def as_utc(value: datetime) -> datetime:
    """Attach UTC to naive values read back from SQLite; convert aware ones."""
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)
