from datetime import datetime, timezone
from typing import Optional


def utc_now() -> datetime:
    """Timezone-aware current UTC time, used for every stored timestamp."""
    return datetime.now(timezone.utc)


def as_utc(value: datetime) -> datetime:
    """
    Normalize a client-supplied datetime to UTC.

    Naive values are taken to already be in UTC.
    """
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def epoch_millis(value: Optional[datetime] = None) -> int:
    """Milliseconds since the epoch for ``value`` (defaults to now)."""
    return int((value or utc_now()).timestamp() * 1000)
