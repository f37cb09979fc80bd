"""Time utilities (calendar-day bucketing and cooldown arithmetic)."""

from datetime import date, datetime, timezone, tzinfo
from zoneinfo import ZoneInfo


def resolve_timezone(name: str) -> tzinfo:
    """Return the tzinfo for an IANA zone name."""
    return ZoneInfo(name)


def to_local(dt: datetime, tz: tzinfo, naive_assumed_tz: tzinfo = timezone.utc) -> datetime:
    """Convert datetime to the given zone. Naive values are read as UTC."""
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=naive_assumed_tz)
    return dt.astimezone(tz)


def to_local_date(dt: datetime, tz: tzinfo) -> date:
    """Calendar date of a timestamp in the given zone."""
    return to_local(dt, tz).date()


def now_utc() -> datetime:
    return datetime.now(timezone.utc)


def days_between(earlier: datetime, later: datetime) -> int:
    """
    Whole days elapsed from `earlier` to `later`.

    Mixed naive/aware inputs are compared with naive values read as UTC.
    """
    if (earlier.tzinfo is None) != (later.tzinfo is None):
        earlier = to_local(earlier, timezone.utc)
        later = to_local(later, timezone.utc)
    return (later - earlier).days
