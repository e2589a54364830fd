"""Time helpers for review scheduling.

All ISO strings produced by this module are UTC and end with 'Z', with second precision:
YYYY-MM-DDTHH:MM:SSZ

Due comparisons are made at whole-day granularity in the study timezone.
"""

from __future__ import annotations

from datetime import date, datetime, time, timedelta, timezone, tzinfo
from typing import Literal


DueStatus = Literal["overdue", "today", "upcoming"]


def utc_now() -> datetime:
    """Return timezone-aware UTC 'now'."""
    return datetime.now(timezone.utc)


def utc_now_iso() -> str:
    """Return current time as UTC ISO string with second precision and trailing 'Z'."""
    return utc_datetime_to_iso_z(utc_now())


def utc_datetime_to_iso_z(dt: datetime) -> str:
    """Format a datetime as UTC ISO string with second precision and trailing 'Z'."""
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    else:
        dt = dt.astimezone(timezone.utc)

    dt = dt.replace(microsecond=0)
    return dt.isoformat().replace("+00:00", "Z")


def parse_iso_z(s: str) -> datetime:
    """Parse a persisted ISO-8601 timestamp into an aware UTC datetime.

    Accepts a trailing 'Z' or an explicit offset, fractional seconds (as written
    by browsers), naive timestamps (taken as UTC) and plain dates (midnight UTC).
    """
    s = s.strip()
    if s.endswith("Z"):
        s = s[:-1] + "+00:00"
    if len(s) == 10:
        return datetime.combine(date.fromisoformat(s), time.min, tzinfo=timezone.utc)
    dt = datetime.fromisoformat(s)
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def add_days(now: datetime, days: int) -> datetime:
    """Add whole calendar days, keeping the wall-clock time of `now`.

    Arithmetic on an aware datetime is wall-clock arithmetic in its own
    timezone, so a DST change between the two dates does not shift the hour.
    """
    return now + timedelta(days=days)


def add_days_iso(now: datetime, days: int) -> str:
    return utc_datetime_to_iso_z(add_days(now, days))


def local_date(dt: datetime, tz: tzinfo) -> date:
    """Return the calendar date of `dt` as seen in `tz`."""
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(tz).date()


def classify_due(next_review_at: datetime, now: datetime, tz: tzinfo = timezone.utc) -> DueStatus:
    """Classify a review date relative to today in `tz`."""
    due_day = local_date(next_review_at, tz)
    today = local_date(now, tz)
    if due_day < today:
        return "overdue"
    if due_day == today:
        return "today"
    return "upcoming"


def is_due(next_review_at: datetime, now: datetime, tz: tzinfo = timezone.utc) -> bool:
    return classify_due(next_review_at, now, tz) != "upcoming"


def parse_review_date(s: str, tz: tzinfo = timezone.utc) -> datetime:
    """Parse a user-chosen review date.

    A plain date (YYYY-MM-DD) means the start of that day in `tz`; anything
    else is parsed as a timestamp.
    """
    s = s.strip()
    if len(s) == 10:
        return datetime.combine(date.fromisoformat(s), time.min, tzinfo=tz)
    return parse_iso_z(s)
