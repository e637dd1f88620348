from __future__ import annotations

from datetime import date, datetime, time, timedelta, timezone
from zoneinfo import ZoneInfo

from ..core.constants import DEFAULT_REPORT_TIMEZONE
from ..core.exceptions import ComputationError


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    return datetime.strptime(value, "%Y-%m-%d").date()


def parse_timestamp(value) -> datetime:
    """Coerce a DB timestamp (datetime or ISO string) into a datetime.

    Raises ComputationError instead of guessing: a malformed timestamp is a
    data defect that must surface.
    """

    if isinstance(value, datetime):
        return value
    if isinstance(value, str):
        raw = value.strip()
        if raw.endswith("Z"):
            raw = raw[:-1] + "+00:00"
        try:
            return datetime.fromisoformat(raw)
        except ValueError:
            raise ComputationError(f"Invalid timestamp: {value!r}")
    raise ComputationError(f"Unsupported timestamp value: {value!r}")


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def to_utc(value: datetime) -> datetime:
    """Aware UTC datetime; naive values are taken to be UTC already."""

    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def to_local(value: datetime, tz_name: str = DEFAULT_REPORT_TIMEZONE) -> datetime:
    """Convert a timestamp to the report timezone.

    Naive datetimes are treated as UTC (that is how the shifts table stores them).
    """

    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(ZoneInfo(tz_name))


def local_date(value: datetime, tz_name: str = DEFAULT_REPORT_TIMEZONE) -> date:
    """Business date of a timestamp in the report timezone."""
    return to_local(value, tz_name).date()


def local_day_start_utc(day: date, tz_name: str = DEFAULT_REPORT_TIMEZONE) -> datetime:
    """UTC instant of local midnight for ``day``; used for half-open DB bounds."""

    local_midnight = datetime.combine(day, time.min, tzinfo=ZoneInfo(tz_name))
    return local_midnight.astimezone(timezone.utc)


def next_day(day: date) -> date:
    return day + timedelta(days=1)
