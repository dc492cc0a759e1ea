"""Time utilities."""

from datetime import date, datetime, time, timezone


def utc_now() -> datetime:
    """Return a timezone-aware UTC timestamp."""
    return datetime.now(timezone.utc)


def utc_today() -> date:
    """Return the current UTC calendar date."""
    return utc_now().date()


def day_stamp(moment: datetime) -> str:
    """Format a timestamp as YYYYMMDD."""
    return moment.strftime("%Y%m%d")


def start_of_day(day: date) -> datetime:
    """First instant of a UTC day."""
    return datetime.combine(day, time.min, tzinfo=timezone.utc)


def end_of_day(day: date) -> datetime:
    """Last instant of a UTC day."""
    return datetime.combine(day, time.max, tzinfo=timezone.utc)
