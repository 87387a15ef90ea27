"""Date range helpers shared by the dashboard and admin reports.

All datetimes are naive UTC, matching what the models store.
"""

from datetime import date, datetime, time, timedelta, timezone
from typing import Optional, Tuple

from jobtrack.core.exceptions import ValidationFailedError


def start_of_day(moment: datetime) -> datetime:
    return datetime.combine(moment.date(), time.min)


def start_of_week(moment: datetime) -> datetime:
    """Weeks start on Sunday."""
    days_since_sunday = (moment.weekday() + 1) % 7
    return start_of_day(moment) - timedelta(days=days_since_sunday)


def start_of_month(moment: datetime) -> datetime:
    return datetime(moment.year, moment.month, 1)


def add_months(moment: datetime, months: int) -> datetime:
    """First day of the month `months` away from moment's month."""
    index = moment.year * 12 + (moment.month - 1) + months
    return datetime(index // 12, index % 12 + 1, 1)


def period_start(period: str, now: datetime) -> datetime:
    """Start of the dashboard period: day, week or month (default)."""
    if period == "day":
        return start_of_day(now)
    if period == "week":
        return start_of_week(now)
    return start_of_month(now)


def parse_date(value: Optional[str]) -> Optional[date]:
    if not value:
        return None
    try:
        return date.fromisoformat(value[:10])
    except ValueError:
        raise ValidationFailedError("Invalid date format")


def content_filter_range(
    date_filter: Optional[str],
    now: datetime,
    start_date: Optional[str] = None,
    end_date: Optional[str] = None,
) -> Tuple[Optional[datetime], Optional[datetime]]:
    """Inclusive range used by the system stats content counters.

    week is a rolling seven days; custom runs through the last millisecond of end_date.
    """
    if date_filter == "today":
        return start_of_day(now), None
    if date_filter == "week":
        return now - timedelta(days=7), None
    if date_filter == "month":
        return start_of_month(now), None
    if date_filter == "custom":
        start = parse_date(start_date)
        end = parse_date(end_date)
        if start and end:
            return (
                datetime.combine(start, time.min),
                datetime.combine(end, time(23, 59, 59, 999000)),
            )
    return None, None


def calendar_range(
    date_filter: Optional[str],
    now: datetime,
    start_date: Optional[str] = None,
    end_date: Optional[str] = None,
) -> Tuple[Optional[datetime], Optional[datetime]]:
    """Half-open [start, end) range used by the top users ranking."""
    if date_filter == "today":
        start = start_of_day(now)
        return start, start + timedelta(days=1)
    if date_filter == "week":
        start = start_of_week(now)
        return start, start + timedelta(days=7)
    if date_filter == "month":
        start = start_of_month(now)
        return start, add_months(start, 1)
    if date_filter == "custom":
        start = parse_date(start_date)
        end = parse_date(end_date)
        if start and end:
            return datetime.combine(start, time.min), datetime.combine(end, time.min) + timedelta(days=1)
    return None, None


def in_range(
    value: Optional[datetime],
    start: Optional[datetime],
    end: Optional[datetime],
    inclusive_end: bool = False,
) -> bool:
    """True when value is inside the range; an open range accepts everything."""
    if start is None and end is None:
        return True
    if value is None:
        return False
    if start is not None and value < start:
        return False
    if end is not None:
        return value <= end if inclusive_end else value < end
    return True


def to_naive_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Convert an aware datetime to naive UTC; naive values are assumed UTC already."""
    if value is None or value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)
