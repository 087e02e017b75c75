from __future__ import annotations

import calendar
from datetime import datetime, timezone

from .data_model import InvalidDateError

MONTH_FORMAT = "%Y-%m"


def parse_date(s: str, fmt: str) -> float:
    dt = datetime.strptime(s.strip(), fmt)
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.timestamp()


def parse_month(s: str, fmt: str = MONTH_FORMAT) -> float:
    """Parse a header cell such as ``2000-01`` to UTC unix seconds."""
    try:
        return parse_date(s or "", fmt)
    except ValueError as e:
        raise InvalidDateError(f"Invalid date header {s!r} (expected {fmt})") from e


def format_date(ts: float, fmt: str) -> str:
    dt = datetime.fromtimestamp(float(ts), tz=timezone.utc)
    return dt.strftime(fmt)


def to_datetime(ts: float) -> datetime:
    return datetime.fromtimestamp(float(ts), tz=timezone.utc)


def last_day_of_month(year: int, month: int) -> int:
    return int(calendar.monthrange(int(year), int(month))[1])


def add_months(dt: datetime, months: int) -> datetime:
    if months == 0:
        return dt
    total = (dt.year * 12) + (dt.month - 1) + int(months)
    year = total // 12
    month = (total % 12) + 1
    day = min(dt.day, last_day_of_month(year, month))
    return dt.replace(year=year, month=month, day=day)


def month_floor(dt: datetime) -> datetime:
    return dt.replace(day=1, hour=0, minute=0, second=0, microsecond=0)
