# Rev 0.2.0
from __future__ import annotations
from datetime import date, datetime, timezone
from typing import Callable, Optional, Union

Clock = Callable[[], datetime]

WhenLike = Union[str, date, datetime, None]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def to_iso(dt: datetime) -> str:
    return dt.astimezone(timezone.utc).isoformat(timespec="seconds")


def parse_when(value: WhenLike) -> Optional[datetime]:
    """
    Parse a stored date/timestamp into an aware UTC datetime.
    Date-only values mean midnight UTC; naive timestamps are taken as UTC.
    Returns None for empty or unparseable input.
    """
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        dt = value
    elif isinstance(value, date):
        dt = datetime(value.year, value.month, value.day)
    else:
        s = str(value).strip()
        if s.endswith("Z"):
            s = s[:-1] + "+00:00"
        try:
            dt = datetime.fromisoformat(s)
        except ValueError:
            return None
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def format_date(value: WhenLike, fmt: str = "%b %d, %Y") -> str:
    """Display helper: 'Mar 07, 2025', 'No date' or 'Invalid date'."""
    if value is None or value == "":
        return "No date"
    dt = parse_when(value)
    if dt is None:
        return "Invalid date"
    return dt.strftime(fmt)


def format_datetime(value: WhenLike) -> str:
    return format_date(value, "%b %d, %Y %H:%M")
