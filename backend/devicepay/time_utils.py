from __future__ import annotations

from datetime import date, datetime, timedelta, timezone
from typing import Optional
from zoneinfo import ZoneInfo


EPOCH = datetime(1970, 1, 1)


def utcnow() -> datetime:
    """Server-side 'now' in UTC (naive, canonical), truncated to milliseconds."""
    now = datetime.now(timezone.utc).replace(tzinfo=None)
    return now.replace(microsecond=(now.microsecond // 1000) * 1000)


def parse_iso_datetime(value: Optional[str]) -> Optional[datetime]:
    """
    Parse an ISO-8601 datetime string and normalize to UTC-naive datetime.

    - None / "" -> None
    - "YYYY-MM-DDTHH:MM" (naive) is interpreted as UTC
    - "...Z" or "...+/-HH:MM" is converted to UTC and tzinfo is stripped
    """
    if value is None:
        return None
    s = value.strip()
    if not s:
        return None

    # Accept trailing Z
    if s.endswith("Z"):
        s = s[:-1] + "+00:00"

    dt = datetime.fromisoformat(s)

    # Normalize to UTC-naive
    if dt.tzinfo is None:
        # interpret naive as UTC
        return dt.replace(tzinfo=None)

    return dt.astimezone(timezone.utc).replace(tzinfo=None)


def from_epoch_ms(value: float) -> datetime:
    """Epoch milliseconds (as stored by browser clients) -> UTC-naive datetime."""
    return EPOCH + timedelta(milliseconds=int(value))


def to_utc_z(dt: Optional[datetime]) -> Optional[str]:
    """
    Serializes datetime to ISO-8601 with millisecond precision and trailing 'Z'.
    If dt is naive, it is treated as UTC.
    """
    if dt is None:
        return None
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    dt_utc = dt.astimezone(timezone.utc)
    return dt_utc.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def format_calendar_date(dt: datetime, tz_name: str = "UTC") -> str:
    """Render the calendar date of a UTC-naive datetime as M/D/YYYY in tz_name."""
    local = dt.replace(tzinfo=timezone.utc).astimezone(ZoneInfo(tz_name))
    return f"{local.month}/{local.day}/{local.year}"


def today_iso(tz_name: str = "UTC") -> str:
    return datetime.now(ZoneInfo(tz_name)).date().isoformat()


def parse_calendar_date(value: Optional[str]) -> Optional[date]:
    """'YYYY-MM-DD' -> date; None / "" -> None. Raises ValueError on bad input."""
    if value is None:
        return None
    s = value.strip()
    if not s:
        return None
    return date.fromisoformat(s)
