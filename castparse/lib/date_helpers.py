"""
Helper functions for date parsing and canonical date/time formatting.
"""

import re
from datetime import datetime, timedelta, timezone
from typing import Literal

Precision = Literal["minute", "second", "millisecond"]
PRECISIONS = ("minute", "second", "millisecond")

# Day granularity is required; a time part needs at least hours and minutes
DATE_PATTERN = re.compile(
    r"^(\d{4})-(\d{1,2})-(\d{1,2})"
    r"(?:[T ](\d{1,2}):(\d{1,2})(?::(\d{1,2})(?:\.(\d+))?)?"
    r"\s*(Z|[+-]\d{2}:?\d{2})?)?$",
    re.IGNORECASE,
)
TIME_PATTERN = re.compile(r"(\d{1,2}):(\d{1,2})(?::(\d{1,2})(?:\.(\d+))?)?")


def d2(number: int) -> str:
    """Pad a number to two digits with a leading "0"."""
    return f"{number:02d}"


def d3(number: int) -> str:
    """Pad a number to three digits with leading "0"s."""
    return f"{number:03d}"


def parse_date_string(text: str) -> datetime | None:
    """Parse an ISO-like date string, returning None when it is malformed."""
    match = DATE_PATTERN.match(text.strip())
    if not match:
        return None
    year, month, day, hour, minute, second, fraction, offset = match.groups()
    try:
        return datetime(
            int(year),
            int(month),
            int(day),
            int(hour or 0),
            int(minute or 0),
            int(second or 0),
            fraction_to_microsecond(fraction),
            tzinfo=_parse_offset(offset),
        )
    except ValueError:
        return None


def fraction_to_microsecond(fraction: str | None) -> int:
    if not fraction:
        return 0
    return int(fraction[:6].ljust(6, "0"))


def _parse_offset(offset: str | None) -> timezone | None:
    if not offset:
        return None
    if offset.upper() == "Z":
        return timezone.utc
    sign = -1 if offset[0] == "-" else 1
    digits = offset[1:].replace(":", "")
    delta = timedelta(hours=int(digits[:2]), minutes=int(digits[2:]))
    return timezone(sign * delta)


def from_epoch_millis(millis: float) -> datetime | None:
    try:
        return datetime.fromtimestamp(millis / 1000)
    except (OverflowError, OSError, ValueError):
        return None


def to_date_string(value: datetime) -> str:
    """Format as "yyyy-mm-dd"."""
    return f"{value.year:04d}-{d2(value.month)}-{d2(value.day)}"


def format_time(
    hour: int, minute: int, second: int, millisecond: int, precision: Precision
) -> str:
    text = f"{d2(hour)}:{d2(minute)}"
    if precision == "minute":
        return text
    text += f":{d2(second)}"
    if precision == "second":
        return text
    return text + "." + d3(millisecond)


def to_time_string(value: datetime, precision: Precision = "minute") -> str:
    """Format as "hh:mm", "hh:mm:ss" or "hh:mm:ss.mmm"."""
    return format_time(
        value.hour, value.minute, value.second, value.microsecond // 1000, precision
    )


def to_timestamp_string(value: datetime, precision: Precision = "second") -> str:
    """Format as "yyyy-mm-dd hh:mm:ss" (time part trimmed to precision)."""
    return to_date_string(value) + " " + to_time_string(value, precision)
