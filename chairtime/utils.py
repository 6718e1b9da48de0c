"""Shared time-of-day and date helpers used across the availability engine."""

import re
from datetime import date, datetime
from typing import Union

_TIME_RE = re.compile(r"^(\d{1,2}):(\d{2})(?:\s*([AaPp][Mm]))?$")

END_OF_DAY = 24 * 60


def parse_time_of_day(value: str) -> int:
    """Parse a wall-clock time into minutes since midnight.

    Accepts 24-hour ``"HH:MM"`` (``"24:00"`` allowed as end of day) and
    12-hour ``"h:MM AM"`` / ``"h:MM PM"``.

    Examples:
        >>> parse_time_of_day("09:30")
        570
        >>> parse_time_of_day("1:15 PM")
        795
        >>> parse_time_of_day("12:00 AM")
        0
    """
    match = _TIME_RE.match(value.strip())
    if not match:
        raise ValueError(f"Unrecognized time of day: {value!r}")

    hours, minutes, period = int(match.group(1)), int(match.group(2)), match.group(3)
    if minutes > 59:
        raise ValueError(f"Minutes out of range in {value!r}")

    if period:
        if not 1 <= hours <= 12:
            raise ValueError(f"Hour out of range in {value!r}")
        period = period.upper()
        if period == "PM" and hours != 12:
            hours += 12
        elif period == "AM" and hours == 12:
            hours = 0
    elif hours == 24 and minutes == 0:
        return END_OF_DAY
    elif hours > 23:
        raise ValueError(f"Hour out of range in {value!r}")

    return hours * 60 + minutes


def format_time_of_day(minutes: int, style: str = "24h") -> str:
    """Render minutes since midnight as ``"HH:MM"`` or ``"h:MM AM/PM"``.

    Examples:
        >>> format_time_of_day(570)
        '09:30'
        >>> format_time_of_day(795, "12h")
        '1:15 PM'
    """
    if not 0 <= minutes <= END_OF_DAY:
        raise ValueError(f"Minutes out of range: {minutes}")
    hours, mins = divmod(minutes, 60)
    if style == "12h":
        period = "PM" if 12 <= hours < 24 else "AM"
        hour12 = hours % 12 or 12
        return f"{hour12}:{mins:02d} {period}"
    return f"{hours:02d}:{mins:02d}"


def parse_date(value: Union[str, date]) -> date:
    """Coerce a ``YYYY-MM-DD`` string (or date) into a calendar date."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return datetime.strptime(value.strip(), "%Y-%m-%d").date()
