from __future__ import annotations

import re
from datetime import date, datetime, timedelta
from typing import Optional, Union

from ..core.enums import Weekday

_DATE_FORMATS = (
    "%Y-%m-%d",
    "%d-%m-%Y",
    "%m/%d/%Y",
    "%d/%m/%Y",
    "%d %b %Y",
    "%b %d, %Y",
)

_CLOCK_FORMATS = (
    "%H:%M",
    "%H:%M:%S",
    "%I:%M %p",
    "%I:%M:%S %p",
    "%I %p",
)

_RELATIVE_WEEKDAY = re.compile(r"^(last|next)\s+(monday|tuesday|wednesday|thursday|friday|saturday|sunday)$")


def now_local() -> datetime:
    """Current local time.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now()


def to_day(value: Union[date, datetime]) -> date:
    """Drop any time-of-day component."""
    if isinstance(value, datetime):
        return value.date()
    return value


def weekday_of(day: Union[date, datetime]) -> Weekday:
    return list(Weekday)[to_day(day).weekday()]


def parse_weekday(value: str) -> Optional[Weekday]:
    """Match 'monday', 'Mon', 'MONDAY' ... to a Weekday."""
    key = (value or "").strip().lower()
    if len(key) < 3:
        return None
    for wd in Weekday:
        if wd.value.lower().startswith(key):
            return wd
    return None


def parse_date_text(value: str, *, today: Optional[date] = None) -> Optional[date]:
    """Parse absolute or relative date text. Returns None if nothing matches."""
    if not value:
        return None

    text = value.strip()
    for fmt in _DATE_FORMATS:
        try:
            return datetime.strptime(text, fmt).date()
        except ValueError:
            continue

    # ISO timestamps ("2024-03-04T10:00:00", "...Z") keep only their calendar day.
    try:
        return datetime.fromisoformat(text.replace("Z", "+00:00")).date()
    except ValueError:
        pass

    today = today or now_local().date()
    lower = text.lower()

    if lower in ("today", "now"):
        return today
    if lower == "yesterday":
        return today - timedelta(days=1)
    if lower == "tomorrow":
        return today + timedelta(days=1)

    m = _RELATIVE_WEEKDAY.match(lower)
    if m:
        direction, day_name = m.groups()
        target = parse_weekday(day_name)
        offset = list(Weekday).index(target) - today.weekday()
        if direction == "last":
            if offset >= 0:
                offset -= 7
        elif offset <= 0:
            offset += 7
        return today + timedelta(days=offset)

    return None


def parse_clock_time(value: str) -> Optional[str]:
    """Normalize '9:00', '09:00:00', '9:00 AM', '2 pm', '10:00:00 AM' ... to 'HH:MM'.

    Returns None if the text is not a time of day.
    """
    text = re.sub(r"\s+", " ", (value or "").strip().upper().replace(".", ":"))
    text = re.sub(r"(\d)(AM|PM)$", r"\1 \2", text)
    for fmt in _CLOCK_FORMATS:
        try:
            return datetime.strptime(text, fmt).strftime("%H:%M")
        except ValueError:
            continue
    return None
