"""Hours string parsing.

Resolves a single day's hours string into opening and closing instants on the
calendar date of a reference instant. Supported forms:

- ``"closed"`` (any case): never open
- ``"dawn - dusk"``: fixed window from 7:00 AM to 7:00 PM
- ``"10:00 AM - 6:00 PM"``: explicit 12-hour clock range

Every function here is total: blank, closed or unparseable input yields
``False``/``None`` instead of raising. Ranges that cross midnight are not
supported; a closing time earlier than the opening time never counts as open.
"""

from __future__ import annotations

import re
from datetime import datetime, time, timedelta

DAWN_TIME = time(7, 0)
DUSK_TIME = time(19, 0)

_CLOCK = r"\d{1,2}:\d{2}\s*(?:AM|PM)"
OPENING_PATTERN = re.compile(rf"^\s*({_CLOCK})", re.IGNORECASE)
CLOSING_PATTERN = re.compile(rf"[-–]\s*({_CLOCK})", re.IGNORECASE)
CLOCK_PATTERN = re.compile(
    r"^(?P<hour>\d{1,2}):(?P<minute>\d{2})\s*(?P<meridiem>AM|PM)$", re.IGNORECASE
)


def is_closed(hours: str | None) -> bool:
    """True for blank or explicitly closed hours."""
    return hours is None or not hours.strip() or hours.strip().lower() == "closed"


def is_dawn_to_dusk(hours: str | None) -> bool:
    if is_closed(hours):
        return False
    lowered = hours.lower()
    return "dawn" in lowered and "dusk" in lowered


def parse_clock_time(value: str) -> time | None:
    """Parse "10:00 AM" / "2:30pm" into a time, or None if malformed."""
    match = CLOCK_PATTERN.match(value.strip())
    if not match:
        return None
    hour = int(match.group("hour"))
    minute = int(match.group("minute"))
    if not 1 <= hour <= 12 or minute > 59:
        return None
    hour %= 12
    if match.group("meridiem").upper() == "PM":
        hour += 12
    return time(hour, minute)


def _on_date_of(reference: datetime, clock: time) -> datetime:
    return reference.replace(
        hour=clock.hour, minute=clock.minute, second=0, microsecond=0
    )


def get_opening_time(hours: str | None, reference: datetime) -> datetime | None:
    """Opening instant on ``reference``'s date, or None."""
    if is_closed(hours):
        return None
    if "dawn" in hours.lower():
        return _on_date_of(reference, DAWN_TIME)

    match = OPENING_PATTERN.match(hours)
    if not match:
        return None
    clock = parse_clock_time(match.group(1))
    return _on_date_of(reference, clock) if clock else None


def get_closing_time(hours: str | None, reference: datetime) -> datetime | None:
    """Closing instant on ``reference``'s date, or None."""
    if is_closed(hours):
        return None
    if "dusk" in hours.lower():
        return _on_date_of(reference, DUSK_TIME)

    match = CLOSING_PATTERN.search(hours)
    if not match:
        return None
    clock = parse_clock_time(match.group(1))
    return _on_date_of(reference, clock) if clock else None


def open_at(hours: str | None, instant: datetime) -> bool:
    """True iff opening <= instant < closing for the instant's date."""
    if is_closed(hours):
        return False

    if is_dawn_to_dusk(hours):
        opening = _on_date_of(instant, DAWN_TIME)
        closing = _on_date_of(instant, DUSK_TIME)
    else:
        opening = get_opening_time(hours, instant)
        closing = get_closing_time(hours, instant)
        if opening is None or closing is None:
            return False

    return opening <= instant < closing


def _within(target: datetime | None, now: datetime, window: timedelta) -> bool:
    return target is not None and now < target <= now + window


def opens_within(hours: str | None, now: datetime, window_hours: float) -> str | None:
    """Formatted opening time if it falls in (now, now + window_hours]."""
    opening = get_opening_time(hours, now)
    if _within(opening, now, timedelta(hours=window_hours)):
        return format_time_12hr(opening)
    return None


def closes_within(hours: str | None, now: datetime, window_hours: float) -> str | None:
    """Formatted closing time if it falls in (now, now + window_hours]."""
    closing = get_closing_time(hours, now)
    if _within(closing, now, timedelta(hours=window_hours)):
        return format_time_12hr(closing)
    return None


def format_time_12hr(value: datetime | time) -> str:
    """Format as "2:00 PM" (no leading zero on the hour)."""
    hour = value.hour % 12 or 12
    meridiem = "AM" if value.hour < 12 else "PM"
    return f"{hour}:{value.minute:02d} {meridiem}"
