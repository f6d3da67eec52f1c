"""Opening hours parsing and activity status."""

from activity_now.schedule.hours import (
    closes_within,
    format_time_12hr,
    get_closing_time,
    get_opening_time,
    open_at,
    opens_within,
)
from activity_now.schedule.status import calculate_status, opening_state

__all__ = [
    "closes_within",
    "format_time_12hr",
    "get_closing_time",
    "get_opening_time",
    "open_at",
    "opens_within",
    "calculate_status",
    "opening_state",
]
