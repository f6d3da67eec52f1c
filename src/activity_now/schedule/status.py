"""Open / closing-soon / opens-soon status for an activity at an instant."""

from __future__ import annotations

from datetime import datetime

from activity_now.models.activity import EventActivity, EvergreenActivity
from activity_now.models.interaction import parse_timestamp
from activity_now.models.ranking import DEFAULT_POLICY, RankingPolicy
from activity_now.models.status import NO_STATUS, ActivityStatus, StatusResult
from activity_now.schedule import hours as hours_parser


def calculate_status(
    activity: EvergreenActivity | EventActivity,
    now: datetime,
    policy: RankingPolicy = DEFAULT_POLICY,
) -> StatusResult:
    """Compute the display status of an activity at ``now``.

    Args:
        activity: Evergreen or event activity
        now: Instant to evaluate; its date is "today" for hours lookups
        policy: Supplies the closing-soon and opens-soon windows

    Returns:
        StatusResult; ``ActivityStatus.NONE`` when nothing applies
    """
    match activity:
        case EventActivity():
            return _event_status(activity, now, policy)
        case EvergreenActivity():
            return _evergreen_status(activity, now, policy)
        case _:
            return NO_STATUS


def _event_window(event: EventActivity, now: datetime) -> tuple[datetime, datetime]:
    """Event bounds expressed in ``now``'s timezone so they compare safely."""
    start = parse_timestamp(event.start_date, now)
    end = parse_timestamp(event.end_date, now)
    if now.tzinfo is not None:
        start, end = start.astimezone(now.tzinfo), end.astimezone(now.tzinfo)
    return start, end


def _event_status(
    event: EventActivity, now: datetime, policy: RankingPolicy
) -> StatusResult:
    start, end = _event_window(event, now)
    end_label = hours_parser.format_time_12hr(end)

    if start <= now <= end:
        if now < end <= now + policy.closing_soon_window:
            return StatusResult(status=ActivityStatus.CLOSING_SOON, label=end_label)
        return StatusResult(status=ActivityStatus.OPEN, label=end_label)

    if now < start <= now + policy.event_opens_soon_window:
        return StatusResult(
            status=ActivityStatus.OPENS_SOON,
            label=hours_parser.format_time_12hr(start),
        )

    return NO_STATUS


def _evergreen_status(
    activity: EvergreenActivity, now: datetime, policy: RankingPolicy
) -> StatusResult:
    hours = activity.hours_on(now)

    if hours_parser.open_at(hours, now):
        lowered = hours.lower()
        closing_soon = hours_parser.closes_within(hours, now, policy.closing_soon_hours)
        if closing_soon:
            label = "dusk" if "dusk" in lowered else closing_soon
            return StatusResult(status=ActivityStatus.CLOSING_SOON, label=label)

        if hours_parser.is_dawn_to_dusk(hours):
            label = "dusk"
        else:
            closing = hours_parser.get_closing_time(hours, now)
            label = hours_parser.format_time_12hr(closing) if closing else None
        return StatusResult(status=ActivityStatus.OPEN, label=label)

    opening_soon = hours_parser.opens_within(hours, now, policy.opens_soon_hours)
    if opening_soon:
        label = "dawn" if "dawn" in hours.lower() else opening_soon
        return StatusResult(status=ActivityStatus.OPENS_SOON, label=label)

    return NO_STATUS


def opening_state(
    activity: EvergreenActivity | EventActivity,
    now: datetime,
    policy: RankingPolicy = DEFAULT_POLICY,
) -> str:
    """Classify as "open", "opens_soon" or "closed" for filtering.

    Evergreen activities use today's hours. Events are open inside
    [start_date, end_date] and open soon when the start is within the
    event opens-soon window.
    """
    match activity:
        case EventActivity():
            start, end = _event_window(activity, now)
            if start <= now <= end:
                return "open"
            if now < start <= now + policy.event_opens_soon_window:
                return "opens_soon"
            return "closed"
        case EvergreenActivity():
            hours = activity.hours_on(now)
            if hours_parser.open_at(hours, now):
                return "open"
            if hours_parser.opens_within(hours, now, policy.opens_soon_hours):
                return "opens_soon"
            return "closed"
        case _:
            return "closed"
