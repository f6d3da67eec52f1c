"""Command-line interface for activity recommendations."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import Any

from pydantic import TypeAdapter, ValidationError

from activity_now import __version__
from activity_now.config import Settings, get_settings
from activity_now.models.activity import EventActivity, EvergreenActivity, parse_activity
from activity_now.models.interaction import parse_timestamp
from activity_now.models.location import Coordinates
from activity_now.models.status import StatusResult
from activity_now.models.weather import ForecastHour, WeatherStrategy
from activity_now.providers.weatherapi import WeatherApiProvider
from activity_now.recommendations.feed import (
    FeedEntry,
    build_all_feed,
    build_now_feed,
    build_weekend_feed,
)
from activity_now.weather.strategy import select_strategy, strategy_for_location

logger = logging.getLogger(__name__)

_forecast_adapter = TypeAdapter(list[ForecastHour])


class CLIError(Exception):
    """Raised for unusable command-line input."""


def _load_json(path: str) -> Any:
    try:
        return json.loads(Path(path).read_text(encoding="utf-8"))
    except OSError as e:
        raise CLIError(f"Cannot read {path}: {e}") from e
    except json.JSONDecodeError as e:
        raise CLIError(f"Invalid JSON in {path}: {e}") from e


def load_activities(path: str) -> list[EvergreenActivity | EventActivity]:
    """Load activities from a JSON array, skipping invalid records."""
    data = _load_json(path)
    if not isinstance(data, list):
        raise CLIError(f"{path} must contain a JSON array of activities")

    activities = []
    for index, record in enumerate(data):
        if not isinstance(record, dict):
            logger.warning(f"Skipping activity #{index}: not an object")
            continue
        try:
            activities.append(parse_activity(record))
        except ValidationError as e:
            logger.warning(f"Skipping invalid activity #{index}: {e}")
    return activities


def load_forecast(path: str) -> list[ForecastHour]:
    try:
        return _forecast_adapter.validate_python(_load_json(path))
    except ValidationError as e:
        raise CLIError(f"Invalid forecast in {path}: {e}") from e


def resolve_now(value: str | None, settings: Settings) -> datetime:
    if value is None:
        return settings.now()
    now = parse_timestamp(value, settings.now())
    if now is None:
        raise CLIError(f"Invalid --at timestamp: {value}")
    return now


def resolve_home(value: str | None, settings: Settings) -> Coordinates:
    if value is None:
        return settings.home
    try:
        return Coordinates.from_string(value)
    except ValueError as e:
        raise CLIError(str(e)) from e


def resolve_strategy(
    args: argparse.Namespace, settings: Settings, home: Coordinates, now: datetime
) -> WeatherStrategy:
    """Strategy from --strategy, --forecast, or the configured provider."""
    if args.strategy:
        return WeatherStrategy(args.strategy)
    if args.forecast:
        return select_strategy(load_forecast(args.forecast), settings.ranking_policy())
    if not settings.weather_configured:
        logger.info("No weather API key configured; using normal strategy")
        return WeatherStrategy.NORMAL

    with WeatherApiProvider(
        api_key=settings.weather_api_key,
        timeout=settings.weather_timeout_seconds,
        base_url=settings.weather_base_url,
    ) as provider:
        return strategy_for_location(
            provider,
            home,
            now,
            settings.ranking_policy(),
            window_hours=settings.forecast_window_hours,
        )


def format_entry(position: int, entry: FeedEntry) -> str:
    """Render a feed entry as a single line."""
    activity = entry.activity
    parts = [f"{position}. {activity.name or activity.id} ({activity.activity_type.value})"]
    if activity.distance is None:
        parts.append("Distance unknown")
    else:
        parts.append(f"{activity.distance:.1f} mi away")
    badge = StatusResult(status=entry.status, label=entry.status_time).badge()
    if badge:
        parts.append(badge)
    return " - ".join(parts)


def _add_feed_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("activities", help="JSON file with an array of activities")
    parser.add_argument("--home", help="Home location as 'lat,lon'")
    parser.add_argument("--at", help="ISO-8601 instant to use as now")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="activity-now",
        description="Activity Now - find things to do nearby right now",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Enable debug logging"
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Now feed
    now_parser = subparsers.add_parser("now", help="Activities open now or soon")
    _add_feed_arguments(now_parser)
    now_parser.add_argument(
        "--interactions", help="JSON file of interactions keyed by activity id"
    )
    now_parser.add_argument("--forecast", help="JSON file with hourly forecast")
    now_parser.add_argument(
        "--strategy",
        choices=[s.value for s in WeatherStrategy],
        help="Weather strategy override",
    )

    # Weekend events
    weekend_parser = subparsers.add_parser("weekend", help="Events this weekend")
    _add_feed_arguments(weekend_parser)

    # Everything nearby
    all_parser = subparsers.add_parser("all", help="All activities by distance")
    _add_feed_arguments(all_parser)

    # Strategy only
    strategy_parser = subparsers.add_parser(
        "strategy", help="Classify an hourly forecast"
    )
    strategy_parser.add_argument("forecast", help="JSON file with hourly forecast")

    return parser


def run(args: argparse.Namespace, settings: Settings) -> int:
    if args.command == "strategy":
        hours = load_forecast(args.forecast)
        print(select_strategy(hours, settings.ranking_policy()).value)
        return 0

    activities = load_activities(args.activities)
    now = resolve_now(args.at, settings)
    home = resolve_home(args.home, settings)
    policy = settings.ranking_policy()

    if args.command == "now":
        strategy = resolve_strategy(args, settings, home, now)
        interactions = _load_json(args.interactions) if args.interactions else None
        if interactions is not None and not isinstance(interactions, dict):
            raise CLIError(f"{args.interactions} must contain a JSON object")
        entries = build_now_feed(
            activities, strategy, now, home=home, interactions=interactions, policy=policy
        )
        print(f"Weather: {strategy.value}")
    elif args.command == "weekend":
        entries = build_weekend_feed(activities, now, home=home, policy=policy)
    else:
        entries = build_all_feed(activities, now, home=home, policy=policy)

    if not entries:
        print("Nothing to show.")
    for position, entry in enumerate(entries, start=1):
        print(format_entry(position, entry))
    return 0


def main(argv: list[str] | None = None) -> int:
    """Main entry point for the CLI."""
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.command is None:
        parser.print_help()
        return 0

    try:
        return run(args, get_settings())
    except CLIError as e:
        print(f"error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
