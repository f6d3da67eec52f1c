"""Weather-driven strategy selection."""

from activity_now.weather.strategy import (
    count_rainy_hours,
    select_strategy,
    strategy_for_location,
)

__all__ = [
    "count_rainy_hours",
    "select_strategy",
    "strategy_for_location",
]
