"""Forecast inputs and the weather strategy they map to."""

from __future__ import annotations

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, Field


class WeatherStrategy(str, Enum):
    """How outdoor activities are treated for the next few hours."""

    NORMAL = "normal"  # No weather adjustment
    DEPRIORITIZE_OUTDOOR = "deprioritize_outdoor"  # Outdoor activities rank lower
    HIDE_OUTDOOR = "hide_outdoor"  # Outdoor activities are removed from "Now"


class ForecastHour(BaseModel):
    """One hour of a short-range forecast."""

    time: datetime = Field(..., description="Forecast time (start of hour)")
    precipitation_probability: float = Field(
        default=0.0, ge=0, le=100, description="Chance of rain, percent"
    )
    condition: str | None = Field(default=None, description="Provider condition text")
