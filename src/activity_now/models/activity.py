"""Activity models.

An activity is either an *evergreen* location with a weekly hours schedule or
a dated *event* with a start and end instant. The two shapes are modelled as a
tagged variant discriminated by ``kind``, so code that needs to tell them apart
matches on the concrete class instead of branching on a flag.
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Annotated, Any, Literal, Self

from pydantic import BaseModel, Field, TypeAdapter, field_validator, model_validator

from activity_now.models.location import Coordinates


DAY_NAMES = (
    "monday",
    "tuesday",
    "wednesday",
    "thursday",
    "friday",
    "saturday",
    "sunday",
)


class ActivityType(str, Enum):
    """Closed set of activity categories."""

    PLAYGROUND = "playground"
    LIBRARY = "library"
    MUSEUM = "museum"
    PARK = "park"
    SPLASH_PAD = "splash_pad"
    INDOOR_PLAY = "indoor_play"
    FARM = "farm"
    NATURE_TRAIL = "nature_trail"
    CLASS_ACTIVITY = "class"
    EVENT = "event"
    RESTAURANT = "restaurant"


class ActivityBase(BaseModel):
    """Fields shared by evergreen and event activities."""

    # Identity
    id: str = Field(..., description="Unique activity identifier")
    name: str = Field(default="", description="Human-readable activity name")

    # Classification
    activity_type: ActivityType = Field(..., description="Activity category")
    indoor: bool = Field(default=False, description="Whether the activity is indoors")
    cost_level: int = Field(default=0, ge=0, le=3, description="Relative cost, 0 = free")

    # Location
    latitude: float | None = Field(default=None, ge=-90, le=90)
    longitude: float | None = Field(default=None, ge=-180, le=180)

    # Display only, attached by the caller
    distance: float | None = Field(
        default=None, ge=0, description="Miles from the user's home location"
    )

    @field_validator("id", mode="before")
    @classmethod
    def coerce_id(cls, v: Any) -> Any:
        """Interaction maps are keyed by string ids; accept integer ids too."""
        if isinstance(v, int) and not isinstance(v, bool):
            return str(v)
        return v

    @property
    def is_event(self) -> bool:
        return False

    @property
    def coordinates(self) -> Coordinates | None:
        """Coordinates of the activity, or None when not geocoded."""
        if self.latitude is None or self.longitude is None:
            return None
        return Coordinates(latitude=self.latitude, longitude=self.longitude)

    def with_distance(self, miles: float | None) -> Self:
        """Return a copy carrying the given display distance."""
        return self.model_copy(update={"distance": miles})


class EvergreenActivity(ActivityBase):
    """A location with a fixed weekly schedule (park, library, museum...)."""

    kind: Literal["evergreen"] = "evergreen"
    hours: dict[str, str] = Field(
        default_factory=dict,
        description="Weekday name -> hours string ('closed', '10:00 AM - 6:00 PM', 'dawn - dusk')",
    )

    @field_validator("hours", mode="before")
    @classmethod
    def normalize_day_names(cls, v: Any) -> Any:
        if isinstance(v, dict):
            return {str(day).strip().lower(): hours for day, hours in v.items()}
        return v

    def hours_on(self, instant: datetime) -> str | None:
        """Hours string for the weekday of ``instant``."""
        return self.hours.get(DAY_NAMES[instant.weekday()])


class EventActivity(ActivityBase):
    """A dated event with a start and end instant."""

    kind: Literal["event"] = "event"
    start_date: datetime = Field(..., description="When the event starts")
    end_date: datetime = Field(..., description="When the event ends")

    @model_validator(mode="after")
    def validate_dates(self) -> Self:
        """Ensure the event does not end before it starts."""
        if (self.start_date.tzinfo is None) != (self.end_date.tzinfo is None):
            raise ValueError("start_date and end_date must both carry a UTC offset or neither")
        if self.end_date < self.start_date:
            raise ValueError("end_date must be on or after start_date")
        return self

    @property
    def is_event(self) -> bool:
        return True


Activity = Annotated[EvergreenActivity | EventActivity, Field(discriminator="kind")]

_activity_adapter: TypeAdapter[EvergreenActivity | EventActivity] = TypeAdapter(Activity)


def parse_activity(data: dict[str, Any]) -> EvergreenActivity | EventActivity:
    """Build an activity from a plain mapping.

    The mapping may carry the ``kind`` tag directly or the legacy ``is_event``
    flag used by stored records.

    Raises:
        pydantic.ValidationError: If the record is invalid
    """
    if "kind" not in data:
        data = {**data, "kind": "event" if data.get("is_event") else "evergreen"}
    return _activity_adapter.validate_python(data)
