"""Display status for an activity at a given instant."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, Field


class ActivityStatus(str, Enum):
    """Status badge shown next to an activity."""

    OPEN = "open"
    CLOSING_SOON = "closing_soon"
    OPENS_SOON = "opens_soon"
    NONE = "none"


class StatusResult(BaseModel):
    """Status plus the time label that goes with it ("6:00 PM", "dusk")."""

    status: ActivityStatus = Field(default=ActivityStatus.NONE)
    label: str | None = Field(default=None, description="Time label for the badge")

    def badge(self) -> str | None:
        """Short human-readable badge text, or None when there is nothing to show."""
        if self.status == ActivityStatus.OPEN:
            return f"Open until {self.label}"
        if self.status == ActivityStatus.CLOSING_SOON:
            return "Closing soon"
        if self.status == ActivityStatus.OPENS_SOON:
            return f"Opens at {self.label}"
        return None


NO_STATUS = StatusResult()
