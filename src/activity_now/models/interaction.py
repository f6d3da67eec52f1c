"""Per-user interaction records (ratings and completions)."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from datetime import datetime
from typing import Any, Literal, Self

from pydantic import BaseModel, ConfigDict, Field, ValidationError

logger = logging.getLogger(__name__)


def parse_timestamp(value: Any, reference: datetime | None = None) -> datetime | None:
    """Parse an ISO-8601 timestamp, returning None when it cannot be read.

    Naive timestamps are interpreted in the timezone of ``reference`` so they
    can be compared against it.
    """
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, str) and value.strip():
        try:
            parsed = datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
        except ValueError:
            return None
    else:
        return None

    if reference is not None:
        if parsed.tzinfo is None and reference.tzinfo is not None:
            parsed = parsed.replace(tzinfo=reference.tzinfo)
        elif parsed.tzinfo is not None and reference.tzinfo is None:
            parsed = parsed.replace(tzinfo=None)
    return parsed


class Interaction(BaseModel):
    """A user's history with a single activity.

    Created on the first rating or completion. Completions are append-only;
    the ``with_*`` helpers return new values rather than mutating.
    """

    model_config = ConfigDict(populate_by_name=True)

    rating: Literal[-1, 0, 1] | None = Field(
        default=None, description="Thumbs down (-1), neutral (0) or thumbs up (1)"
    )
    completions: list[str] = Field(
        default_factory=list, description="ISO-8601 completion timestamps, any order"
    )
    last_completed: str | None = Field(
        default=None,
        alias="lastCompleted",
        description="ISO-8601 timestamp of the most recent completion",
    )

    def last_completed_at(self, reference: datetime | None = None) -> datetime | None:
        """Most recent completion instant, or None if unknown.

        Uses ``lastCompleted`` when it parses, otherwise the latest parseable
        entry in ``completions``.
        """
        last = parse_timestamp(self.last_completed, reference)
        if last is not None:
            return last
        parsed = [
            ts
            for ts in (parse_timestamp(c, reference) for c in self.completions)
            if ts is not None
        ]
        if not parsed:
            return None
        try:
            return max(parsed)
        except TypeError:
            # Mixed naive/aware values with no reference to reconcile them
            return None

    @property
    def rating_sign(self) -> int:
        if not self.rating:
            return 0
        return 1 if self.rating > 0 else -1

    def with_rating(self, rating: Literal[-1, 0, 1]) -> Self:
        """Return a copy with the rating replaced."""
        return self.model_copy(update={"rating": rating})

    def with_completion(self, at: datetime) -> Self:
        """Return a copy with one more completion recorded at ``at``."""
        stamp = at.isoformat()
        return self.model_copy(
            update={"completions": [*self.completions, stamp], "last_completed": stamp}
        )


def parse_interactions(raw: Mapping[str, Any] | None) -> dict[str, Interaction]:
    """Build an interaction map from JSON-like data keyed by activity id.

    Entries that do not validate are skipped with a warning so that one bad
    record never blocks ranking.
    """
    interactions: dict[str, Interaction] = {}
    if not raw:
        return interactions

    for activity_id, data in raw.items():
        if isinstance(data, Interaction):
            interactions[str(activity_id)] = data
            continue
        if not isinstance(data, Mapping):
            logger.warning(f"Skipping interaction for activity {activity_id}: not an object")
            continue
        try:
            interactions[str(activity_id)] = Interaction.model_validate(dict(data))
        except ValidationError as e:
            logger.warning(f"Skipping invalid interaction for activity {activity_id}: {e}")
    return interactions
