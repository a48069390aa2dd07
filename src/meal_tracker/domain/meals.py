"""Domain models for logged meals."""

from dataclasses import dataclass
from datetime import UTC, datetime


@dataclass(frozen=True)
class MealRecord:
    """A single logged meal photo with its calorie estimate."""

    id: str
    image: str
    calories: int
    created_at: str

    @property
    def logged_at(self) -> datetime | None:
        """Return the parsed creation timestamp, or None when unparsable."""
        return parse_timestamp(self.created_at)


Snapshot = tuple[MealRecord, ...]


def parse_timestamp(value: str) -> datetime | None:
    """Parse an ISO-8601 timestamp; naive values are read as UTC."""
    try:
        parsed = datetime.fromisoformat(value)
    except (TypeError, ValueError):
        return None
    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=UTC)
    return parsed


def format_timestamp(value: datetime) -> str:
    """Format an aware datetime the way records persist it."""
    utc_value = value.astimezone(UTC)
    return utc_value.isoformat(timespec="milliseconds").replace("+00:00", "Z")
