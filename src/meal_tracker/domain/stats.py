"""Domain models for calorie statistics."""

from dataclasses import dataclass
from datetime import date


@dataclass(frozen=True)
class DailyTotal:
    """Calories logged on one calendar day."""

    day: date
    calories: int
