"""Calorie aggregation over ledger snapshots."""

from collections.abc import Iterator
from dataclasses import dataclass
from datetime import date, datetime, timedelta, tzinfo

from meal_tracker.domain.meals import MealRecord, Snapshot
from meal_tracker.domain.stats import DailyTotal

DAILY_GOAL_KCAL = 2000
WEEK_DAYS = 7


@dataclass(frozen=True)
class WeeklySeries:
    """Seven consecutive daily totals ending at ``end_day``, oldest first.

    Totals are computed while iterating and recomputed on every pass, so the
    series always reflects the snapshot it was built from.
    """

    snapshot: Snapshot
    end_day: date
    tz: tzinfo | None

    def __iter__(self) -> Iterator[DailyTotal]:
        start = self.end_day - timedelta(days=WEEK_DAYS - 1)
        for offset in range(WEEK_DAYS):
            day = start + timedelta(days=offset)
            calories = daily_total(self.snapshot, day, self.tz)
            yield DailyTotal(day=day, calories=calories)

    def __len__(self) -> int:
        return WEEK_DAYS


@dataclass(frozen=True)
class PeriodSummary:
    """Totals for a run of days."""

    daily: list[DailyTotal]
    total_calories: int
    avg_calories: float


def local_time(record: MealRecord, tz: tzinfo | None) -> datetime | None:
    """Return when the record was logged in ``tz`` (host local when None).

    None for timestamps that cannot be parsed or fall outside the
    representable range once converted.
    """
    logged_at = record.logged_at
    if logged_at is None:
        return None
    try:
        return logged_at.astimezone(tz)
    except (OverflowError, ValueError):
        return None


def local_day(record: MealRecord, tz: tzinfo | None) -> date | None:
    """Return the record's calendar day in ``tz``, or None if unusable."""
    logged_at = local_time(record, tz)
    if logged_at is None:
        return None
    return logged_at.date()


def daily_total(snapshot: Snapshot, day: date, tz: tzinfo | None) -> int:
    """Sum calories of the records logged on ``day``."""
    return sum(record.calories for record in meals_on(snapshot, day, tz))


def meals_on(snapshot: Snapshot, day: date, tz: tzinfo | None) -> list[MealRecord]:
    """Return the records logged on ``day`` in snapshot order."""
    return [record for record in snapshot if local_day(record, tz) == day]


def weekly_series(
    snapshot: Snapshot, end_day: date, tz: tzinfo | None
) -> WeeklySeries:
    """Return the 7-day series ending at ``end_day``."""
    return WeeklySeries(snapshot=snapshot, end_day=end_day, tz=tz)


def format_time(record: MealRecord, tz: tzinfo | None) -> str:
    """Return the local time of day a meal was logged."""
    logged_at = local_time(record, tz)
    if logged_at is None:
        return ""
    return logged_at.strftime("%H:%M")


@dataclass
class StatsService:
    """Service for today's and this week's totals in one timezone."""

    tz: tzinfo | None

    def today(self, now: datetime | None = None) -> date:
        """Return the current calendar day in the configured timezone."""
        current = now or datetime.now(tz=self.tz)
        return current.astimezone(self.tz).date()

    def get_today(
        self, snapshot: Snapshot, now: datetime | None = None
    ) -> DailyTotal:
        """Return today's total."""
        day = self.today(now)
        return DailyTotal(day=day, calories=daily_total(snapshot, day, self.tz))

    def get_today_with_meals(
        self, snapshot: Snapshot, now: datetime | None = None
    ) -> tuple[DailyTotal, list[MealRecord]]:
        """Return today's total and today's meals."""
        day = self.today(now)
        meals = meals_on(snapshot, day, self.tz)
        total = DailyTotal(day=day, calories=sum(meal.calories for meal in meals))
        return total, meals

    def get_week(
        self, snapshot: Snapshot, now: datetime | None = None
    ) -> PeriodSummary:
        """Return the rolling 7 days ending today."""
        daily = list(weekly_series(snapshot, self.today(now), self.tz))
        total = sum(entry.calories for entry in daily)
        return PeriodSummary(
            daily=daily,
            total_calories=total,
            avg_calories=total / max(len(daily), 1),
        )
