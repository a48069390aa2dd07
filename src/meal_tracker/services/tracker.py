"""Session state for the meal tracker widget."""

import logging
from dataclasses import dataclass, field
from datetime import date, datetime

from meal_tracker.domain.errors import (
    CaptureError,
    CaptureInProgressError,
    PersistenceError,
)
from meal_tracker.domain.meals import MealRecord, Snapshot
from meal_tracker.services.capture import CaptureService
from meal_tracker.services.ledger import MealLedgerService
from meal_tracker.services.stats import DAILY_GOAL_KCAL, StatsService, format_time

logger = logging.getLogger(__name__)

CAPTURE_FAILED_MESSAGE = "Failed to process image. Try another photo."


@dataclass(frozen=True)
class MealEntry:
    """A meal as shown in today's list."""

    id: str
    image: str
    calories: int
    time: str
    created_at: str


@dataclass(frozen=True)
class WeekBar:
    """One bar of the weekly chart."""

    day: date
    weekday: str
    calories: int
    ratio: float


@dataclass(frozen=True)
class Dashboard:
    """Everything the widget renders."""

    today: date
    today_calories: int
    goal_calories: int
    progress_percent: float
    meals: list[MealEntry]
    week: list[WeekBar]
    week_total: int
    meal_count: int
    loading: bool
    error: str | None


@dataclass(frozen=True)
class TrackerResult:
    """Outcome of a mutating tracker call."""

    meal: MealRecord | None
    persisted: bool
    warning: str | None = None


@dataclass
class MealTrackerService:
    """Holds the current snapshot and routes every change through the ledger."""

    ledger: MealLedgerService
    capture_service: CaptureService
    stats_service: StatsService
    snapshot: Snapshot = field(default=())
    loading: bool = False
    error: str | None = None

    def start(self) -> Snapshot:
        """Load the persisted ledger into the session."""
        self.snapshot = self.ledger.load()
        logger.info("Loaded meal ledger", extra={"meals": len(self.snapshot)})
        return self.snapshot

    async def log_photo(
        self, image_bytes: bytes, now: datetime | None = None
    ) -> TrackerResult:
        """Estimate a photo's calories and add it to the ledger."""
        if self.loading:
            raise CaptureInProgressError("A photo is already being analyzed.")
        self.error = None
        self.loading = True
        try:
            try:
                record = await self.capture_service.capture(image_bytes, now=now)
            except CaptureError:
                self.error = CAPTURE_FAILED_MESSAGE
                raise
            try:
                self.snapshot = self.ledger.add(record, self.snapshot)
            except PersistenceError as exc:
                self.snapshot = exc.snapshot
                self.error = str(exc)
                return TrackerResult(meal=record, persisted=False, warning=str(exc))
            return TrackerResult(meal=record, persisted=True)
        finally:
            self.loading = False

    def clear(self) -> TrackerResult:
        """Remove every logged meal."""
        if self.loading:
            raise CaptureInProgressError("Wait for the current photo to finish.")
        self.error = None
        try:
            self.snapshot = self.ledger.clear(self.snapshot)
        except PersistenceError as exc:
            self.snapshot = exc.snapshot
            self.error = str(exc)
            return TrackerResult(meal=None, persisted=False, warning=str(exc))
        return TrackerResult(meal=None, persisted=True)

    def dashboard(self, now: datetime | None = None) -> Dashboard:
        """Return today's and this week's summary for rendering."""
        snapshot = self.snapshot
        tz = self.stats_service.tz
        today, meals = self.stats_service.get_today_with_meals(snapshot, now)
        week = self.stats_service.get_week(snapshot, now)
        peak = max([entry.calories for entry in week.daily] + [1])
        return Dashboard(
            today=today.day,
            today_calories=today.calories,
            goal_calories=DAILY_GOAL_KCAL,
            progress_percent=min(100.0, today.calories / DAILY_GOAL_KCAL * 100),
            meals=[
                MealEntry(
                    id=meal.id,
                    image=meal.image,
                    calories=meal.calories,
                    time=format_time(meal, tz),
                    created_at=meal.created_at,
                )
                for meal in meals
            ],
            week=[
                WeekBar(
                    day=entry.day,
                    weekday=entry.day.strftime("%a"),
                    calories=entry.calories,
                    ratio=entry.calories / peak,
                )
                for entry in week.daily
            ],
            week_total=week.total_calories,
            meal_count=len(snapshot),
            loading=self.loading,
            error=self.error,
        )
