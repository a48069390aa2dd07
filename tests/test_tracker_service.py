"""Tests for the tracker session."""

import asyncio
from datetime import UTC, date, datetime

import pytest

from meal_tracker.domain.errors import CaptureError, CaptureInProgressError
from meal_tracker.domain.meals import MealRecord
from meal_tracker.services.capture import CaptureService
from meal_tracker.services.ledger import DEFAULT_STORAGE_KEY, MealLedgerService
from meal_tracker.services.stats import StatsService
from meal_tracker.services.tracker import CAPTURE_FAILED_MESSAGE, MealTrackerService
from tests.conftest import (
    FailingEstimator,
    FailingStore,
    FixedEstimator,
    InMemoryStore,
)

NOW = datetime(2024, 1, 10, 12, 0, tzinfo=UTC)


def _tracker(store, estimator) -> MealTrackerService:
    return MealTrackerService(
        ledger=MealLedgerService(store),
        capture_service=CaptureService(estimator=estimator),
        stats_service=StatsService(UTC),
    )


def test_log_photo_adds_meal_and_persists(
    tracker: MealTrackerService, store: InMemoryStore
) -> None:
    tracker.start()

    result = asyncio.run(tracker.log_photo(b"image", now=NOW))

    assert result.persisted
    assert result.meal is not None
    assert tracker.snapshot == (result.meal,)
    assert tracker.ledger.load() == tracker.snapshot
    assert store.writes == 1
    assert tracker.loading is False


def test_three_meals_show_newest_first() -> None:
    tracker = _tracker(InMemoryStore(), FixedEstimator(values=[100, 200, 300]))
    tracker.start()
    for hour in (8, 13, 19):
        asyncio.run(tracker.log_photo(b"image", now=NOW.replace(hour=hour)))

    dashboard = tracker.dashboard(now=NOW.replace(hour=22))

    assert dashboard.today_calories == 600
    assert dashboard.meal_count == 3
    assert [meal.calories for meal in dashboard.meals] == [300, 200, 100]
    assert [meal.time for meal in dashboard.meals] == ["19:00", "13:00", "08:00"]


def test_capture_failure_leaves_ledger_untouched() -> None:
    store = InMemoryStore()
    tracker = _tracker(store, FailingEstimator())
    tracker.start()

    with pytest.raises(CaptureError):
        asyncio.run(tracker.log_photo(b"image", now=NOW))

    assert tracker.snapshot == ()
    assert store.writes == 0
    assert tracker.error == CAPTURE_FAILED_MESSAGE
    assert tracker.loading is False


def test_pending_capture_blocks_new_work(tracker: MealTrackerService) -> None:
    tracker.loading = True

    with pytest.raises(CaptureInProgressError):
        asyncio.run(tracker.log_photo(b"image", now=NOW))
    with pytest.raises(CaptureInProgressError):
        tracker.clear()


def test_persistence_failure_keeps_session_snapshot() -> None:
    tracker = _tracker(FailingStore(), FixedEstimator(values=[410]))
    tracker.start()

    result = asyncio.run(tracker.log_photo(b"image", now=NOW))

    assert not result.persisted
    assert result.warning
    assert [meal.calories for meal in tracker.snapshot] == [410]
    assert tracker.error == result.warning
    assert tracker.dashboard(now=NOW).today_calories == 410


def test_clear_then_reload_is_empty(tracker: MealTrackerService) -> None:
    tracker.start()
    asyncio.run(tracker.log_photo(b"image", now=NOW))

    result = tracker.clear()

    assert result.persisted
    assert tracker.snapshot == ()
    assert tracker.ledger.load() == ()


def test_start_recovers_from_malformed_storage() -> None:
    store = InMemoryStore(items={DEFAULT_STORAGE_KEY: "%%%"})
    tracker = _tracker(store, FixedEstimator())

    assert tracker.start() == ()


def test_dashboard_week_and_progress() -> None:
    tracker = _tracker(InMemoryStore(), FixedEstimator(values=[1500, 800]))
    tracker.start()
    asyncio.run(tracker.log_photo(b"image", now=NOW.replace(day=8)))
    asyncio.run(tracker.log_photo(b"image", now=NOW))

    dashboard = tracker.dashboard(now=NOW)

    assert dashboard.today == date(2024, 1, 10)
    assert dashboard.goal_calories == 2000
    assert dashboard.progress_percent == 40.0
    assert len(dashboard.week) == 7
    assert dashboard.week_total == 2300
    assert dashboard.week[-1].weekday == "Wed"
    assert dashboard.week[-3].ratio == 1.0
    assert dashboard.week[0].ratio == 0.0
    assert dashboard.error is None


def test_progress_is_capped_at_goal() -> None:
    tracker = _tracker(InMemoryStore(), FixedEstimator(values=[2600]))
    tracker.start()
    asyncio.run(tracker.log_photo(b"image", now=NOW))

    assert tracker.dashboard(now=NOW).progress_percent == 100.0


def test_clear_persistence_failure_still_empties_session() -> None:
    store = FailingStore()
    tracker = _tracker(store, FixedEstimator(values=[380]))
    tracker.start()
    asyncio.run(tracker.log_photo(b"image", now=NOW))

    result = tracker.clear()

    assert tracker.snapshot == ()
    assert result.persisted is False
    assert result.warning
    assert tracker.error == result.warning
    assert store.items == {}


def test_dashboard_survives_out_of_range_timestamp() -> None:
    tracker = _tracker(InMemoryStore(), FixedEstimator(values=[300]))
    tracker.snapshot = (
        MealRecord(
            id="edge",
            image="data:image/jpeg;base64,ZmFrZQ==",
            calories=900,
            created_at="9999-12-31T23:00:00-05:00",
        ),
    )

    dashboard = tracker.dashboard(now=NOW)

    assert dashboard.today_calories == 0
    assert dashboard.week_total == 0
    assert dashboard.meal_count == 1
