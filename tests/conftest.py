"""Shared test fixtures."""

from dataclasses import dataclass, field
from datetime import UTC

import pytest

from meal_tracker.config import Settings
from meal_tracker.containers import AppContainer
from meal_tracker.services.capture import CaptureService
from meal_tracker.services.estimator import Estimator
from meal_tracker.services.ledger import (
    DEFAULT_STORAGE_KEY,
    KeyValueStore,
    MealLedgerService,
)
from meal_tracker.services.stats import StatsService
from meal_tracker.services.tracker import MealTrackerService


@dataclass
class InMemoryStore(KeyValueStore):
    """In-memory key-value store for tests."""

    items: dict[str, str] = field(default_factory=dict)
    writes: int = 0

    def get_item(self, key: str) -> str | None:
        return self.items.get(key)

    def set_item(self, key: str, value: str) -> None:
        self.writes += 1
        self.items[key] = value


@dataclass
class FailingStore(InMemoryStore):
    """Store whose writes fail, like a full local storage quota."""

    def set_item(self, key: str, value: str) -> None:
        raise OSError("quota exceeded")


@dataclass
class FixedEstimator(Estimator):
    """Estimator returning queued calorie values in order."""

    values: list[int] = field(default_factory=lambda: [350])
    seen: list[bytes] = field(default_factory=list)

    async def estimate(self, image_bytes: bytes) -> int:
        self.seen.append(image_bytes)
        if len(self.values) > 1:
            return self.values.pop(0)
        return self.values[0]


@dataclass
class FailingEstimator(Estimator):
    """Estimator that always fails."""

    async def estimate(self, image_bytes: bytes) -> int:
        raise RuntimeError("model unavailable")


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(
        storage_path=tmp_path / "storage.json",
        timezone="UTC",
        estimator_delay_seconds=0,
        environment="test",
    )


@pytest.fixture
def store() -> InMemoryStore:
    return InMemoryStore()


@pytest.fixture
def estimator() -> FixedEstimator:
    return FixedEstimator()


@pytest.fixture
def ledger(store: InMemoryStore) -> MealLedgerService:
    return MealLedgerService(store=store, key=DEFAULT_STORAGE_KEY)


@pytest.fixture
def tracker(
    ledger: MealLedgerService, estimator: FixedEstimator
) -> MealTrackerService:
    return MealTrackerService(
        ledger=ledger,
        capture_service=CaptureService(estimator=estimator),
        stats_service=StatsService(UTC),
    )


@pytest.fixture
def container(
    settings: Settings,
    ledger: MealLedgerService,
    tracker: MealTrackerService,
) -> AppContainer:
    return AppContainer(
        settings=settings,
        ledger=ledger,
        capture_service=tracker.capture_service,
        stats_service=tracker.stats_service,
        tracker=tracker,
    )
