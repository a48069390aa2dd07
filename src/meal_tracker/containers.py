"""Dependency container wiring for the application."""

from dataclasses import dataclass

from meal_tracker.adapters.json_file_store import JsonFileStore
from meal_tracker.config import Settings, resolve_timezone
from meal_tracker.services.capture import CaptureService
from meal_tracker.services.estimator import RandomEstimator
from meal_tracker.services.ledger import MealLedgerService
from meal_tracker.services.stats import StatsService
from meal_tracker.services.tracker import MealTrackerService


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    ledger: MealLedgerService
    capture_service: CaptureService
    stats_service: StatsService
    tracker: MealTrackerService


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    ledger = MealLedgerService(
        store=JsonFileStore(resolved_settings.storage_path),
        key=resolved_settings.storage_key,
    )
    capture_service = CaptureService(
        estimator=RandomEstimator(
            delay_seconds=resolved_settings.estimator_delay_seconds
        ),
        timeout_seconds=resolved_settings.estimate_timeout_seconds,
    )
    stats_service = StatsService(resolve_timezone(resolved_settings.timezone))
    tracker = MealTrackerService(
        ledger=ledger,
        capture_service=capture_service,
        stats_service=stats_service,
    )
    return AppContainer(
        settings=resolved_settings,
        ledger=ledger,
        capture_service=capture_service,
        stats_service=stats_service,
        tracker=tracker,
    )
