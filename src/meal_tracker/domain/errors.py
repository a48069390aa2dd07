"""Error taxonomy for the meal tracker."""

from meal_tracker.domain.meals import Snapshot


class MealTrackerError(Exception):
    """Base error for meal tracker failures."""


class CaptureError(MealTrackerError):
    """Reading or estimating a meal photo failed; no ledger change happened."""


class LoadError(MealTrackerError):
    """Persisted ledger data is absent or malformed."""


class PersistenceError(MealTrackerError):
    """Writing the ledger failed.

    The snapshot the operation produced is attached so callers can keep
    using it for the rest of the session even though it was not saved.
    """

    def __init__(self, message: str, snapshot: Snapshot) -> None:
        super().__init__(message)
        self.snapshot = snapshot


class CaptureInProgressError(CaptureError):
    """Another photo is still being analyzed."""
