"""Meal ledger persisted as a single serialized collection."""

import logging
from collections.abc import Callable
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Protocol
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError

from meal_tracker.domain.errors import LoadError, PersistenceError
from meal_tracker.domain.meals import MealRecord, Snapshot, format_timestamp

DEFAULT_STORAGE_KEY = "ai-meal-tracker-meals"

logger = logging.getLogger(__name__)


class KeyValueStore(Protocol):
    """Local string key-value storage."""

    def get_item(self, key: str) -> str | None:
        """Return the stored value for a key, if any."""

    def set_item(self, key: str, value: str) -> None:
        """Replace the stored value for a key."""


class StoredMeal(BaseModel):
    """Persisted shape of a meal record."""

    model_config = ConfigDict(strict=True, populate_by_name=True, extra="ignore")

    id: str
    image: str
    calories: int
    created_at: str = Field(alias="createdAt")


_SNAPSHOT_ADAPTER = TypeAdapter(list[StoredMeal])


@dataclass
class MealLedgerService:
    """Owns the canonical meal sequence and keeps storage in step with it."""

    store: KeyValueStore
    key: str = DEFAULT_STORAGE_KEY

    def load(self) -> Snapshot:
        """Return the persisted snapshot, or an empty one if unavailable."""
        try:
            return self._read()
        except LoadError as exc:
            logger.warning("Starting with an empty ledger: %s", exc)
            return ()

    def add(self, record: MealRecord, current: Snapshot) -> Snapshot:
        """Prepend a record and persist the whole new sequence."""
        updated = (record, *current)
        self._write(updated)
        return updated

    def clear(self, current: Snapshot) -> Snapshot:
        """Drop every record and persist the empty sequence."""
        logger.info("Clearing ledger", extra={"discarded": len(current)})
        updated: Snapshot = ()
        self._write(updated)
        return updated

    def _read(self) -> Snapshot:
        try:
            raw = self.store.get_item(self.key)
        except (OSError, ValueError) as exc:
            raise LoadError(f"storage unreadable: {exc}") from exc
        if raw is None:
            raise LoadError("no stored ledger")
        try:
            rows = _SNAPSHOT_ADAPTER.validate_json(raw)
        except ValidationError as exc:
            raise LoadError(
                f"malformed ledger data ({exc.error_count()} errors)"
            ) from exc
        return tuple(_to_record(row) for row in rows)

    def _write(self, snapshot: Snapshot) -> None:
        payload = serialize_snapshot(snapshot)
        try:
            self.store.set_item(self.key, payload)
        except OSError as exc:
            logger.exception("Failed to persist ledger", extra={"key": self.key})
            raise PersistenceError(
                "Couldn't save your meals; changes will be lost when you leave.",
                snapshot=snapshot,
            ) from exc


def serialize_snapshot(snapshot: Snapshot) -> str:
    """Serialize a snapshot to its persisted JSON form."""
    rows = [
        StoredMeal(
            id=record.id,
            image=record.image,
            calories=record.calories,
            created_at=record.created_at,
        )
        for record in snapshot
    ]
    return _SNAPSHOT_ADAPTER.dump_json(rows, by_alias=True).decode("utf-8")


def new_meal(
    image: str,
    calories: int,
    now: datetime | None = None,
    id_factory: Callable[[], object] = uuid4,
) -> MealRecord:
    """Create a meal record stamped with the current time."""
    created_at = now or datetime.now(tz=UTC)
    return MealRecord(
        id=str(id_factory()),
        image=image,
        calories=calories,
        created_at=format_timestamp(created_at),
    )


def _to_record(row: StoredMeal) -> MealRecord:
    return MealRecord(
        id=row.id,
        image=row.image,
        calories=row.calories,
        created_at=row.created_at,
    )
