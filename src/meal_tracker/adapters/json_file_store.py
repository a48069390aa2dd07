"""Local JSON file implementation of the key-value store."""

import json
import os
import tempfile
from dataclasses import dataclass
from pathlib import Path

from meal_tracker.services.ledger import KeyValueStore


@dataclass
class JsonFileStore(KeyValueStore):
    """Key-value store kept in a single JSON object on disk."""

    path: Path

    def get_item(self, key: str) -> str | None:
        """Return the value stored under a key."""
        entries = self._read_entries()
        value = entries.get(key)
        if value is None:
            return None
        if not isinstance(value, str):
            raise ValueError(f"Stored value for {key!r} is not a string")
        return value

    def set_item(self, key: str, value: str) -> None:
        """Store a value, replacing the file only once the new one is written."""
        try:
            entries = self._read_entries()
        except ValueError:
            entries = {}
        entries[key] = value
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(
            prefix=f".{self.path.name}.", suffix=".tmp", dir=self.path.parent
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                json.dump(entries, handle, ensure_ascii=False)
                handle.flush()
                os.fsync(handle.fileno())
            os.replace(tmp_name, self.path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise

    def _read_entries(self) -> dict[str, object]:
        if not self.path.exists():
            return {}
        data = json.loads(self.path.read_text(encoding="utf-8"))
        if not isinstance(data, dict):
            raise ValueError(f"{self.path} does not contain a JSON object")
        return data
