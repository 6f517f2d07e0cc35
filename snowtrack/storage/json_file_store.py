"""Single JSON file store for local development."""

import json
from pathlib import Path
from typing import Any

from snowtrack.storage.store import StoreError


class JsonFileStore:
    def __init__(self, path: str | Path):
        self.path = Path(path)

    def get(self, key: str) -> dict[str, Any] | None:
        return self._read_all().get(key)

    def set(self, key: str, record: dict[str, Any]) -> None:
        data = self._read_all()
        data[key] = record
        try:
            tmp = self.path.with_suffix(self.path.suffix + ".tmp")
            tmp.write_text(json.dumps(data, indent=2))
            tmp.replace(self.path)
        except OSError as e:
            raise StoreError(f"Failed to write {key} to {self.path}: {e}") from e

    def get_all_by_prefix(self, prefix: str) -> dict[str, Any]:
        return {k: v for k, v in self._read_all().items() if k.startswith(prefix)}

    def _ensure_file(self) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            if not self.path.exists():
                self.path.write_text("{}")
        except OSError as e:
            raise StoreError(f"Cannot create {self.path}: {e}") from e

    def _read_all(self) -> dict[str, Any]:
        # Never read as empty: set() rewrites the whole file.
        self._ensure_file()
        try:
            data = json.loads(self.path.read_text())
        except (OSError, json.JSONDecodeError) as e:
            raise StoreError(f"Unreadable store file {self.path}: {e}") from e
        if not isinstance(data, dict):
            raise StoreError(f"Store file {self.path} does not hold a JSON object")
        return data
