"""Shared test fixtures."""

import copy
from pathlib import Path
from typing import Any

import pytest
import yaml

from snowtrack.config.defaults import DEFAULT_RESORT
from snowtrack.config.schema import AppConfig, HistoryConfig
from snowtrack.history.reconciler import HistoryReconciler
from snowtrack.history.tracker import ForecastTracker
from snowtrack.resolve.clock import resort_local_date_fn
from snowtrack.resolve.date_resolver import DateResolver
from snowtrack.storage.store import StoreError

RESORT_TZ = "America/Vancouver"


class MemoryStore:
    """In-memory ForecastStore that counts writes and can fail on chosen keys."""

    def __init__(self, data: dict[str, Any] | None = None):
        self.data: dict[str, Any] = data or {}
        self.writes: list[str] = []
        self.fail_keys: set[str] = set()

    def get(self, key: str) -> dict[str, Any] | None:
        if key in self.fail_keys:
            raise StoreError(f"get {key} unavailable")
        return copy.deepcopy(self.data.get(key))

    def set(self, key: str, record: dict[str, Any]) -> None:
        if key in self.fail_keys:
            raise StoreError(f"set {key} unavailable")
        self.writes.append(key)
        self.data[key] = copy.deepcopy(record)

    def get_all_by_prefix(self, prefix: str) -> dict[str, Any]:
        return {
            k: copy.deepcopy(v) for k, v in self.data.items() if k.startswith(prefix)
        }


@pytest.fixture
def store() -> MemoryStore:
    return MemoryStore()


@pytest.fixture
def resolver() -> DateResolver:
    return DateResolver(resort_local_date_fn(RESORT_TZ))


@pytest.fixture
def reconciler(store: MemoryStore) -> HistoryReconciler:
    return HistoryReconciler(store, HistoryConfig())


@pytest.fixture
def tracker(resolver: DateResolver, reconciler: HistoryReconciler) -> ForecastTracker:
    return ForecastTracker(resolver, reconciler)


@pytest.fixture
def default_config(tmp_path: Path) -> AppConfig:
    """Default AppConfig with storage pointed into tmp_path."""
    return AppConfig(
        resort=DEFAULT_RESORT,
        storage={
            "json_path": str(tmp_path / "forecast-history.json"),
            "sqlite_path": str(tmp_path / "snowtrack.db"),
        },
    )


@pytest.fixture
def config_yaml_path(tmp_path: Path) -> Path:
    """Write a minimal valid config YAML and return its path."""
    data = {
        "history": {"max_entries": 20},
        "storage": {
            "backend": "local-json",
            "json_path": str(tmp_path / "forecast-history.json"),
        },
        "fetch": {"cache_ttl_seconds": 0},
    }
    path = tmp_path / "test_config.yaml"
    with open(path, "w") as f:
        yaml.dump(data, f)
    return path


@pytest.fixture
def fixtures_dir() -> Path:
    """Return the path to the test fixtures directory."""
    return Path(__file__).parent / "fixtures"


@pytest.fixture
def snow_report_html(fixtures_dir: Path) -> str:
    return (fixtures_dir / "snow_report_10day.html").read_text()
