"""Key-value store interface for forecast records."""

from typing import Any, Protocol


class StoreError(Exception):
    """A backend failed to read or write a key."""


class ForecastStore(Protocol):
    def get(self, key: str) -> dict[str, Any] | None: ...

    def set(self, key: str, record: dict[str, Any]) -> None: ...

    def get_all_by_prefix(self, prefix: str) -> dict[str, Any]: ...
