"""Reporting models for fetch cycles and maintenance passes."""

from dataclasses import asdict, dataclass, field
from typing import Any


@dataclass
class CycleSummary:
    run_id: str
    tuples_seen: int = 0
    resolved: int = 0
    unresolved: int = 0
    entries_appended: int = 0
    from_cache: bool = False
    duration_seconds: float = 0.0
    errors: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class CleanupDetail:
    key: str
    before: int
    after: int
    removed: int


@dataclass
class CleanupReport:
    dry_run: bool
    checked: int = 0
    cleaned: int = 0
    entries_removed: int = 0
    details: list[CleanupDetail] = field(default_factory=list)
    failed_keys: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        data["entriesRemoved"] = data.pop("entries_removed")
        data["dryRun"] = data.pop("dry_run")
        data["failedKeys"] = data.pop("failed_keys")
        data["perKeyDetails"] = data.pop("details")
        return data
