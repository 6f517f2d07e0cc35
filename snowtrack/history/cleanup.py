"""Repair pass for records holding several entries with the same timestamp.

Older resolver builds could map two slots of one fetch (e.g. this Saturday and
next Saturday) onto the same key, writing both observations under a single
``firstSeen``. The first entry per timestamp is the near-term observation and
is the one kept. This never runs during normal reconciliation.
"""

import json
import logging
from typing import Any

from snowtrack.models.reporting import CleanupDetail, CleanupReport
from snowtrack.storage.store import ForecastStore, StoreError

logger = logging.getLogger(__name__)


def dedupe_history(history: list[dict[str, Any]]) -> tuple[list[dict[str, Any]], int]:
    """Keep the first entry for each distinct firstSeen, in original order.

    Returns the surviving entries and how many were dropped.
    """
    seen: set[str] = set()
    kept: list[dict[str, Any]] = []
    for entry in history:
        # stored records are arbitrary JSON, so compare serialized stamps
        marker = json.dumps(entry.get("firstSeen"), sort_keys=True, default=str)
        if marker in seen:
            continue
        seen.add(marker)
        kept.append(entry)
    return kept, len(history) - len(kept)


def cleanup_duplicate_timestamps(
    store: ForecastStore, key_prefix: str, apply: bool = False
) -> CleanupReport:
    """Scan every record under ``key_prefix`` and drop same-timestamp repeats.

    With ``apply=False`` nothing is written; the report shows what would change.
    """
    report = CleanupReport(dry_run=not apply)

    for key, record in sorted(store.get_all_by_prefix(key_prefix).items()):
        if not isinstance(record, dict) or not record.get("history"):
            continue
        report.checked += 1

        history = record["history"]
        kept, removed = dedupe_history(history)
        if removed == 0:
            continue

        if apply:
            try:
                store.set(key, {**record, "history": kept})
            except StoreError:
                logger.exception("Failed to rewrite %s, leaving it unchanged", key)
                report.failed_keys.append(key)
                continue

        report.cleaned += 1
        report.entries_removed += removed
        report.details.append(
            CleanupDetail(key=key, before=len(history), after=len(kept), removed=removed)
        )

    logger.info(
        "Duplicate cleanup (%s): checked=%d cleaned=%d removed=%d",
        "dry run" if report.dry_run else "applied",
        report.checked, report.cleaned, report.entries_removed,
    )
    return report
