"""Change-tracking reconciliation of forecast observations into stored history.

Each storage key owns one ``ForecastRecord``. A fetch cycle appends at most one
entry per key, and only when the observed amount or freezing level differs from
the last stored entry, so re-fetching an unchanged forecast never grows storage
and never writes.
"""

import logging
from collections.abc import Iterable
from datetime import UTC, datetime
from typing import Any

from snowtrack.config.schema import HistoryConfig
from snowtrack.history.comparator import values_differ
from snowtrack.history.retention import bound_history
from snowtrack.models.common import parse_timestamp, to_iso_timestamp
from snowtrack.models.forecast import (
    ForecastRecord,
    FreezingLevel,
    HistoryEntry,
    ResolvedSlot,
)
from snowtrack.resolve.date_resolver import keys_for_date
from snowtrack.storage.store import ForecastStore

logger = logging.getLogger(__name__)

_EPOCH = datetime.min.replace(tzinfo=UTC)


class HistoryReconciler:
    def __init__(self, store: ForecastStore, config: HistoryConfig | None = None):
        self.store = store
        self.config = config or HistoryConfig()

    def record_key(self, storage_key: str) -> str:
        return self.config.key_prefix + storage_key

    def load(self, slot: ResolvedSlot) -> ForecastRecord:
        raw = self.store.get(self.record_key(slot.storage_key))
        if raw is None:
            return ForecastRecord(
                date=slot.calendar_date,
                key=slot.storage_key,
                day_name_at_creation=slot.day_label.value,
            )
        return ForecastRecord.from_dict(raw)

    def reconcile(
        self,
        slot: ResolvedSlot,
        amount: int,
        freezing_level: FreezingLevel,
        fetched_at: datetime,
    ) -> ForecastRecord:
        """Fold one observation into the slot's record and return the record."""
        record, _ = self.apply_observation(slot, amount, freezing_level, fetched_at)
        return record

    def apply_observation(
        self,
        slot: ResolvedSlot,
        amount: int,
        freezing_level: FreezingLevel,
        fetched_at: datetime,
    ) -> tuple[ForecastRecord, bool]:
        """Fold one observation into the slot's record.

        Returns the (possibly unchanged) record and whether an entry was
        appended. The store is written only when an entry was appended.
        """
        record = self.load(slot)

        if not values_differ(record.last_entry, amount, freezing_level):
            return record, False

        record.history.append(
            HistoryEntry(
                first_seen=to_iso_timestamp(fetched_at),
                amount=amount,
                freezing_level=freezing_level,
            )
        )
        record.history = bound_history(record.history, self.config.max_entries)
        self.store.set(self.record_key(slot.storage_key), record.to_dict())

        logger.debug(
            "Appended %s=%s (freezing %s) to %s, %d entries",
            slot.day_label.value, amount, freezing_level,
            slot.storage_key, len(record.history),
        )
        return record, True

    def merge_histories_for_date(self, iso_date: str) -> tuple[HistoryEntry, ...]:
        """All entries recorded for a date under any of its keys, oldest first."""
        return merge_records(
            self.store.get(self.record_key(storage_key))
            for storage_key in keys_for_date(iso_date)
        )


def merge_records(records: Iterable[dict[str, Any] | None]) -> tuple[HistoryEntry, ...]:
    """Concatenate stored records' histories sorted by firstSeen.

    The sort is stable, so entries sharing a timestamp keep record order.
    """
    merged: list[HistoryEntry] = []
    for raw in records:
        if raw is None:
            continue
        merged.extend(ForecastRecord.from_dict(raw).history)
    merged.sort(key=_first_seen_instant)
    return tuple(merged)


def _first_seen_instant(entry: HistoryEntry) -> datetime:
    return parse_timestamp(entry.first_seen) or _EPOCH
