"""End-to-end forecast tracking: resolve, reconcile and merge per tuple."""

import logging
from collections.abc import Sequence
from datetime import datetime

from snowtrack.history.cleanup import cleanup_duplicate_timestamps
from snowtrack.history.reconciler import HistoryReconciler
from snowtrack.models.forecast import ForecastTuple, HistoryEntry, TrackedForecast
from snowtrack.models.reporting import CleanupReport
from snowtrack.reporting.cycle_summarizer import CycleSummarizer
from snowtrack.resolve.date_resolver import DateResolver, OccurrenceCounter

logger = logging.getLogger(__name__)


class ForecastTracker:
    def __init__(self, resolver: DateResolver, reconciler: HistoryReconciler):
        self.resolver = resolver
        self.reconciler = reconciler

    def track_forecast_history(
        self,
        tuples: Sequence[ForecastTuple],
        fetched_at: datetime,
        summarizer: CycleSummarizer | None = None,
    ) -> list[TrackedForecast]:
        """Track one fetch's tuples. Results align 1:1 with the input.

        Tuples with unknown labels pass through untouched. A storage failure
        on one tuple is logged and leaves that tuple without history; the
        rest of the fetch carries on.
        """
        if fetched_at.tzinfo is None:
            raise ValueError(f"fetched_at must be timezone-aware: {fetched_at!r}")

        counter = OccurrenceCounter()
        results: list[TrackedForecast] = []

        for forecast in tuples:
            if summarizer:
                summarizer.record_tuple()

            occurrence = counter.next(forecast.day_label)
            slot = None
            if occurrence is not None:
                slot = self.resolver.resolve(forecast.day_label, fetched_at, occurrence)
            if slot is None:
                if summarizer:
                    summarizer.record_unresolved(forecast.day_label)
                results.append(TrackedForecast(forecast=forecast))
                continue

            try:
                _, appended = self.reconciler.apply_observation(
                    slot, forecast.amount, forecast.freezing_level, fetched_at
                )
                history = self.reconciler.merge_histories_for_date(slot.calendar_date)
            except Exception as e:
                logger.exception(
                    "Failed to reconcile %s (%s) at %s",
                    forecast.day_label, slot.storage_key, fetched_at.isoformat(),
                )
                if summarizer:
                    summarizer.record_error(f"{slot.storage_key}: {e}")
                results.append(
                    TrackedForecast(forecast=forecast, actual_date=slot.calendar_date)
                )
                continue

            if summarizer:
                summarizer.record_resolved(appended)
            results.append(
                TrackedForecast(
                    forecast=forecast,
                    actual_date=slot.calendar_date,
                    history=history,
                )
            )

        return results

    def get_merged_history_for_date(self, iso_date: str) -> tuple[HistoryEntry, ...]:
        return self.reconciler.merge_histories_for_date(iso_date)

    def cleanup_duplicate_timestamps(
        self, key_prefix: str | None = None, apply: bool = False
    ) -> CleanupReport:
        prefix = self.reconciler.config.key_prefix if key_prefix is None else key_prefix
        return cleanup_duplicate_timestamps(self.reconciler.store, prefix, apply)
