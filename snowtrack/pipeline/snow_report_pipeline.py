"""Snow report pipeline: one fetch, extract and track cycle."""

import logging
import time
import uuid
from collections.abc import Callable
from datetime import datetime
from typing import Any

from snowtrack.config.schema import AppConfig
from snowtrack.history.reconciler import HistoryReconciler
from snowtrack.history.tracker import ForecastTracker
from snowtrack.ingest.forecast_extractor import extract_forecast, parse_snow_report
from snowtrack.ingest.response_cache import ReportCache
from snowtrack.ingest.snow_report_client import SnowReportClient
from snowtrack.models.common import to_iso_timestamp, utc_now
from snowtrack.models.reporting import CycleSummary
from snowtrack.reporting.cycle_summarizer import CycleSummarizer
from snowtrack.reporting.formatters import format_cycle_text
from snowtrack.resolve.clock import resort_local_date_fn
from snowtrack.resolve.date_resolver import DateResolver
from snowtrack.storage.store import ForecastStore

logger = logging.getLogger(__name__)


def build_tracker(config: AppConfig, store: ForecastStore) -> ForecastTracker:
    resolver = DateResolver(resort_local_date_fn(config.resort.timezone))
    return ForecastTracker(resolver, HistoryReconciler(store, config.history))


class SnowReportPipeline:
    def __init__(
        self,
        config: AppConfig,
        store: ForecastStore,
        client: SnowReportClient | None = None,
        clock: Callable[[], datetime] = utc_now,
    ):
        self.config = config
        self.store = store
        self.client = client or SnowReportClient(
            config.resort.snow_report_url,
            user_agent=config.fetch.user_agent,
            timeout=config.fetch.timeout_seconds,
            max_retries=config.fetch.max_retries,
            retry_base_delay=config.fetch.retry_base_delay_seconds,
        )
        self.clock = clock
        self.tracker = build_tracker(config, store)
        self.cache = ReportCache(store, config.fetch.cache_ttl_seconds, config.fetch.cache_key)
        self.last_summary: CycleSummary | None = None

    def run(self, force: bool = False) -> dict[str, Any]:
        """Return the snow report payload with tracked forecast history.

        A payload cached within the TTL is returned as-is unless ``force``.
        Fetch errors propagate to the caller.
        """
        start_time = time.monotonic()
        summarizer = CycleSummarizer(str(uuid.uuid4()))
        now = self.clock()

        cached = None if force else self.cache.get(now)
        if cached is not None:
            logger.info("Serving cached snow report from %s", cached.get("fetchedAt"))
            summarizer.record_cache_hit()
            self._finish(summarizer, start_time)
            return cached

        html = self.client.fetch_html()
        report = parse_snow_report(html)
        tuples = extract_forecast(html)
        if not tuples:
            logger.warning("No forecast slots found on %s", self.client.url)

        tracked = self.tracker.track_forecast_history(tuples, now, summarizer)

        payload = {
            "resort": self.config.resort.name,
            "weather": report.weather_dict(),
            "snow": report.snow_dict(),
            "forecast": [t.to_dict() for t in tracked],
            "fetchedAt": to_iso_timestamp(now),
            "source": self.client.url,
        }
        self.cache.put(payload, now)
        self._finish(summarizer, start_time)
        return payload

    def _finish(self, summarizer: CycleSummarizer, start_time: float) -> None:
        summarizer.record_duration(time.monotonic() - start_time)
        self.last_summary = summarizer.finalize()
        logger.info("\n%s", format_cycle_text(self.last_summary))
