"""Short-TTL cache for the assembled snow report payload.

Triggers arriving within the TTL of a completed cycle get the cached payload
instead of running another fetch and reconciliation pass.
"""

import logging
from datetime import datetime
from typing import Any

from snowtrack.ingest.staleness import is_payload_stale
from snowtrack.models.common import to_iso_timestamp
from snowtrack.storage.store import ForecastStore, StoreError

logger = logging.getLogger(__name__)

DEFAULT_CACHE_KEY = "snow-report:cache"


class ReportCache:
    def __init__(self, store: ForecastStore, ttl_seconds: int, key: str = DEFAULT_CACHE_KEY):
        self.store = store
        self.ttl_seconds = ttl_seconds
        self.key = key

    def get(self, now: datetime) -> dict[str, Any] | None:
        if self.ttl_seconds <= 0:
            return None
        try:
            cached = self.store.get(self.key)
        except StoreError:
            logger.warning("Report cache unreadable, fetching fresh", exc_info=True)
            return None
        if not cached or "payload" not in cached:
            return None
        if is_payload_stale(cached.get("cachedAt", ""), self.ttl_seconds, now):
            return None
        return cached["payload"]

    def put(self, payload: dict[str, Any], now: datetime) -> None:
        if self.ttl_seconds <= 0:
            return
        try:
            self.store.set(self.key, {"cachedAt": to_iso_timestamp(now), "payload": payload})
        except StoreError:
            logger.warning("Failed to cache snow report payload", exc_info=True)
