"""Staleness checks for cached snow report payloads."""

from datetime import UTC, datetime

from snowtrack.models.common import parse_timestamp


def payload_age_seconds(cached_at_iso: str, now: datetime | None = None) -> float:
    """Age of a cached payload in seconds; inf when the timestamp is unusable."""
    if now is None:
        now = datetime.now(UTC)
    cached = parse_timestamp(cached_at_iso)
    if cached is None:
        return float("inf")
    return (now - cached).total_seconds()


def is_payload_stale(
    cached_at_iso: str, max_age_seconds: int, now: datetime | None = None
) -> bool:
    """Stale once strictly older than max_age_seconds, or if it was cached in the future."""
    age = payload_age_seconds(cached_at_iso, now)
    return age > max_age_seconds or age < 0
