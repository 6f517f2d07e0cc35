"""Common types and helpers shared across models."""

from datetime import UTC, datetime
from typing import TypeAlias

IsoDate: TypeAlias = str
IsoTimestamp: TypeAlias = str


def utc_now() -> datetime:
    return datetime.now(UTC)


def utc_now_iso() -> str:
    return to_iso_timestamp(utc_now())


def to_iso_timestamp(dt: datetime) -> IsoTimestamp:
    """Format an aware datetime as UTC with millisecond precision.

    E.g. ``2026-02-13T12:00:00.000Z``, the shape stored in history entries.
    """
    if dt.tzinfo is None:
        raise ValueError(f"Naive datetime has no instant: {dt!r}")
    dt = dt.astimezone(UTC)
    return dt.strftime("%Y-%m-%dT%H:%M:%S.") + f"{dt.microsecond // 1000:03d}Z"


def parse_timestamp(iso_str: str) -> datetime | None:
    """Parse an ISO timestamp, handling a trailing Z and naive values as UTC."""
    try:
        dt = datetime.fromisoformat(iso_str.replace("Z", "+00:00"))
        if dt.tzinfo is None:
            dt = dt.replace(tzinfo=UTC)
        return dt
    except (ValueError, TypeError, AttributeError):
        return None
