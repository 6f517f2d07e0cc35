"""Resort wall-clock conversion.

The resort's local calendar day, not the UTC one, decides what "Today" means
on the snow report page. Every instant passes through here before any day
arithmetic happens.
"""

from collections.abc import Callable
from datetime import date, datetime
from zoneinfo import ZoneInfo

from snowtrack.models.forecast import LocalDate

LocalDateFn = Callable[[datetime], LocalDate]


def to_resort_local_date(instant: datetime, tz: ZoneInfo) -> LocalDate:
    """Convert an aware instant to the calendar day on the resort's clock."""
    if instant.tzinfo is None:
        raise ValueError(f"Naive datetime has no instant: {instant!r}")
    local = instant.astimezone(tz)
    return LocalDate(
        year=local.year,
        month=local.month,
        day=local.day,
        weekday=local.weekday(),
    )


def resort_local_date_fn(timezone: str) -> LocalDateFn:
    """Bind the conversion to one IANA timezone."""
    tz = ZoneInfo(timezone)

    def _convert(instant: datetime) -> LocalDate:
        return to_resort_local_date(instant, tz)

    return _convert


def as_date(local: LocalDate) -> date:
    return date(local.year, local.month, local.day)


def resort_year(timezone: str, instant: datetime) -> int:
    """Calendar year on the resort's clock at ``instant``."""
    return resort_local_date_fn(timezone)(instant).year
