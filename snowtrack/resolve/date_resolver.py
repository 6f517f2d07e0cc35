"""Maps forecast day labels onto resort-local calendar dates and storage keys."""

import logging
from collections import Counter
from datetime import datetime, timedelta

from snowtrack.models.forecast import DayLabel, ResolvedSlot
from snowtrack.resolve.clock import LocalDateFn, as_date

logger = logging.getLogger(__name__)

DAY_SUFFIX = ":day"
NIGHT_SUFFIX = ":night"


class DateResolver:
    def __init__(self, local_date_fn: LocalDateFn):
        self.local_date_fn = local_date_fn

    def resolve(
        self,
        day_label: str | DayLabel,
        reference: datetime,
        occurrence_index: int = 0,
    ) -> ResolvedSlot | None:
        """Resolve a day label seen at ``reference`` to a date and storage key.

        Weekday labels always point strictly into the future: a label naming
        the current local weekday means next week. Each further occurrence of
        the same label within one fetch lands another 7 days out.

        Returns None for labels outside the nine known day labels.
        """
        if occurrence_index < 0:
            raise ValueError(f"occurrence_index must be >= 0, got {occurrence_index}")

        label = DayLabel.parse(day_label)
        if label is None:
            logger.debug("Unrecognised day label %r", day_label)
            return None

        local_today = self.local_date_fn(reference)
        base = as_date(local_today)

        if label is DayLabel.TODAY or label is DayLabel.TONIGHT:
            days_ahead = 0
        else:
            assert label.weekday is not None
            days_ahead = (label.weekday - local_today.weekday) % 7 or 7

        target = base + timedelta(days=days_ahead + 7 * occurrence_index)
        iso = target.isoformat()

        return ResolvedSlot(
            calendar_date=iso,
            storage_key=storage_key_for(iso, label),
            day_label=label,
            occurrence_index=occurrence_index,
        )


def storage_key_for(iso_date: str, label: DayLabel) -> str:
    if label is DayLabel.TODAY:
        return iso_date + DAY_SUFFIX
    if label is DayLabel.TONIGHT:
        return iso_date + NIGHT_SUFFIX
    return iso_date


def keys_for_date(iso_date: str) -> tuple[str, str, str]:
    """Every storage key a calendar date can be recorded under."""
    return (iso_date, iso_date + DAY_SUFFIX, iso_date + NIGHT_SUFFIX)


class OccurrenceCounter:
    """Counts repeats of each day label within one fetch's ordered tuples."""

    def __init__(self) -> None:
        self._seen: Counter[DayLabel] = Counter()

    def next(self, day_label: str | DayLabel) -> int | None:
        """Return this label's zero-based occurrence index and advance it.

        Unknown labels return None and are not counted.
        """
        label = DayLabel.parse(day_label)
        if label is None:
            return None
        index = self._seen[label]
        self._seen[label] += 1
        return index
