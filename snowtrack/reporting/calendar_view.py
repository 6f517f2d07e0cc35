"""Calendar aggregation: one merged forecast timeline per date of a year."""

import re
from collections import defaultdict
from typing import Any

from snowtrack.history.reconciler import merge_records
from snowtrack.resolve.date_resolver import NIGHT_SUFFIX
from snowtrack.storage.store import ForecastStore


def build_calendar_data(store: ForecastStore, year: int, key_prefix: str) -> dict[str, Any]:
    """Summarise every stored date in ``year``.

    All keys recorded for a date (bare, day and night) are merged, so a date
    first seen as a weekday and later as Today shows as one timeline.
    """
    key_re = re.compile(rf"^{re.escape(key_prefix)}(\d{{4}}-\d{{2}}-\d{{2}})(:day|:night)?$")
    by_date: dict[str, list[dict[str, Any]]] = defaultdict(list)
    has_night: set[str] = set()

    for key, record in store.get_all_by_prefix(key_prefix).items():
        match = key_re.match(key)
        if not match or not isinstance(record, dict) or not record.get("history"):
            continue
        iso_date = match.group(1)
        if int(iso_date[:4]) != year:
            continue
        by_date[iso_date].append(record)
        if match.group(2) == NIGHT_SUFFIX:
            has_night.add(iso_date)

    data: dict[str, Any] = {}
    for iso_date in sorted(by_date):
        history = merge_records(by_date[iso_date])
        first_amount = history[0].amount
        last_amount = history[-1].amount
        data[iso_date] = {
            "date": iso_date,
            "hasNight": iso_date in has_night,
            "history": [e.to_dict() for e in history],
            "firstAmount": first_amount,
            "lastAmount": last_amount,
            "delta": last_amount - first_amount,
            "historyCount": len(history),
        }

    return {"year": year, "data": data, "count": len(data)}
