"""Tests for the value-change comparator."""

from snowtrack.history.comparator import values_differ
from snowtrack.models.forecast import VALLEY_BOTTOM, HistoryEntry


def _entry(amount: int, level) -> HistoryEntry:
    return HistoryEntry("2026-02-13T12:00:00.000Z", amount, level)


class TestValuesDiffer:
    def test_no_previous_entry(self):
        assert values_differ(None, 0, None) is True

    def test_identical(self):
        assert values_differ(_entry(8, 1400), 8, 1400) is False

    def test_amount_changed(self):
        assert values_differ(_entry(8, 1400), 12, 1400) is True

    def test_freezing_level_changed(self):
        assert values_differ(_entry(8, 1400), 8, 1300) is True

    def test_sentinel_equals_sentinel(self):
        assert values_differ(_entry(0, VALLEY_BOTTOM), 0, VALLEY_BOTTOM) is False

    def test_sentinel_never_equals_number(self):
        assert values_differ(_entry(0, VALLEY_BOTTOM), 0, 0) is True
        assert values_differ(_entry(0, 400), 0, VALLEY_BOTTOM) is True

    def test_numeric_string_is_not_coerced(self):
        assert values_differ(_entry(0, 1200), 0, "1200") is True

    def test_none_only_equals_none(self):
        assert values_differ(_entry(3, None), 3, None) is False
        assert values_differ(_entry(3, None), 3, 0) is True

    def test_bool_is_not_a_number(self):
        assert values_differ(_entry(1, 1200), True, 1200) is True
