"""Tests for text and JSON formatters."""

import json

from snowtrack.models.forecast import VALLEY_BOTTOM, HistoryEntry
from snowtrack.models.reporting import CleanupDetail, CleanupReport, CycleSummary
from snowtrack.reporting.formatters import (
    format_cleanup_text,
    format_cycle_json,
    format_cycle_text,
    format_history_text,
)


def _summary(**overrides) -> CycleSummary:
    fields = {
        "run_id": "abcdef123456",
        "tuples_seen": 11,
        "resolved": 10,
        "unresolved": 1,
        "entries_appended": 4,
        "duration_seconds": 1.23,
    }
    fields.update(overrides)
    return CycleSummary(**fields)


class TestCycleFormatters:
    def test_text(self):
        text = format_cycle_text(_summary())
        assert "live fetch" in text
        assert "Run abcdef12 " in text
        assert "11 seen, 10 resolved, 1 unresolved" in text
        assert "4 new entries" in text
        assert "Duration: 1.2s" in text
        assert "Errors" not in text

    def test_text_cache_and_errors(self):
        text = format_cycle_text(_summary(from_cache=True, errors=["x"]))
        assert "(cache)" in text
        assert "Errors: 1" in text

    def test_json(self):
        data = json.loads(format_cycle_json(_summary()))
        assert data["run_id"] == "abcdef123456"
        assert data["entries_appended"] == 4


class TestCleanupText:
    def test_dry_run_hint(self):
        report = CleanupReport(
            dry_run=True,
            checked=2,
            cleaned=1,
            entries_removed=2,
            details=[CleanupDetail("forecast:2026-02-14", 5, 3, 2)],
        )
        text = format_cleanup_text(report)
        assert "DRY RUN" in text
        assert "forecast:2026-02-14: 5 -> 3 (-2)" in text
        assert "--apply" in text

    def test_applied_with_failures(self):
        report = CleanupReport(dry_run=False, failed_keys=["forecast:2026-02-21"])
        text = format_cleanup_text(report)
        assert "APPLIED" in text
        assert "forecast:2026-02-21: FAILED" in text
        assert "--apply" not in text


class TestHistoryText:
    def test_entries(self):
        text = format_history_text("2026-02-16", [
            HistoryEntry("2026-02-13T12:00:00.000Z", 0, VALLEY_BOTTOM),
            HistoryEntry("2026-02-13T12:20:00.000Z", 4, 800),
            HistoryEntry("2026-02-13T12:40:00.000Z", 5, None),
        ])
        lines = text.splitlines()
        assert lines[0] == "2026-02-16: 3 observations"
        assert lines[1].endswith("freezing valley bottom")
        assert lines[2].endswith("freezing 800 m")
        assert lines[3].endswith("freezing -")

    def test_empty(self):
        assert format_history_text("2026-02-16", []) == "2026-02-16: no forecast history"
