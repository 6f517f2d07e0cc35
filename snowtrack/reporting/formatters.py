"""Plain-text and JSON formatters for CLI and log output."""

import json
from collections.abc import Sequence
from dataclasses import asdict

from snowtrack.models.forecast import HistoryEntry
from snowtrack.models.reporting import CleanupReport, CycleSummary


def format_cycle_text(s: CycleSummary) -> str:
    """Plain text summary for logging."""
    source = "cache" if s.from_cache else "live fetch"
    lines = [
        f"=== Fetch Complete ({source}) | Run {s.run_id[:8]} ===",
        f"Forecast slots: {s.tuples_seen} seen, {s.resolved} resolved, "
        f"{s.unresolved} unresolved",
        f"History: {s.entries_appended} new entries",
    ]
    if s.errors:
        lines.append(f"Errors: {len(s.errors)}")
    lines.append(f"Duration: {s.duration_seconds:.1f}s")
    return "\n".join(lines)


def format_cycle_json(s: CycleSummary) -> str:
    return json.dumps(asdict(s), indent=2)


def format_cleanup_text(r: CleanupReport) -> str:
    mode = "DRY RUN" if r.dry_run else "APPLIED"
    lines = [
        f"=== Duplicate Timestamp Cleanup ({mode}) ===",
        f"Checked: {r.checked} | Cleaned: {r.cleaned} | "
        f"Entries removed: {r.entries_removed}",
    ]
    for d in r.details:
        lines.append(f"  {d.key}: {d.before} -> {d.after} (-{d.removed})")
    for key in r.failed_keys:
        lines.append(f"  {key}: FAILED")
    if r.dry_run and r.cleaned:
        lines.append("Re-run with --apply to write these changes.")
    return "\n".join(lines)


def format_history_text(iso_date: str, entries: Sequence[HistoryEntry]) -> str:
    if not entries:
        return f"{iso_date}: no forecast history"
    lines = [f"{iso_date}: {len(entries)} observations"]
    for e in entries:
        level = "-" if e.freezing_level is None else e.freezing_level
        if isinstance(level, int):
            level = f"{level} m"
        lines.append(f"  {e.first_seen}  {e.amount:>3} cm  freezing {level}")
    return "\n".join(lines)
