"""Cycle summarizer: aggregates one fetch cycle into a CycleSummary."""

from snowtrack.models.reporting import CycleSummary


class CycleSummarizer:
    def __init__(self, run_id: str):
        self.summary = CycleSummary(run_id=run_id)
        self.unresolved_labels: list[str] = []

    def record_tuple(self) -> None:
        self.summary.tuples_seen += 1

    def record_resolved(self, appended: bool) -> None:
        self.summary.resolved += 1
        if appended:
            self.summary.entries_appended += 1

    def record_unresolved(self, day_label: str) -> None:
        self.summary.unresolved += 1
        self.unresolved_labels.append(day_label)

    def record_cache_hit(self) -> None:
        self.summary.from_cache = True

    def record_duration(self, seconds: float) -> None:
        self.summary.duration_seconds = seconds

    def record_error(self, error: str) -> None:
        self.summary.errors.append(error)

    def finalize(self) -> CycleSummary:
        return self.summary
