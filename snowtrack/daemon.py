"""Fetch daemon: keeps forecast history current by running the pipeline on an interval.

Cycles go through the pipeline's response cache, so a cycle landing within the
cache TTL of an API-triggered fetch reuses that payload instead of scraping
the page again.

Usage:
    snowtrack daemon                  # every ops.interval_seconds
    snowtrack daemon --interval 600
    snowtrack daemon --status
    snowtrack daemon --stop
"""

import json
import logging
import os
import signal
import threading
import time
from dataclasses import asdict
from pathlib import Path

from snowtrack.config.schema import AppConfig
from snowtrack.models.common import utc_now_iso
from snowtrack.models.reporting import CycleSummary
from snowtrack.pipeline.snow_report_pipeline import SnowReportPipeline
from snowtrack.storage.factory import build_store

logger = logging.getLogger(__name__)

RUN_DIR = Path("data")
PID_FILE = RUN_DIR / "daemon.pid"
STATE_FILE = RUN_DIR / "daemon_state.json"
LOG_FILE = Path("logs") / "daemon.log"
MIN_RETRY_SECONDS = 60


class FetchDaemon:
    def __init__(
        self,
        config: AppConfig,
        interval: int | None = None,
        pipeline: SnowReportPipeline | None = None,
    ):
        self.config = config
        self.interval = interval or config.ops.interval_seconds
        self._pipeline = pipeline
        self._stopping = threading.Event()
        self.cycles = 0
        self.failed_cycles = 0
        self.started_at: str | None = None
        self.last_summary: CycleSummary | None = None
        self.last_error: str | None = None

    @property
    def pipeline(self) -> SnowReportPipeline:
        if self._pipeline is None:
            self._pipeline = SnowReportPipeline(self.config, build_store(self.config.storage))
        return self._pipeline

    def run_cycle(self) -> bool:
        """Run the pipeline once. False if it raised or any slot failed to track."""
        self.cycles += 1
        try:
            self.pipeline.run()
        except Exception as e:
            logger.exception("Fetch cycle %d failed", self.cycles)
            self.failed_cycles += 1
            self.last_summary = None
            self.last_error = str(e)
            return False

        summary = self.pipeline.last_summary
        self.last_summary = summary
        if summary is not None and summary.errors:
            self.failed_cycles += 1
            self.last_error = "; ".join(summary.errors)
            logger.error(
                "Fetch cycle %d finished with %d tracking errors",
                self.cycles, len(summary.errors),
            )
            return False

        self.last_error = None
        return True

    def next_wait(self, ok: bool) -> float:
        """Seconds until the next cycle.

        A failed cycle may still have cached its payload. The retry waits out
        the cache TTL so it refetches, capped at the normal interval.
        """
        if ok:
            return self.interval
        retry = max(self.config.fetch.cache_ttl_seconds, MIN_RETRY_SECONDS)
        return min(self.interval, retry)

    def serve_forever(self) -> int:
        """Run cycles until stopped. Returns a CLI exit code."""
        running = read_pid()
        if running is not None and _is_alive(running):
            print(f"Daemon already running (pid {running}). Stop it with: snowtrack daemon --stop")
            return 1

        RUN_DIR.mkdir(parents=True, exist_ok=True)
        PID_FILE.write_text(str(os.getpid()))
        handler = _attach_log_file()
        previous = {
            signum: signal.signal(signum, lambda *_: self.stop())
            for signum in (signal.SIGTERM, signal.SIGINT)
        }
        self.started_at = utc_now_iso()
        logger.info(
            "Fetch daemon for %s every %ds (pid %d)",
            self.config.resort.slug, self.interval, os.getpid(),
        )

        try:
            while not self._stopping.is_set():
                ok = self.run_cycle()
                self.write_state()
                self._stopping.wait(self.next_wait(ok))
        finally:
            for signum, old in previous.items():
                signal.signal(signum, old)
            PID_FILE.unlink(missing_ok=True)
            self.write_state()
            logger.info(
                "Fetch daemon stopped after %d cycles (%d failed)",
                self.cycles, self.failed_cycles,
            )
            logging.getLogger().removeHandler(handler)
            handler.close()
        return 0

    def stop(self) -> None:
        self._stopping.set()

    def write_state(self) -> None:
        state = {
            "pid": os.getpid(),
            "resort": self.config.resort.slug,
            "interval": self.interval,
            "startedAt": self.started_at,
            "cycles": self.cycles,
            "failedCycles": self.failed_cycles,
            "lastError": self.last_error,
            "lastSummary": asdict(self.last_summary) if self.last_summary else None,
            "updatedAt": utc_now_iso(),
        }
        RUN_DIR.mkdir(parents=True, exist_ok=True)
        STATE_FILE.write_text(json.dumps(state, indent=2))


def read_pid() -> int | None:
    try:
        pid = int(PID_FILE.read_text().strip())
    except (OSError, ValueError):
        return None
    return pid if pid > 0 else None


def _is_alive(pid: int) -> bool:
    try:
        os.kill(pid, 0)
    except ProcessLookupError:
        return False
    except PermissionError:
        return True  # exists, owned by someone else
    return True


def _attach_log_file() -> logging.Handler:
    LOG_FILE.parent.mkdir(parents=True, exist_ok=True)
    handler = logging.FileHandler(LOG_FILE, mode="a", encoding="utf-8")
    handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s"))
    logging.getLogger().addHandler(handler)
    return handler


def stop_daemon(timeout: float = 60.0) -> int:
    """Ask a running daemon to finish its cycle and exit."""
    pid = read_pid()
    if pid is None:
        PID_FILE.unlink(missing_ok=True)
        print("No daemon running")
        return 1
    if not _is_alive(pid):
        PID_FILE.unlink(missing_ok=True)
        print(f"Removed stale pid file (pid {pid})")
        return 0

    os.kill(pid, signal.SIGTERM)
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if not _is_alive(pid):
            print(f"Daemon {pid} stopped")
            return 0
        time.sleep(0.5)
    print(f"Daemon {pid} still running after {timeout:.0f}s")
    return 1


def daemon_status() -> int:
    try:
        state = json.loads(STATE_FILE.read_text())
    except (OSError, json.JSONDecodeError):
        print("No daemon state found")
        return 1

    pid = read_pid()
    running = pid is not None and _is_alive(pid)
    print(
        f"Daemon {'running' if running else 'stopped'}: "
        f"{state.get('resort', '?')} every {state.get('interval', '?')}s"
    )
    print(f"  Started: {state.get('startedAt')}")
    print(f"  Cycles: {state.get('cycles', 0)} ({state.get('failedCycles', 0)} failed)")
    summary = state.get("lastSummary")
    if summary:
        source = "cache" if summary.get("from_cache") else "live fetch"
        print(
            f"  Last cycle: {summary.get('tuples_seen', 0)} slots, "
            f"{summary.get('entries_appended', 0)} new entries ({source})"
        )
    if state.get("lastError"):
        print(f"  Last error: {state['lastError']}")
    print(f"  Updated: {state.get('updatedAt')}")
    return 0
