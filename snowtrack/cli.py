"""CLI entry point for the snow forecast tracker."""

import argparse
import json
import logging
from datetime import date

from snowtrack.config.loader import (
    get_config_value,
    load_config,
    save_config,
    set_config_value,
)
from snowtrack.config.schema import AppConfig
from snowtrack.daemon import FetchDaemon, daemon_status, stop_daemon
from snowtrack.models.common import utc_now
from snowtrack.pipeline.snow_report_pipeline import SnowReportPipeline, build_tracker
from snowtrack.reporting.calendar_view import build_calendar_data
from snowtrack.reporting.formatters import (
    format_cleanup_text,
    format_cycle_json,
    format_history_text,
)
from snowtrack.resolve.clock import resort_year
from snowtrack.storage.factory import build_store
from snowtrack.storage.store import StoreError

logger = logging.getLogger(__name__)

DEFAULT_CONFIG = "config/snowtrack.yaml"


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="snowtrack",
        description="Ski resort snow forecast history tracker",
    )
    parser.add_argument(
        "--config", default=DEFAULT_CONFIG, help="Config YAML path"
    )

    sub = parser.add_subparsers(dest="command")

    # fetch
    fetch_p = sub.add_parser("fetch", help="Run one fetch and track cycle")
    fetch_p.add_argument(
        "--force", action="store_true", help="Ignore the response cache"
    )
    fetch_p.add_argument(
        "--summary", action="store_true", help="Print the cycle summary instead of the payload"
    )

    # history DATE
    hist_p = sub.add_parser("history", help="Show merged forecast history for a date")
    hist_p.add_argument("date", help="Calendar date, YYYY-MM-DD")

    # calendar
    cal_p = sub.add_parser("calendar", help="Dump calendar data for a year as JSON")
    cal_p.add_argument("--year", type=int, default=None)

    # cleanup
    clean_p = sub.add_parser("cleanup", help="Remove duplicate-timestamp history entries")
    clean_p.add_argument(
        "--apply", action="store_true", help="Write changes (default is a dry run)"
    )
    clean_p.add_argument("--prefix", default=None, help="Key prefix to scan")

    # config show / config set
    config_p = sub.add_parser("config", help="Config operations")
    config_sub = config_p.add_subparsers(dest="config_command")
    config_sub.add_parser("show", help="Display current config")
    set_p = config_sub.add_parser("set", help="Set a config value")
    set_p.add_argument("keyvalue", help="key=value to set")

    # daemon
    daemon_p = sub.add_parser("daemon", help="Fetch on a fixed interval")
    daemon_p.add_argument("--interval", type=int, default=None, help="Seconds between cycles")
    daemon_p.add_argument("--stop", action="store_true", help="Stop a running daemon")
    daemon_p.add_argument("--status", action="store_true", help="Show daemon status")

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 1

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    config = load_config(args.config)

    try:
        if args.command == "fetch":
            return _cmd_fetch(config, args)
        elif args.command == "history":
            return _cmd_history(config, args)
        elif args.command == "calendar":
            return _cmd_calendar(config, args)
        elif args.command == "cleanup":
            return _cmd_cleanup(config, args)
    except StoreError as e:
        logger.error("Storage error: %s", e)
        print(f"Error: {e}")
        return 1

    if args.command == "config":
        return _cmd_config(config, args)
    elif args.command == "daemon":
        return _cmd_daemon(config, args)
    else:
        parser.print_help()
        return 1


def _cmd_fetch(config: AppConfig, args) -> int:
    pipeline = SnowReportPipeline(config, build_store(config.storage))
    try:
        payload = pipeline.run(force=args.force)
    except Exception as e:
        logger.exception("Fetch failed")
        print(f"Error: {e}")
        return 1
    summary = pipeline.last_summary
    if args.summary and summary is not None:
        print(format_cycle_json(summary))
    else:
        print(json.dumps(payload, indent=2))
    return 0 if summary is None or not summary.errors else 1


def _cmd_history(config: AppConfig, args) -> int:
    try:
        iso_date = date.fromisoformat(args.date).isoformat()
    except ValueError:
        print(f"Error: not a YYYY-MM-DD date: {args.date}")
        return 1
    tracker = build_tracker(config, build_store(config.storage))
    print(format_history_text(iso_date, tracker.get_merged_history_for_date(iso_date)))
    return 0


def _cmd_calendar(config: AppConfig, args) -> int:
    year = args.year or resort_year(config.resort.timezone, utc_now())
    store = build_store(config.storage)
    data = build_calendar_data(store, year, config.history.key_prefix)
    print(json.dumps(data, indent=2))
    return 0


def _cmd_cleanup(config: AppConfig, args) -> int:
    tracker = build_tracker(config, build_store(config.storage))
    report = tracker.cleanup_duplicate_timestamps(args.prefix, apply=args.apply)
    print(format_cleanup_text(report))
    return 0 if not report.failed_keys else 1


def _cmd_config(config: AppConfig, args) -> int:
    if args.config_command == "show":
        print(config.model_dump_json(indent=2))
        return 0
    elif args.config_command == "set":
        kv = args.keyvalue
        if "=" not in kv:
            print("Error: use key=value format")
            return 1
        key, value = kv.split("=", 1)
        try:
            new_config = set_config_value(config, key.strip(), value.strip())
            save_config(new_config, args.config)
            print(f"Set {key} = {get_config_value(new_config, key.strip())}")
            return 0
        except Exception as e:
            print(f"Error: {e}")
            return 1
    else:
        print("Use: config show | config set key=value")
        return 1


def _cmd_daemon(config: AppConfig, args) -> int:
    if args.stop:
        return stop_daemon()
    if args.status:
        return daemon_status()
    return FetchDaemon(config, interval=args.interval).serve_forever()


if __name__ == "__main__":
    raise SystemExit(main())
