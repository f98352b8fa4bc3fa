import argparse
import sys
import time
from typing import List, Optional
import httpx
from config import Settings, load_settings, load_strict_log
from jobs.scheduler import CancellationToken, ProbeScheduler
from models.period import DEFAULT_PERIODS
from services import report
from services.append_log import AppendLog
from services.control import start_stop_listener
from services.errors import ConfigurationError, LogIOError, MalformedRecord
from services.probe_executor import ProbeExecutor
from services.window_aggregator import compute_stats

PROGRAM = "connectivity-monitor"

EXIT_OK = 0
EXIT_USAGE = 2
EXIT_CONFIG = 3
EXIT_LOG = 4

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog=PROGRAM,
        description="Probe a URL on a fixed cadence and report coverage and uptime from the probe log.",
    )
    parser.add_argument("logfile", help="Append-only probe log")
    actions = parser.add_mutually_exclusive_group(required=True)
    actions.add_argument("--dump", action="store_true", help="Print every record, one per line")
    actions.add_argument("--stats", action="store_true", help="Print coverage and uptime per period")
    actions.add_argument("--monitor", metavar="URL", help="Probe URL until stopped")
    return parser

def _read_records(log: AppendLog):
    """Replay the log for the read-only actions; an unreadable log counts as empty."""
    try:
        return log.replay_all()
    except LogIOError as e:
        print(f"❌ Could not read log: {e}", file=sys.stderr)
        return []

def dump_samples(log: AppendLog) -> int:
    for line in report.dump_lines(_read_records(log)):
        print(line)
    return EXIT_OK

def print_statistics(log: AppendLog, settings: Settings, now: Optional[int] = None) -> int:
    records = _read_records(log)
    now = int(time.time()) if now is None else now
    stats = compute_stats(records, DEFAULT_PERIODS, now, settings.cadence_seconds)
    for line in report.stats_lines(len(records), stats):
        print(line)
    return EXIT_OK

def validate_target(url: str) -> str:
    try:
        parsed = httpx.URL(url)
    except (httpx.InvalidURL, TypeError) as e:
        raise ConfigurationError(f"Invalid URL {url!r}: {e}")
    if parsed.scheme not in ("http", "https") or not parsed.host:
        raise ConfigurationError(f"URL must be absolute http(s), got {url!r}")
    return url

def make_probe_task(executor: ProbeExecutor, log: AppendLog, url: str):
    def _task():
        record = executor.probe(url)
        try:
            log.append(record)
        except LogIOError as e:
            print(f"❌ Failed to append record: {e}", file=sys.stderr)
    return _task

def run_monitor(url: str, log: AppendLog, settings: Settings) -> int:
    validate_target(url)
    log.check_writable()
    executor = ProbeExecutor(timeout=settings.timeout_seconds)
    for line in report.monitor_banner(url, str(log.path), settings.cadence_seconds, settings.timeout_seconds, settings.stop_keyword):
        print(line)

    token = CancellationToken()
    start_stop_listener(token, settings.stop_keyword)
    scheduler = ProbeScheduler(
        make_probe_task(executor, log, url),
        cadence=settings.cadence_seconds,
        sleep_precision=settings.sleep_precision_seconds,
        max_sleep_slice=settings.max_sleep_slice_seconds,
        max_in_flight=settings.max_in_flight,
    )
    try:
        scheduler.run(token)
    except KeyboardInterrupt:
        token.cancel()
    print(f"✅ Stopped after {scheduler.launch_count} launch(es); {scheduler.in_flight} probe(s) still finishing.")
    return EXIT_OK

def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    try:
        args = parser.parse_args(argv)
    except SystemExit as e:
        return EXIT_OK if e.code == 0 else EXIT_USAGE

    try:
        if args.dump:
            # dump only reads the log, so monitor tunables are not validated here
            return dump_samples(AppendLog(args.logfile, strict_interior=load_strict_log()))
        settings = load_settings()
        log = AppendLog(args.logfile, strict_interior=settings.strict_interior)
        if args.stats:
            return print_statistics(log, settings)
        return run_monitor(args.monitor, log, settings)
    except ConfigurationError as e:
        print(f"❌ {e}", file=sys.stderr)
        return EXIT_CONFIG
    except (LogIOError, MalformedRecord) as e:
        print(f"❌ Log error: {e}", file=sys.stderr)
        return EXIT_LOG

if __name__ == "__main__":
    sys.exit(main())
