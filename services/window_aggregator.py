from typing import Iterable, List, Sequence
from models.period import Period, PeriodStats
from models.record import Record
from services.errors import ConfigurationError

def compute_period_stats(records: Sequence[Record], period: Period, now: int, cadence: int) -> PeriodStats:
    """Coverage, uptime and mean latency for one window ending at `now`.

    Records are filtered by timestamp value, not position, so the input does not
    need to be sorted. Ratios are None when they are undefined: coverage for an
    unbounded period, and both ratios when the window holds no samples.
    """
    if period.is_unbounded:
        in_window = list(records)
        expected = None
    else:
        window_start = now - period.duration
        in_window = [r for r in records if r.timestamp >= window_start]
        expected = period.duration / cadence

    sample_count = len(in_window)
    successes = sum(1 for r in in_window if r.is_success)
    elapsed = [r.elapsed_us for r in in_window if r.elapsed_us is not None]

    stats = PeriodStats(
        period=period,
        sample_count=sample_count,
        successes=successes,
        expected_samples=expected,
    )
    if sample_count == 0:
        return stats

    if expected:
        stats.coverage = sample_count / expected
    stats.uptime = successes / sample_count
    if elapsed:
        stats.average_elapsed_us = sum(elapsed) / len(elapsed)
    return stats

def compute_stats(records: Iterable[Record], periods: Sequence[Period], now: int, cadence: int) -> List[PeriodStats]:
    if cadence <= 0:
        raise ConfigurationError(f"cadence must be positive, got {cadence}")
    records = list(records)
    return [compute_period_stats(records, period, now, cadence) for period in periods]
