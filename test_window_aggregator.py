import pytest
from models.period import DEFAULT_PERIODS, Period
from models.record import Record
from services import report
from services.errors import ConfigurationError
from services.window_aggregator import compute_stats

CADENCE = 30

@pytest.fixture
def scenario_records():
    return [
        Record(timestamp=0, status_code=200, elapsed_us=1000),
        Record(timestamp=30),
        Record(timestamp=60, status_code=500, elapsed_us=2000),
    ]

def test_three_record_window(scenario_records):
    [stats] = compute_stats(scenario_records, [Period(name="90s", duration=90)], now=90, cadence=CADENCE)

    assert stats.sample_count == 3
    assert stats.expected_samples == 3
    assert stats.coverage == pytest.approx(1.0)
    assert stats.successes == 1
    assert stats.uptime == pytest.approx(1 / 3)
    assert stats.average_elapsed_us == pytest.approx(1500)

def test_three_record_window_report(scenario_records):
    stats = compute_stats(scenario_records, [Period(name="90s", duration=90)], now=90, cadence=CADENCE)
    assert report.stats_lines(3, stats) == [
        "Record count: 3",
        "90s",
        "  Coverage: 100.00000%",
        "  Uptime:    33.33333%",
        "  Latency:  1.500 ms",
    ]

def test_window_start_is_inclusive_and_older_records_excluded(scenario_records):
    [stats] = compute_stats(scenario_records, [Period(name="1m", duration=60)], now=90, cadence=CADENCE)
    assert stats.sample_count == 2
    assert stats.successes == 0
    assert stats.uptime == 0.0
    assert stats.coverage == pytest.approx(1.0)

def test_unbounded_period_has_no_coverage(scenario_records):
    [stats] = compute_stats(scenario_records, [Period(name="All time")], now=10**9, cadence=CADENCE)
    assert stats.sample_count == 3
    assert stats.expected_samples is None
    assert stats.coverage is None
    assert stats.uptime == pytest.approx(1 / 3)

def test_empty_log_reports_no_samples_everywhere():
    stats = compute_stats([], DEFAULT_PERIODS, now=1_700_000_000, cadence=CADENCE)
    assert all(not s.has_samples for s in stats)
    assert all(s.coverage is None and s.uptime is None for s in stats)

    lines = report.stats_lines(0, stats)
    assert lines[0] == "Record count: 0"
    assert lines.count("  No samples") == len(DEFAULT_PERIODS)
    assert not any("nan" in line.lower() for line in lines)

def test_window_with_only_stale_records_reports_no_samples(scenario_records):
    [stats] = compute_stats(scenario_records, [Period(name="1h", duration=3600)], now=100_000, cadence=CADENCE)
    assert stats.sample_count == 0
    assert report.stats_lines(3, [stats])[1:] == ["1h", "  No samples"]

def test_failures_count_toward_samples_but_not_latency():
    records = [Record(timestamp=t) for t in range(0, 300, 30)]
    [stats] = compute_stats(records, [Period(name="5m", duration=300)], now=300, cadence=CADENCE)
    assert stats.sample_count == 10
    assert stats.uptime == 0.0
    assert stats.average_elapsed_us is None
    assert "Latency" not in "\n".join(report.stats_lines(10, [stats]))

def test_partial_window_coverage():
    records = [Record(timestamp=3600 - 30 * i, status_code=200) for i in range(30)]
    [stats] = compute_stats(records, [Period(name="Last hour", duration=3600)], now=3600, cadence=CADENCE)
    assert stats.expected_samples == 120
    assert stats.coverage == pytest.approx(0.25)
    assert stats.uptime == 1.0

def test_order_of_records_does_not_matter(scenario_records):
    periods = [Period(name="1m", duration=60), Period(name="All time")]
    forward = compute_stats(scenario_records, periods, now=90, cadence=CADENCE)
    backward = compute_stats(list(reversed(scenario_records)), periods, now=90, cadence=CADENCE)
    assert forward == backward

def test_aggregation_is_pure(scenario_records):
    snapshot = list(scenario_records)
    first = compute_stats(scenario_records, DEFAULT_PERIODS, now=90, cadence=CADENCE)
    second = compute_stats(scenario_records, DEFAULT_PERIODS, now=90, cadence=CADENCE)
    assert first == second
    assert scenario_records == snapshot

def test_accepts_any_iterable(scenario_records):
    [stats] = compute_stats(iter(scenario_records), [Period(name="All time")], now=90, cadence=CADENCE)
    assert stats.sample_count == 3

def test_non_positive_cadence_is_rejected(scenario_records):
    with pytest.raises(ConfigurationError):
        compute_stats(scenario_records, DEFAULT_PERIODS, now=90, cadence=0)
