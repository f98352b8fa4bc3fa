from typing import Iterable, List, Optional
from models.period import PeriodStats
from models.record import Record
from services import record_codec

INDENTATION = "  "
PERCENTAGE_DIGITS = 5
PERCENTAGE_WIDTH = 3 + 1 + PERCENTAGE_DIGITS + 1
NO_SAMPLES = "No samples"

def format_percentage(ratio: float) -> str:
    return f"{100.0 * ratio:.{PERCENTAGE_DIGITS}f}%".rjust(PERCENTAGE_WIDTH)

def format_latency(elapsed_us: Optional[float]) -> str:
    return f"{elapsed_us / 1000.0:.3f} ms"

def dump_lines(records: Iterable[Record]) -> List[str]:
    return [record_codec.encode(record) for record in records]

def stats_lines(record_count: int, stats: Iterable[PeriodStats]) -> List[str]:
    lines = [f"Record count: {record_count}"]
    for entry in stats:
        lines.append(entry.period.name)
        if not entry.has_samples:
            lines.append(INDENTATION + NO_SAMPLES)
            continue
        if entry.coverage is not None:
            lines.append(INDENTATION + "Coverage: " + format_percentage(entry.coverage))
        lines.append(INDENTATION + "Uptime:   " + format_percentage(entry.uptime))
        if entry.average_elapsed_us is not None:
            lines.append(INDENTATION + "Latency:  " + format_latency(entry.average_elapsed_us))
    return lines

def monitor_banner(url: str, filename: str, cadence: int, timeout: int, stop_keyword: str) -> List[str]:
    return [
        f"🔄 Monitoring {url} and updating {filename} every {cadence} second(s).",
        f"Requests time-out after {timeout} second(s).",
        f'Enter "{stop_keyword}" to stop the application correctly.',
    ]
