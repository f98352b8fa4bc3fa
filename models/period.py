from pydantic import BaseModel, ConfigDict, Field
from typing import List, Optional

ONE_HOUR = 60 * 60
ONE_DAY = 24 * ONE_HOUR

class Period(BaseModel):
    """Named rolling statistics window. A duration of None is unbounded."""
    model_config = ConfigDict(frozen=True)

    name: str
    duration: Optional[int] = Field(None, gt=0, description="Window length in seconds")

    @property
    def is_unbounded(self) -> bool:
        return self.duration is None

class PeriodStats(BaseModel):
    period: Period
    sample_count: int = 0
    successes: int = 0
    expected_samples: Optional[float] = None  # None for unbounded periods
    coverage: Optional[float] = None  # None means "no samples" or not applicable
    uptime: Optional[float] = None
    average_elapsed_us: Optional[float] = None

    @property
    def has_samples(self) -> bool:
        return self.sample_count > 0

DEFAULT_PERIODS: List[Period] = [
    Period(name="Last hour", duration=ONE_HOUR),
    Period(name="Last 4 hours", duration=4 * ONE_HOUR),
    Period(name="Last day", duration=ONE_DAY),
    Period(name="Last week", duration=7 * ONE_DAY),
    Period(name="Last 30 days", duration=30 * ONE_DAY),
    Period(name="All time"),
]
