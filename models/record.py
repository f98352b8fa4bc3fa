from pydantic import BaseModel, ConfigDict, Field, model_validator
from typing import Optional

# 9999-12-31T23:59:59Z, the last instant the fixed-width timestamp can hold
MAX_TIMESTAMP = 253_402_300_799

FIRST_SUCCESS_CODE = 100
LAST_SUCCESS_CODE = 399

class Record(BaseModel):
    """One probe observation, immutable once created."""
    model_config = ConfigDict(frozen=True)

    timestamp: int = Field(..., ge=0, le=MAX_TIMESTAMP, description="Seconds since epoch (UTC)")
    status_code: Optional[int] = Field(None, ge=0, le=65535)
    elapsed_us: Optional[int] = Field(None, ge=0, description="Round trip in microseconds")

    @model_validator(mode="after")
    def _elapsed_requires_status(self):
        # Latency is only meaningful for a completed round trip
        if self.elapsed_us is not None and self.status_code is None:
            raise ValueError("elapsed_us cannot be set without status_code")
        return self

    @property
    def is_success(self) -> bool:
        if self.status_code is None:
            return False
        return FIRST_SUCCESS_CODE <= self.status_code <= LAST_SUCCESS_CODE
