import os
from typing import Optional
from dotenv import load_dotenv
from pydantic import BaseModel, Field, ValidationError, model_validator
from services.errors import ConfigurationError

MAX_TIMEOUT_SECONDS = 60 * 60

class Settings(BaseModel):
    cadence_seconds: int = Field(30, gt=0, description="Spacing between probe launches")
    timeout_seconds: int = Field(15, gt=0, le=MAX_TIMEOUT_SECONDS)
    # timed sleeps are trusted to this precision; the last stretch is spun
    sleep_precision_seconds: float = Field(0.010, gt=0)
    # bounds how long a stop request can go unnoticed
    max_sleep_slice_seconds: float = Field(0.050, gt=0)
    max_in_flight: Optional[int] = Field(None, ge=1, description="Cap on concurrent probes, None for unbounded")
    strict_interior: bool = False
    stop_keyword: str = "stop"

    @model_validator(mode="after")
    def _check_keyword(self):
        if not self.stop_keyword.strip():
            raise ValueError("stop_keyword must not be blank")
        return self

def _env_int(name: str) -> Optional[int]:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return None
    try:
        return int(raw)
    except ValueError:
        raise ConfigurationError(f"{name} must be an integer, got {raw!r}")

def _env_bool(name: str) -> Optional[bool]:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return None
    return raw.strip().lower() in ("1", "true", "yes", "on")

def load_strict_log() -> bool:
    load_dotenv()
    return bool(_env_bool("MONITOR_STRICT_LOG"))

def build_settings(**values) -> Settings:
    """Validate settings, turning pydantic errors into ConfigurationError."""
    values = {key: value for key, value in values.items() if value is not None}
    try:
        return Settings(**values)
    except ValidationError as e:
        problems = "; ".join(
            f"{'.'.join(str(part) for part in err['loc']) or 'settings'}: {err['msg']}" for err in e.errors()
        )
        raise ConfigurationError(f"Invalid configuration: {problems}") from e

def load_settings() -> Settings:
    load_dotenv()
    return build_settings(
        cadence_seconds=_env_int("MONITOR_CADENCE_SECONDS"),
        timeout_seconds=_env_int("MONITOR_TIMEOUT_SECONDS"),
        max_in_flight=_env_int("MONITOR_MAX_IN_FLIGHT"),
        strict_interior=_env_bool("MONITOR_STRICT_LOG"),
    )
