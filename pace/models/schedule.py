"""Schedule configuration and result models for PACE."""

import re
import datetime as dt
from typing import Tuple
from pydantic import BaseModel, Field, field_validator

from pace.models.task import Intensity
from pace.models.time_block import TimeBlock

_HHMM = re.compile(r"^([01]\d|2[0-3]):([0-5]\d)$")


def parse_time_of_day(value: str) -> dt.time:
    """Parse an "HH:mm" string into a time.

    Raises:
        ValueError: If the string is not a valid 24-hour time
    """
    match = _HHMM.match(value or "")
    if not match:
        raise ValueError(f"Invalid time of day {value!r}, expected HH:mm")
    return dt.time(int(match.group(1)), int(match.group(2)))


class ScheduleConfig(BaseModel):
    """Per-request day configuration; the scheduler does not retain it."""

    wake_time: str = Field("07:00", description="Wake time of day (HH:mm)")
    target_sleep_time: str = Field("23:00", description="Target sleep time of day (HH:mm), same calendar day")
    intensity: Intensity = Field(Intensity.MEDIUM, description="Day intensity")
    date: dt.date = Field(..., description="Reference calendar date")

    @field_validator("wake_time", "target_sleep_time")
    @classmethod
    def _valid_time(cls, v: str) -> str:
        parse_time_of_day(v)
        return v

    class Config:
        """Pydantic configuration."""
        use_enum_values = True
        frozen = True


class ScheduleStats(BaseModel):
    """Aggregate minutes per category, summed from the final block list."""

    total_work_minutes: int = 0
    total_essential_minutes: int = 0
    total_break_minutes: int = 0
    total_phone_minutes: int = 0
    total_leisure_minutes: int = 0
    total_meal_minutes: int = 0
    sleep_hours: float = 0.0
    sleep_reduced: bool = False

    class Config:
        """Pydantic configuration."""
        frozen = True


class ScheduleResult(BaseModel):
    """Output of one scheduler run."""

    blocks: Tuple[TimeBlock, ...] = Field(default_factory=tuple, description="Contiguous blocks, wake to next wake")
    tradeoffs: Tuple[str, ...] = Field(default_factory=tuple, description="Display-ready compression explanations")
    warnings: Tuple[str, ...] = Field(default_factory=tuple, description="Display-ready over-allocation notices")
    stats: ScheduleStats = Field(default_factory=ScheduleStats, description="Aggregate statistics")

    class Config:
        """Pydantic configuration."""
        frozen = True
