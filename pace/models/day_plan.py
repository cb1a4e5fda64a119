"""DayPlan and Preferences data models for PACE."""

import os
from datetime import datetime
from typing import List
from pydantic import BaseModel, Field, field_validator
from dotenv import load_dotenv

from pace.models.task import Task, Intensity
from pace.models.time_block import TimeBlock
from pace.models.schedule import parse_time_of_day
from pace.models.constants import DEFAULT_WAKE_TIME, DEFAULT_SLEEP_TIME, DEFAULT_INTENSITY

load_dotenv()


class Preferences(BaseModel):
    """Defaults applied to newly created day plans."""

    default_wake_time: str = Field(DEFAULT_WAKE_TIME, description="Wake time for new plans (HH:mm)")
    default_sleep_time: str = Field(DEFAULT_SLEEP_TIME, description="Sleep time for new plans (HH:mm)")
    default_intensity: Intensity = Field(DEFAULT_INTENSITY, description="Intensity for new plans")

    @field_validator("default_wake_time", "default_sleep_time")
    @classmethod
    def _valid_time(cls, v: str) -> str:
        parse_time_of_day(v)
        return v

    @classmethod
    def from_env(cls) -> "Preferences":
        """Build preferences from PACE_DEFAULT_* environment variables."""
        return cls(
            default_wake_time=os.getenv("PACE_DEFAULT_WAKE_TIME", DEFAULT_WAKE_TIME),
            default_sleep_time=os.getenv("PACE_DEFAULT_SLEEP_TIME", DEFAULT_SLEEP_TIME),
            default_intensity=os.getenv("PACE_DEFAULT_INTENSITY", DEFAULT_INTENSITY.value).lower(),
        )

    class Config:
        """Pydantic configuration."""
        use_enum_values = True


class DayPlan(BaseModel):
    """Everything planned for one calendar day, keyed by ISO date."""

    date: str = Field(..., description="ISO date string (YYYY-MM-DD)")
    intensity: Intensity = Field(DEFAULT_INTENSITY, description="Day intensity")
    wake_time: str = Field(DEFAULT_WAKE_TIME, description="Wake time (HH:mm)")
    sleep_time: str = Field(DEFAULT_SLEEP_TIME, description="Target sleep time (HH:mm)")
    tasks: List[Task] = Field(default_factory=list, description="Tasks in input order")
    blocks: List[TimeBlock] = Field(default_factory=list, description="Last generated schedule")
    tradeoffs: List[str] = Field(default_factory=list, description="Tradeoffs of the last generation")
    warnings: List[str] = Field(default_factory=list, description="Warnings of the last generation")
    is_generated: bool = Field(False, description="Whether blocks reflect the current tasks and settings")
    created_at: datetime = Field(default_factory=datetime.utcnow, description="Plan creation timestamp")
    updated_at: datetime = Field(default_factory=datetime.utcnow, description="Plan last update timestamp")

    class Config:
        """Pydantic configuration."""
        use_enum_values = True
