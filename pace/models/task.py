"""Task data model for PACE."""

from datetime import datetime
from enum import Enum
from typing import Optional
from pydantic import BaseModel, Field, field_validator, model_validator


class BlockType(str, Enum):
    """Block/task type enumeration."""
    WORK = "work"
    ESSENTIAL = "essential"
    MOVEMENT = "movement"
    BREAK = "break"
    PHONE = "phone"
    SOCIAL = "social"
    LEISURE = "leisure"
    SLEEP = "sleep"
    MEAL = "meal"


class Intensity(str, Enum):
    """Day intensity enumeration."""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


# Bounds on user durations; nothing may exceed one day.
DAY_MINUTES = 24 * 60
MAX_RANGE_HOURS = 24

# Types a user may enter; break/sleep/meal are synthesized by the scheduler.
USER_TASK_TYPES = frozenset({
    BlockType.WORK,
    BlockType.ESSENTIAL,
    BlockType.MOVEMENT,
    BlockType.PHONE,
    BlockType.SOCIAL,
    BlockType.LEISURE,
})


class Task(BaseModel):
    """A task entered without a time; the scheduler places it."""

    id: str = Field(..., description="Unique task identifier (UUID v4)")
    title: str = Field(..., min_length=1, description="Task title")
    type: BlockType = Field(..., description="Task type")
    estimated_minutes: int = Field(..., ge=0, le=DAY_MINUTES, description="System-assigned duration in minutes")
    min_hours: Optional[float] = Field(None, gt=0, le=MAX_RANGE_HOURS, allow_inf_nan=False, description="Lower bound of an acceptable work range (hours)")
    max_hours: Optional[float] = Field(None, gt=0, le=MAX_RANGE_HOURS, allow_inf_nan=False, description="Upper bound of an acceptable work range (hours)")
    is_flexible: bool = Field(True, description="Whether the block may be compressed")
    created_at: datetime = Field(default_factory=datetime.utcnow, description="Task creation timestamp")

    @field_validator("title")
    @classmethod
    def _strip_title(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("title must not be blank")
        return v

    @model_validator(mode="after")
    def _check_range(self):
        if (self.min_hours is None) != (self.max_hours is None):
            raise ValueError("min_hours and max_hours must be given together")
        if self.min_hours is not None and self.min_hours > self.max_hours:
            raise ValueError("min_hours must not exceed max_hours")
        return self

    @property
    def has_range(self) -> bool:
        return self.min_hours is not None and self.max_hours is not None

    class Config:
        """Pydantic configuration."""
        use_enum_values = True
        frozen = True
