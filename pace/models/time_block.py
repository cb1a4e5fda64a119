"""TimeBlock data model for PACE."""

from datetime import datetime
from typing import Optional
from pydantic import BaseModel, Field, model_validator

from pace.models.task import BlockType


class TimeBlock(BaseModel):
    """TimeBlock represents one contiguous slice of the planned day.

    Blocks are values: the scheduler builds a fresh sequence on every run and
    the day-plan layer replaces a block (``model_copy``) instead of editing it.
    """

    id: str = Field(..., description="Unique block identifier")
    start: datetime = Field(..., description="Block start time")
    end: datetime = Field(..., description="Block end time")
    label: str = Field(..., description="Human-readable label")
    type: BlockType = Field(..., description="Block type")
    task_id: Optional[str] = Field(None, description="Originating task (absent for synthetic blocks)")
    is_reduced: bool = Field(False, description="Whether the block was shortened from its nominal length")
    original_minutes: Optional[int] = Field(None, description="Nominal length, only set when reduced")
    is_completed: bool = Field(False, description="Whether the user marked the block done")

    @model_validator(mode="after")
    def _check_bounds(self):
        if self.end <= self.start:
            raise ValueError(f"block {self.label!r} must end after it starts")
        if not self.is_reduced and self.original_minutes is not None:
            raise ValueError("original_minutes is only recorded for reduced blocks")
        return self

    @property
    def duration_minutes(self) -> int:
        return int((self.end - self.start).total_seconds() // 60)

    class Config:
        """Pydantic configuration."""
        use_enum_values = True
        frozen = True
