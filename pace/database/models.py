"""SQLAlchemy database models for PACE."""

from datetime import datetime
from typing import Union, TypeVar, Type
import uuid
from sqlalchemy import Column, String, Integer, Float, Boolean, DateTime, JSON, ForeignKey

from pace.database.database import Base
from pace.models.task import BlockType, Intensity

T = TypeVar('T')


def enum_to_value(enum_obj: Union[str, T]) -> str:
    """Convert enum to string value (handles both enum and string).

    Args:
        enum_obj: Enum instance or string value

    Returns:
        String value of the enum, or the string itself if already a string
    """
    if hasattr(enum_obj, 'value'):
        return enum_obj.value
    return str(enum_obj)


def value_to_enum(value: str, enum_class: Type[T], default: T) -> T:
    """Convert string to enum with fallback to default.

    Args:
        value: String value to convert
        enum_class: Enum class to convert to
        default: Default enum value if conversion fails

    Returns:
        Enum instance, or default if conversion fails
    """
    if not value:
        return default
    try:
        return enum_class(value.lower())
    except (ValueError, AttributeError):
        return default


class DayPlanDB(Base):
    """Database model for DayPlan (one row per calendar day)."""

    __tablename__ = "day_plans"

    # Primary key: ISO date string (YYYY-MM-DD)
    date = Column(String, primary_key=True)

    # Day settings
    intensity = Column(String, nullable=False, default=Intensity.MEDIUM.value)
    wake_time = Column(String, nullable=False, default="07:00")
    sleep_time = Column(String, nullable=False, default="23:00")

    # Last generated schedule (stored as JSON arrays)
    blocks = Column(JSON, nullable=False, default=list)
    tradeoffs = Column(JSON, nullable=False, default=list)
    warnings = Column(JSON, nullable=False, default=list)
    is_generated = Column(Boolean, nullable=False, default=False)

    # Timestamps
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)
    updated_at = Column(DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow)

    def to_pydantic(self, tasks=None):
        """Convert database model to Pydantic model."""
        from pace.models.day_plan import DayPlan
        from pace.models.time_block import TimeBlock

        return DayPlan(
            date=self.date,
            intensity=value_to_enum(self.intensity, Intensity, Intensity.MEDIUM),
            wake_time=self.wake_time,
            sleep_time=self.sleep_time,
            tasks=list(tasks or []),
            blocks=[TimeBlock(**block) for block in (self.blocks or [])],
            tradeoffs=list(self.tradeoffs or []),
            warnings=list(self.warnings or []),
            is_generated=self.is_generated,
            created_at=self.created_at,
            updated_at=self.updated_at,
        )

    @classmethod
    def from_pydantic(cls, plan):
        """Create database model from Pydantic model (tasks are stored separately)."""
        return cls(
            date=plan.date,
            intensity=enum_to_value(plan.intensity),
            wake_time=plan.wake_time,
            sleep_time=plan.sleep_time,
            blocks=[block.model_dump(mode="json") for block in plan.blocks],
            tradeoffs=list(plan.tradeoffs),
            warnings=list(plan.warnings),
            is_generated=plan.is_generated,
            created_at=plan.created_at,
            updated_at=plan.updated_at,
        )


class TaskDB(Base):
    """Database model for Task."""

    __tablename__ = "tasks"

    # Primary key
    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))

    # Plan association; position keeps input order
    plan_date = Column(String, ForeignKey("day_plans.date", ondelete="CASCADE"), nullable=False, index=True)
    position = Column(Integer, nullable=False, default=0)

    # Basic fields
    title = Column(String, nullable=False)
    type = Column(String, nullable=False)
    estimated_minutes = Column(Integer, nullable=False)

    # Optional work range (hours)
    min_hours = Column(Float, nullable=True)
    max_hours = Column(Float, nullable=True)

    # Flags
    is_flexible = Column(Boolean, nullable=False, default=True)

    # Timestamps
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)

    def to_pydantic(self):
        """Convert database model to Pydantic model."""
        from pace.models.task import Task

        return Task(
            id=self.id,
            title=self.title,
            type=value_to_enum(self.type, BlockType, BlockType.ESSENTIAL),
            estimated_minutes=self.estimated_minutes,
            min_hours=self.min_hours,
            max_hours=self.max_hours,
            is_flexible=self.is_flexible,
            created_at=self.created_at,
        )

    @classmethod
    def from_pydantic(cls, task, plan_date: str, position: int):
        """Create database model from Pydantic model."""
        return cls(
            id=task.id,
            plan_date=plan_date,
            position=position,
            title=task.title,
            type=enum_to_value(task.type),
            estimated_minutes=task.estimated_minutes,
            min_hours=task.min_hours,
            max_hours=task.max_hours,
            is_flexible=task.is_flexible,
            created_at=task.created_at,
        )
