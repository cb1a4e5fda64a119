"""Data models for PACE."""

from pace.models.task import Task, BlockType, Intensity, USER_TASK_TYPES
from pace.models.time_block import TimeBlock
from pace.models.schedule import ScheduleConfig, ScheduleResult, ScheduleStats, parse_time_of_day
from pace.models.day_plan import DayPlan, Preferences

__all__ = [
    "Task",
    "BlockType",
    "Intensity",
    "USER_TASK_TYPES",
    "TimeBlock",
    "ScheduleConfig",
    "ScheduleResult",
    "ScheduleStats",
    "parse_time_of_day",
    "DayPlan",
    "Preferences",
]
