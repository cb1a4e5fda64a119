"""Task creation factory for PACE.

Users add tasks by title and type only. This module assigns the duration and
flexibility so every entry point builds tasks the same way.
"""

import uuid
from datetime import datetime
from typing import Optional, Union

from pace.models.task import Task, BlockType, USER_TASK_TYPES
from pace.models.constants import DEFAULT_DURATIONS


def is_flexible_type(task_type: Union[BlockType, str]) -> bool:
    """Work and essential tasks are never compressed; everything else may be."""
    return BlockType(task_type) not in (BlockType.WORK, BlockType.ESSENTIAL)


def default_minutes_for(
    task_type: Union[BlockType, str],
    min_hours: Optional[float] = None,
    max_hours: Optional[float] = None,
) -> int:
    """Get the system-assigned duration for a task type.

    A work range is shown at its midpoint; the scheduler picks the real
    length from the range once the day's intensity is known.
    """
    if min_hours is not None and max_hours is not None:
        return round((min_hours + max_hours) * 60 / 2)
    return DEFAULT_DURATIONS[BlockType(task_type)]


def create_task(
    title: str,
    task_type: Union[BlockType, str],
    min_hours: Optional[float] = None,
    max_hours: Optional[float] = None,
) -> Task:
    """Create a task with system defaults applied.

    Args:
        title: Task title (required)
        task_type: One of the user-creatable types
        min_hours: Lower bound of a work range, in hours
        max_hours: Upper bound of a work range, in hours

    Returns:
        Task object with defaults applied

    Raises:
        ValueError: For system-only types, or a range on a non-work task
    """
    block_type = BlockType(task_type)
    if block_type not in USER_TASK_TYPES:
        raise ValueError(f"Task type '{block_type.value}' is managed by the scheduler")
    has_range = min_hours is not None or max_hours is not None
    if has_range and block_type != BlockType.WORK:
        raise ValueError("Only work tasks accept an hour range")

    return Task(
        id=str(uuid.uuid4()),
        title=title,
        type=block_type,
        estimated_minutes=default_minutes_for(block_type, min_hours, max_hours),
        min_hours=min_hours,
        max_hours=max_hours,
        is_flexible=is_flexible_type(block_type),
        created_at=datetime.utcnow(),
    )
