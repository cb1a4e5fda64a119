"""Repository for DayPlan database operations."""

import logging
from datetime import datetime
from typing import Optional, Tuple
from sqlalchemy.orm import Session

from pace.models.day_plan import DayPlan, Preferences
from pace.models.schedule import ScheduleResult
from pace.models.time_block import TimeBlock
from pace.database.models import DayPlanDB, TaskDB, enum_to_value
from pace.database.repository import TaskRepository

logger = logging.getLogger(__name__)
_UNSET = object()


class DayPlanRepository:
    """Repository for DayPlan database operations (plans keyed by ISO date)."""

    def __init__(self, db: Session):
        self.db = db
        self.tasks = TaskRepository(db)

    def _row(self, date: str) -> Optional[DayPlanDB]:
        return self.db.query(DayPlanDB).filter(DayPlanDB.date == date).first()

    def _to_pydantic(self, row: DayPlanDB) -> DayPlan:
        return row.to_pydantic(tasks=self.tasks.get_for_plan(row.date))

    def get(self, date: str) -> Optional[DayPlan]:
        """Get the plan for a date, with its tasks."""
        row = self._row(date)
        return self._to_pydantic(row) if row else None

    def get_or_create(self, date: str, preferences: Optional[Preferences] = None) -> DayPlan:
        """Get the plan for a date, creating an empty one from preferences."""
        row = self._row(date)
        if row is not None:
            return self._to_pydantic(row)

        preferences = preferences or Preferences()
        plan = DayPlan(
            date=date,
            intensity=preferences.default_intensity,
            wake_time=preferences.default_wake_time,
            sleep_time=preferences.default_sleep_time,
        )
        try:
            row = DayPlanDB.from_pydantic(plan)
            self.db.add(row)
            self.db.commit()
            self.db.refresh(row)
            logger.debug(f"Created day plan {date}")
            return self._to_pydantic(row)
        except Exception as e:
            self.db.rollback()
            logger.error(f"Failed to create day plan {date}: {type(e).__name__}: {str(e)}")
            raise

    def update_settings(
        self,
        date: str,
        *,
        intensity=_UNSET,
        wake_time=_UNSET,
        sleep_time=_UNSET,
    ) -> Optional[DayPlan]:
        """Change a plan's intensity or wake/sleep times.

        Uses an UNSET sentinel so only the given settings change. Any change
        marks the plan as needing regeneration.
        """
        try:
            row = self._row(date)
            if row is None:
                return None
            if intensity is not _UNSET:
                row.intensity = enum_to_value(intensity)
            if wake_time is not _UNSET:
                row.wake_time = wake_time
            if sleep_time is not _UNSET:
                row.sleep_time = sleep_time
            row.is_generated = False
            row.updated_at = datetime.utcnow()
            self.db.commit()
            self.db.refresh(row)
            logger.debug(f"Updated settings for day plan {date}")
            return self._to_pydantic(row)
        except Exception as e:
            self.db.rollback()
            logger.error(f"Failed to update settings for day plan {date}: {type(e).__name__}: {str(e)}")
            raise

    def save_schedule(self, date: str, result: ScheduleResult) -> Optional[DayPlan]:
        """Replace the plan's blocks, tradeoffs and warnings with a new result."""
        try:
            row = self._row(date)
            if row is None:
                return None
            row.blocks = [block.model_dump(mode="json") for block in result.blocks]
            row.tradeoffs = list(result.tradeoffs)
            row.warnings = list(result.warnings)
            row.is_generated = True
            row.updated_at = datetime.utcnow()
            self.db.commit()
            self.db.refresh(row)
            logger.debug(f"Saved schedule for {date}: {len(result.blocks)} blocks, {len(result.warnings)} warnings")
            return self._to_pydantic(row)
        except Exception as e:
            self.db.rollback()
            logger.error(f"Failed to save schedule for {date}: {type(e).__name__}: {str(e)}")
            raise

    def toggle_block_complete(self, date: str, block_id: str) -> Optional[Tuple[DayPlan, TimeBlock]]:
        """Flip a block's completion flag.

        The block is replaced by a copy, never edited. Returns the updated
        plan and block, or None when the plan or block does not exist.
        """
        try:
            row = self._row(date)
            if row is None:
                return None
            blocks = [TimeBlock(**block) for block in (row.blocks or [])]
            toggled = None
            for index, block in enumerate(blocks):
                if block.id == block_id:
                    toggled = block.model_copy(update={"is_completed": not block.is_completed})
                    blocks[index] = toggled
                    break
            if toggled is None:
                return None
            row.blocks = [block.model_dump(mode="json") for block in blocks]
            row.updated_at = datetime.utcnow()
            self.db.commit()
            self.db.refresh(row)
            logger.debug(f"Block {block_id} on {date} completed={toggled.is_completed}")
            return self._to_pydantic(row), toggled
        except Exception as e:
            self.db.rollback()
            logger.error(f"Failed to toggle block {block_id} on {date}: {type(e).__name__}: {str(e)}")
            raise

    def delete_all(self) -> int:
        """Remove every plan and task. Returns the number of plans removed."""
        try:
            self.db.query(TaskDB).delete()
            affected = self.db.query(DayPlanDB).delete()
            self.db.commit()
            logger.debug(f"Deleted {affected} day plans")
            return affected
        except Exception as e:
            self.db.rollback()
            logger.error(f"Failed to delete day plans: {type(e).__name__}: {str(e)}")
            raise
