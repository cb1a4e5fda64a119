"""Repository layer for task database operations."""

import logging
from datetime import datetime
from typing import List, Optional
from sqlalchemy.orm import Session
from sqlalchemy import func

from pace.models.task import Task
from pace.database.models import TaskDB, DayPlanDB, enum_to_value

logger = logging.getLogger(__name__)


class TaskRepository:
    """Repository for Task database operations.

    Tasks always belong to a day plan. Any change to a plan's tasks marks the
    plan as needing regeneration.
    """

    def __init__(self, db: Session):
        self.db = db

    def _mark_plan_stale(self, plan_date: str) -> None:
        plan_db = self.db.query(DayPlanDB).filter(DayPlanDB.date == plan_date).first()
        if plan_db is not None:
            plan_db.is_generated = False
            plan_db.updated_at = datetime.utcnow()

    def _next_position(self, plan_date: str) -> int:
        current = self.db.query(func.max(TaskDB.position)).filter(TaskDB.plan_date == plan_date).scalar()
        return 0 if current is None else current + 1

    def create(self, plan_date: str, task: Task) -> Task:
        """Append a task to a plan."""
        try:
            task_db = TaskDB.from_pydantic(task, plan_date, self._next_position(plan_date))
            self.db.add(task_db)
            self._mark_plan_stale(plan_date)
            self.db.commit()
            self.db.refresh(task_db)
            logger.debug(f"Created task {task.id} on {plan_date}: {task.title[:50]}")
            return task_db.to_pydantic()
        except Exception as e:
            self.db.rollback()
            logger.error(f"Failed to create task {task.id}: {type(e).__name__}: {str(e)}")
            raise

    def get(self, plan_date: str, task_id: str) -> Optional[Task]:
        """Get task by ID within a plan."""
        task_db = self.db.query(TaskDB).filter(
            TaskDB.id == task_id,
            TaskDB.plan_date == plan_date,
        ).first()
        return task_db.to_pydantic() if task_db else None

    def get_for_plan(self, plan_date: str) -> List[Task]:
        """Get a plan's tasks in input order."""
        tasks_db = self.db.query(TaskDB).filter(
            TaskDB.plan_date == plan_date,
        ).order_by(TaskDB.position).all()
        return [task_db.to_pydantic() for task_db in tasks_db]

    def update(self, plan_date: str, task: Task) -> Task:
        """Update an existing task in place (input order is kept)."""
        task_db = self.db.query(TaskDB).filter(
            TaskDB.id == task.id,
            TaskDB.plan_date == plan_date,
        ).first()
        if not task_db:
            raise ValueError(f"Task {task.id} not found")

        task_db.title = task.title
        task_db.type = enum_to_value(task.type)
        task_db.estimated_minutes = task.estimated_minutes
        task_db.min_hours = task.min_hours
        task_db.max_hours = task.max_hours
        task_db.is_flexible = task.is_flexible

        try:
            self._mark_plan_stale(plan_date)
            self.db.commit()
            self.db.refresh(task_db)
            logger.debug(f"Updated task {task.id}: {task.title[:50]}")
            return task_db.to_pydantic()
        except Exception as e:
            self.db.rollback()
            logger.error(f"Failed to update task {task.id}: {type(e).__name__}: {str(e)}")
            raise

    def delete(self, plan_date: str, task_id: str) -> bool:
        """Remove a task from a plan. Returns False if it did not exist."""
        try:
            task_db = self.db.query(TaskDB).filter(
                TaskDB.id == task_id,
                TaskDB.plan_date == plan_date,
            ).first()
            if not task_db:
                return False
            self.db.delete(task_db)
            self._mark_plan_stale(plan_date)
            self.db.commit()
            logger.debug(f"Deleted task {task_id} from {plan_date}")
            return True
        except Exception as e:
            self.db.rollback()
            logger.error(f"Failed to delete task {task_id}: {type(e).__name__}: {str(e)}")
            raise
