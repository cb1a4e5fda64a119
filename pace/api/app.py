"""FastAPI web application for PACE."""

import logging
import random
from datetime import date as date_type
from typing import List, Optional
from fastapi import FastAPI, HTTPException, Depends
from pydantic import BaseModel, Field, field_validator
from sqlalchemy.orm import Session

from pace.models.task import Task, BlockType, Intensity, MAX_RANGE_HOURS
from pace.models.time_block import TimeBlock
from pace.models.day_plan import DayPlan, Preferences
from pace.models.schedule import ScheduleConfig, ScheduleResult, parse_time_of_day
from pace.models.task_factory import create_task
from pace.engine.scheduler import generate_schedule
from pace.engine.encouragement import EncouragementMessage, get_encouragement_message, get_streak_message
from pace.database.database import get_db
from pace.database.day_plan_repository import DayPlanRepository

logger = logging.getLogger(__name__)

# Initialize FastAPI app
app = FastAPI(
    title="PACE API",
    description="Enter tasks without times; PACE plans the whole day",
    version="0.1.0"
)

_rng = random.Random()


def get_rng() -> random.Random:
    """Random source for encouragement messages (dependency, override to seed)."""
    return _rng


def get_preferences() -> Preferences:
    """Defaults for newly created plans (dependency)."""
    return Preferences.from_env()


# Request models
class PlanSettingsUpdate(BaseModel):
    """Request to change a plan's settings."""
    intensity: Optional[Intensity] = None
    wake_time: Optional[str] = None
    sleep_time: Optional[str] = None

    @field_validator("wake_time", "sleep_time")
    @classmethod
    def _valid_time(cls, v: Optional[str]) -> Optional[str]:
        if v is not None:
            parse_time_of_day(v)
        return v


class TaskCreateRequest(BaseModel):
    """Request to add a task. Duration is assigned by the system."""
    title: str = Field(..., min_length=1)
    type: BlockType
    min_hours: Optional[float] = Field(None, gt=0, le=MAX_RANGE_HOURS, allow_inf_nan=False)
    max_hours: Optional[float] = Field(None, gt=0, le=MAX_RANGE_HOURS, allow_inf_nan=False)


class TaskUpdateRequest(BaseModel):
    """Request to edit a task; omitted fields keep their value."""
    title: Optional[str] = Field(None, min_length=1)
    type: Optional[BlockType] = None
    min_hours: Optional[float] = Field(None, gt=0, le=MAX_RANGE_HOURS, allow_inf_nan=False)
    max_hours: Optional[float] = Field(None, gt=0, le=MAX_RANGE_HOURS, allow_inf_nan=False)


class PreviewRequest(BaseModel):
    """Stateless schedule request."""
    tasks: List[Task] = Field(default_factory=list)
    config: ScheduleConfig


# Response models
class DayPlanResponse(BaseModel):
    """Response wrapping a day plan."""
    plan: DayPlan


class TaskResponse(BaseModel):
    """Response wrapping a single task."""
    task: Task


class BlockCompletionResponse(BaseModel):
    """Response for toggling a block's completion."""
    block: TimeBlock
    completed_count: int
    total_count: int
    encouragement: Optional[EncouragementMessage] = None
    streak: Optional[EncouragementMessage] = None


def _parse_plan_date(value: str) -> str:
    try:
        return date_type.fromisoformat(value).isoformat()
    except ValueError:
        raise HTTPException(status_code=400, detail=f"Invalid date '{value}', expected YYYY-MM-DD")


def _get_plan_or_404(repo: DayPlanRepository, plan_date: str) -> DayPlan:
    plan = repo.get(plan_date)
    if plan is None:
        raise HTTPException(status_code=404, detail=f"No plan for {plan_date}")
    return plan


def _completion_streak(blocks: List[TimeBlock], block_id: str) -> int:
    """Count consecutive completed blocks ending at the given block."""
    streak = 0
    for block in blocks:
        if block.is_completed:
            streak += 1
        else:
            streak = 0
        if block.id == block_id:
            return streak
    return 0


@app.get("/health")
async def health():
    """Health check endpoint."""
    return {"status": "healthy", "version": "0.1.0"}


@app.get("/plans/{plan_date}", response_model=DayPlanResponse)
def get_plan(
    plan_date: str,
    db: Session = Depends(get_db),
    preferences: Preferences = Depends(get_preferences),
):
    """Get the plan for a date, creating an empty one if needed."""
    plan_date = _parse_plan_date(plan_date)
    repo = DayPlanRepository(db)
    return DayPlanResponse(plan=repo.get_or_create(plan_date, preferences))


@app.patch("/plans/{plan_date}", response_model=DayPlanResponse)
def update_plan(
    plan_date: str,
    request: PlanSettingsUpdate,
    db: Session = Depends(get_db),
    preferences: Preferences = Depends(get_preferences),
):
    """Change intensity or wake/sleep times. The plan must be regenerated afterwards."""
    plan_date = _parse_plan_date(plan_date)
    repo = DayPlanRepository(db)
    repo.get_or_create(plan_date, preferences)
    changes = {field: getattr(request, field) for field in request.model_fields_set if getattr(request, field) is not None}
    plan = repo.update_settings(plan_date, **changes)
    return DayPlanResponse(plan=plan)


@app.post("/plans/{plan_date}/tasks", response_model=TaskResponse, status_code=201)
def add_task(
    plan_date: str,
    request: TaskCreateRequest,
    db: Session = Depends(get_db),
    preferences: Preferences = Depends(get_preferences),
):
    """Add a task to a day. Duration and flexibility are assigned by the system."""
    plan_date = _parse_plan_date(plan_date)
    repo = DayPlanRepository(db)
    repo.get_or_create(plan_date, preferences)
    try:
        task = create_task(request.title, request.type, request.min_hours, request.max_hours)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return TaskResponse(task=repo.tasks.create(plan_date, task))


@app.patch("/plans/{plan_date}/tasks/{task_id}", response_model=TaskResponse)
def update_task(
    plan_date: str,
    task_id: str,
    request: TaskUpdateRequest,
    db: Session = Depends(get_db),
):
    """Edit a task's title, type or work range."""
    plan_date = _parse_plan_date(plan_date)
    repo = DayPlanRepository(db)
    existing = repo.tasks.get(plan_date, task_id)
    if existing is None:
        raise HTTPException(status_code=404, detail=f"Task {task_id} not found")

    fields = request.model_fields_set
    title = request.title if "title" in fields and request.title is not None else existing.title
    task_type = request.type if "type" in fields and request.type is not None else existing.type
    min_hours = request.min_hours if "min_hours" in fields else existing.min_hours
    max_hours = request.max_hours if "max_hours" in fields else existing.max_hours
    if BlockType(task_type) != BlockType.WORK and not ({"min_hours", "max_hours"} & fields):
        # Switching away from work drops the range.
        min_hours = max_hours = None

    try:
        rebuilt = create_task(title, task_type, min_hours, max_hours)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    task = rebuilt.model_copy(update={"id": existing.id, "created_at": existing.created_at})
    return TaskResponse(task=repo.tasks.update(plan_date, task))


@app.delete("/plans/{plan_date}/tasks/{task_id}", status_code=204)
def remove_task(plan_date: str, task_id: str, db: Session = Depends(get_db)):
    """Remove a task from a day."""
    plan_date = _parse_plan_date(plan_date)
    repo = DayPlanRepository(db)
    if not repo.tasks.delete(plan_date, task_id):
        raise HTTPException(status_code=404, detail=f"Task {task_id} not found")


@app.post("/plans/{plan_date}/schedule", response_model=DayPlanResponse)
def build_schedule(plan_date: str, db: Session = Depends(get_db)):
    """Generate (or regenerate) the day's schedule from its tasks and settings."""
    plan_date = _parse_plan_date(plan_date)
    repo = DayPlanRepository(db)
    plan = _get_plan_or_404(repo, plan_date)
    if not plan.tasks:
        raise HTTPException(status_code=400, detail="No tasks for this day. Add a task first.")

    config = ScheduleConfig(
        wake_time=plan.wake_time,
        target_sleep_time=plan.sleep_time,
        intensity=plan.intensity,
        date=date_type.fromisoformat(plan_date),
    )
    result = generate_schedule(plan.tasks, config)
    logger.info(f"Generated schedule for {plan_date}: {len(result.blocks)} blocks, {len(result.warnings)} warnings")
    return DayPlanResponse(plan=repo.save_schedule(plan_date, result))


@app.post("/plans/{plan_date}/blocks/{block_id}/complete", response_model=BlockCompletionResponse)
def complete_block(
    plan_date: str,
    block_id: str,
    db: Session = Depends(get_db),
    rng: random.Random = Depends(get_rng),
):
    """Toggle a block's completion; newly completed blocks get an encouragement message."""
    plan_date = _parse_plan_date(plan_date)
    repo = DayPlanRepository(db)
    _get_plan_or_404(repo, plan_date)
    toggled = repo.toggle_block_complete(plan_date, block_id)
    if toggled is None:
        raise HTTPException(status_code=404, detail=f"Block {block_id} not found")

    plan, block = toggled
    completed_count = sum(1 for b in plan.blocks if b.is_completed)
    response = BlockCompletionResponse(
        block=block,
        completed_count=completed_count,
        total_count=len(plan.blocks),
    )
    if block.is_completed:
        response.encouragement = get_encouragement_message(
            block.type, completed_count, len(plan.blocks), plan.intensity, rng
        )
        response.streak = get_streak_message(_completion_streak(plan.blocks, block.id), rng)
    return response


@app.post("/schedule/preview", response_model=ScheduleResult)
def preview_schedule(request: PreviewRequest):
    """Generate a schedule without storing anything."""
    return generate_schedule(request.tasks, request.config)


@app.delete("/plans", status_code=204)
def reset_plans(db: Session = Depends(get_db)):
    """Delete every stored plan."""
    affected = DayPlanRepository(db).delete_all()
    logger.info(f"Reset removed {affected} day plans")


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
