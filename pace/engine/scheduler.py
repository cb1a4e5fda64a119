"""Scheduling algorithm for PACE.

Assigns every minute from wake time to the next day's wake time. Tasks carry
no times; the scheduler decides them.

Priority order:
1. Work (never reduced)
2. Essential and movement tasks (never reduced)
3. Breaks (shrink first, to half their nominal total)
4. Phone / social and leisure (only get what is left)
5. Sleep (borrowed from last, high intensity only, never below the floor)
"""

import logging
import math
import uuid
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import List, Optional, Sequence, Tuple

from pace.models.task import Task, BlockType, Intensity
from pace.models.time_block import TimeBlock
from pace.models.schedule import ScheduleConfig, ScheduleResult, ScheduleStats, parse_time_of_day
from pace.models.constants import (
    INTENSITY_CONFIGS,
    IntensityConfig,
    DEFAULT_WORK_BLOCK_MINUTES,
    MORNING_ROUTINE_MINUTES,
    MEAL_DURATION_MINUTES,
    DAY_MINUTES,
    BREAK_REDUCTION_RATIO,
    PHONE_SHARE,
    LEISURE_SHARE,
    WIND_DOWN_CAP_MINUTES,
    WIND_DOWN_MIN_MINUTES,
    MIN_PHONE_BLOCK_MINUTES,
    MIN_LEISURE_BLOCK_MINUTES,
    REDUCTION_BASELINE_MINUTES,
    REQUESTED_BASELINE_MINUTES,
    LONG_WORK_BLOCK_MINUTES,
    LONG_WORK_BREAK_BONUS_MINUTES,
    LUNCH_WINDOW_START_HOUR,
    LUNCH_WINDOW_END_HOUR,
    MORNING_ROUTINE_LABEL,
    LUNCH_LABEL,
    BREAK_LABEL,
    PHONE_DEFAULT_LABEL,
    LEISURE_DEFAULT_LABEL,
    WIND_DOWN_LABEL,
)

logger = logging.getLogger(__name__)

# Namespace for deterministic block ids (same inputs -> same ids).
BLOCK_ID_NAMESPACE = uuid.UUID("6f1c2b1e-3f57-4c1a-9d7e-5a2f0c8b9e41")

ESSENTIAL_TYPES = (BlockType.ESSENTIAL, BlockType.MOVEMENT)
PHONE_TYPES = (BlockType.PHONE, BlockType.SOCIAL)


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def _minutes_between(start: datetime, end: datetime) -> int:
    return int((end - start).total_seconds() // 60)


def _format_hours(minutes: float) -> str:
    """Format minutes as hours with at most one decimal ("1.5", "2")."""
    return f"{round(abs(minutes) / 60, 1):g}"


def work_duration_minutes(task: Task, intensity: Intensity) -> int:
    """Calculate a work block's length from the task's hour range.

    Without a range the default block length is used. With one:
    - LOW: the minimum (easier day)
    - MEDIUM: the midpoint, rounded to the nearest minute
    - HIGH: the maximum (push harder)
    """
    if not task.has_range:
        return DEFAULT_WORK_BLOCK_MINUTES

    min_minutes = task.min_hours * 60
    max_minutes = task.max_hours * 60
    intensity = Intensity(intensity)
    if intensity == Intensity.LOW:
        return _round_half_up(min_minutes)
    if intensity == Intensity.MEDIUM:
        return _round_half_up((min_minutes + max_minutes) / 2)
    return _round_half_up(max_minutes)


def break_floor_minutes(break_duration: int) -> int:
    """Shortest a single break may be made (half its nominal length, rounded up)."""
    return break_duration - int(break_duration * BREAK_REDUCTION_RATIO)


@dataclass(frozen=True)
class Allocation:
    """Minute budget for one day, before layout."""
    work: Tuple[Tuple[Task, int], ...]
    total_work_minutes: int
    total_essential_minutes: int
    nominal_break_minutes: int
    break_length: int
    break_reduction: int
    available_minutes: int
    nominal_sleep_minutes: int
    sleep_borrowed: int
    flexible_minutes: int
    phone_minutes: int
    leisure_minutes: int
    phone_reduced: bool
    leisure_reduced: bool

    @property
    def breaks_reduced(self) -> bool:
        return self.break_reduction > 0

    @property
    def breaks_shortened(self) -> bool:
        """Whether any laid-out break is shorter than nominal (a lone work task has none)."""
        return self.breaks_reduced and len(self.work) > 1

    @property
    def sleep_reduced(self) -> bool:
        return self.sleep_borrowed > 0

    @property
    def over_allocated(self) -> bool:
        return self.flexible_minutes < 0


def allocate(tasks: Sequence[Task], intensity: Intensity, available_minutes: int) -> Allocation:
    """Resolve the day's minute budget.

    Work and essential minutes are fixed. A deficit is absorbed by breaks
    first, then (high intensity only) by borrowing sleep; whatever is still
    missing is left negative for the caller to warn about. A surplus is
    shared out to phone and leisure.
    """
    intensity = Intensity(intensity)
    cfg: IntensityConfig = INTENSITY_CONFIGS[intensity]

    work_tasks = [t for t in tasks if t.type == BlockType.WORK]
    essential_tasks = [t for t in tasks if t.type in ESSENTIAL_TYPES]
    phone_tasks = [t for t in tasks if t.type in PHONE_TYPES]
    leisure_tasks = [t for t in tasks if t.type == BlockType.LEISURE]

    work = tuple((task, work_duration_minutes(task, intensity)) for task in work_tasks)
    total_work = sum(minutes for _, minutes in work)
    total_essential = sum(t.estimated_minutes for t in essential_tasks)

    break_count = len(work_tasks)
    nominal_breaks = break_count * cfg.break_duration
    fixed = MORNING_ROUTINE_MINUTES + MEAL_DURATION_MINUTES

    required = total_work + total_essential + nominal_breaks + fixed
    flexible = available_minutes - required
    nominal_sleep = DAY_MINUTES - available_minutes

    break_reduction = 0
    break_length = cfg.break_duration
    sleep_borrowed = 0

    if flexible < 0:
        # Breaks first, never below half of each one.
        max_break_reduction = break_count * (cfg.break_duration - break_floor_minutes(cfg.break_duration))
        break_reduction = min(-flexible, max_break_reduction)
        if break_reduction > 0:
            flexible += break_reduction
            break_length = cfg.break_duration - math.ceil(break_reduction / break_count)
            logger.debug(f"Breaks reduced by {break_reduction} min to {break_length} min each")

        # Then sleep, high intensity only, clamped so sleep stays above the floor.
        if flexible < 0 and intensity == Intensity.HIGH:
            floor_minutes = _round_half_up(cfg.min_sleep_hours * 60)
            headroom = max(0, nominal_sleep - floor_minutes)
            sleep_borrowed = min(-flexible, cfg.sleep_reduction_minutes, headroom)
            if sleep_borrowed > 0:
                flexible += sleep_borrowed
                logger.debug(f"Borrowed {sleep_borrowed} min of sleep (headroom {headroom} min)")

    phone_minutes = 0
    leisure_minutes = 0
    if flexible > 0 and tasks:
        phone_minutes = min(cfg.max_phone_minutes, int(flexible * PHONE_SHARE))
        leisure_minutes = min(cfg.max_leisure_minutes, int((flexible - phone_minutes) * LEISURE_SHARE))

    return Allocation(
        work=work,
        total_work_minutes=total_work,
        total_essential_minutes=total_essential,
        nominal_break_minutes=nominal_breaks,
        break_length=break_length,
        break_reduction=break_reduction,
        available_minutes=available_minutes,
        nominal_sleep_minutes=nominal_sleep,
        sleep_borrowed=sleep_borrowed,
        flexible_minutes=flexible,
        phone_minutes=phone_minutes,
        leisure_minutes=leisure_minutes,
        phone_reduced=bool(phone_tasks) and phone_minutes < REDUCTION_BASELINE_MINUTES,
        leisure_reduced=bool(leisure_tasks) and leisure_minutes < REDUCTION_BASELINE_MINUTES,
    )


class ScheduleBuilder:
    """Lays blocks end to end from a moving cursor.

    Blocks are immutable; the builder only appends and hands back a tuple
    once the day is complete.
    """

    def __init__(self, start: datetime, seed: str):
        self.cursor = start
        self._seed = seed
        self._blocks: List[TimeBlock] = []

    def add(
        self,
        minutes: int,
        label: str,
        block_type: BlockType,
        task_id: Optional[str] = None,
        is_reduced: bool = False,
        original_minutes: Optional[int] = None,
    ) -> Optional[TimeBlock]:
        """Append a block of the given length; zero-length blocks are skipped."""
        if minutes <= 0:
            return None
        return self.add_until(
            self.cursor + timedelta(minutes=minutes),
            label,
            block_type,
            task_id=task_id,
            is_reduced=is_reduced,
            original_minutes=original_minutes,
        )

    def add_until(
        self,
        end: datetime,
        label: str,
        block_type: BlockType,
        task_id: Optional[str] = None,
        is_reduced: bool = False,
        original_minutes: Optional[int] = None,
    ) -> Optional[TimeBlock]:
        """Append a block running from the cursor to ``end``."""
        if end <= self.cursor:
            return None
        block_type = BlockType(block_type)
        key = f"{self._seed}:{len(self._blocks)}:{block_type.value}:{task_id or label}"
        block = TimeBlock(
            id=str(uuid.uuid5(BLOCK_ID_NAMESPACE, key)),
            start=self.cursor,
            end=end,
            label=label,
            type=block_type,
            task_id=task_id,
            is_reduced=is_reduced,
            original_minutes=original_minutes if is_reduced else None,
        )
        self._blocks.append(block)
        self.cursor = end
        return block

    def build(self) -> Tuple[TimeBlock, ...]:
        return tuple(self._blocks)


def generate_schedule(tasks: Sequence[Task], config: ScheduleConfig) -> ScheduleResult:
    """Generate a full-day schedule.

    Pure and deterministic: the same tasks and config always give the same
    blocks, tradeoffs and warnings. Never raises for any task list; days that
    do not fit come back with warnings attached.

    Args:
        tasks: Tasks in input order
        config: Wake/sleep times, intensity and reference date

    Returns:
        ScheduleResult covering wake time to the next day's wake time
    """
    intensity = Intensity(config.intensity)
    cfg = INTENSITY_CONFIGS[intensity]
    tasks = list(tasks)

    wake = datetime.combine(config.date, parse_time_of_day(config.wake_time))
    nominal_target_sleep = datetime.combine(config.date, parse_time_of_day(config.target_sleep_time))
    next_wake = wake + timedelta(minutes=DAY_MINUTES)

    alloc = allocate(tasks, intensity, _minutes_between(wake, nominal_target_sleep))
    target_sleep = nominal_target_sleep + timedelta(minutes=alloc.sleep_borrowed)

    logger.debug(
        f"Allocating {config.date}: available={alloc.available_minutes} work={alloc.total_work_minutes} "
        f"essential={alloc.total_essential_minutes} flexible={alloc.flexible_minutes} "
        f"phone={alloc.phone_minutes} leisure={alloc.leisure_minutes}"
    )

    warnings: List[str] = []
    if alloc.over_allocated:
        warnings.append(
            f"You have {_format_hours(alloc.flexible_minutes)}h more work than time allows. "
            f"Consider removing a task or starting earlier."
        )

    builder = ScheduleBuilder(wake, seed=config.date.isoformat())
    builder.add(MORNING_ROUTINE_MINUTES, MORNING_ROUTINE_LABEL, BlockType.ESSENTIAL)

    lunch_placed = False
    for index, (task, minutes) in enumerate(alloc.work):
        # Lunch goes in front of the first work block that starts in the window.
        if not lunch_placed and LUNCH_WINDOW_START_HOUR <= builder.cursor.hour < LUNCH_WINDOW_END_HOUR:
            builder.add(MEAL_DURATION_MINUTES, LUNCH_LABEL, BlockType.MEAL)
            lunch_placed = True

        label = f"{task.title} ({minutes / 60:.1f}h)" if task.has_range else task.title
        builder.add(minutes, label, BlockType.WORK, task_id=task.id)

        if index < len(alloc.work) - 1:
            if alloc.breaks_reduced:
                break_minutes = alloc.break_length
            elif minutes > LONG_WORK_BLOCK_MINUTES:
                break_minutes = cfg.break_duration + LONG_WORK_BREAK_BONUS_MINUTES
            else:
                break_minutes = cfg.break_duration
            builder.add(
                break_minutes,
                BREAK_LABEL,
                BlockType.BREAK,
                is_reduced=alloc.breaks_reduced,
                original_minutes=cfg.break_duration,
            )

    if not lunch_placed:
        builder.add(MEAL_DURATION_MINUTES, LUNCH_LABEL, BlockType.MEAL)

    for task in tasks:
        if task.type in ESSENTIAL_TYPES:
            builder.add(task.estimated_minutes, task.title, task.type, task_id=task.id)

    phone_tasks = [t for t in tasks if t.type in PHONE_TYPES]
    if alloc.phone_minutes >= MIN_PHONE_BLOCK_MINUTES:
        builder.add(
            alloc.phone_minutes,
            phone_tasks[0].title if phone_tasks else PHONE_DEFAULT_LABEL,
            BlockType.PHONE,
            task_id=phone_tasks[0].id if phone_tasks else None,
            is_reduced=alloc.phone_reduced,
            original_minutes=REQUESTED_BASELINE_MINUTES,
        )

    leisure_tasks = [t for t in tasks if t.type == BlockType.LEISURE]
    if alloc.leisure_minutes >= MIN_LEISURE_BLOCK_MINUTES:
        builder.add(
            alloc.leisure_minutes,
            leisure_tasks[0].title if leisure_tasks else LEISURE_DEFAULT_LABEL,
            BlockType.LEISURE,
            task_id=leisure_tasks[0].id if leisure_tasks else None,
            is_reduced=alloc.leisure_reduced,
            original_minutes=REQUESTED_BASELINE_MINUTES,
        )

    until_sleep = _minutes_between(builder.cursor, target_sleep)
    if tasks and until_sleep > WIND_DOWN_MIN_MINUTES:
        builder.add(min(WIND_DOWN_CAP_MINUTES, until_sleep), WIND_DOWN_LABEL, BlockType.LEISURE)

    sleep_minutes = max(0, _minutes_between(builder.cursor, next_wake))
    builder.add_until(
        next_wake,
        f"Sleep ({sleep_minutes / 60:.1f}h)",
        BlockType.SLEEP,
        is_reduced=alloc.sleep_reduced,
        original_minutes=alloc.nominal_sleep_minutes,
    )

    # Planned sleep starts at the target sleep time, or later if the day ran over.
    planned_sleep = _minutes_between(max(builder.cursor, target_sleep), next_wake)
    floor_minutes = _round_half_up(cfg.min_sleep_hours * 60)
    if sleep_minutes <= 0:
        overrun = _minutes_between(next_wake, builder.cursor)
        warnings.append(
            f"The day runs {_format_hours(overrun)}h past tomorrow's wake time. No sleep could be scheduled."
        )
    elif planned_sleep < floor_minutes:
        warnings.append(
            f"Sleep is down to {max(0, planned_sleep) / 60:.1f}h, below the {cfg.min_sleep_hours:g}h minimum."
        )

    blocks = builder.build()
    stats = compute_stats(blocks, sleep_reduced=alloc.sleep_reduced)
    tradeoffs = _tradeoff_messages(
        intensity,
        cfg,
        alloc,
        has_ranged_work=any(task.has_range for task, _ in alloc.work),
        has_phone_tasks=bool(phone_tasks),
        has_leisure_tasks=bool(leisure_tasks),
        sleep_hours=stats.sleep_hours,
    )

    for warning in warnings:
        logger.warning(f"Schedule for {config.date}: {warning}")

    return ScheduleResult(
        blocks=blocks,
        tradeoffs=tuple(tradeoffs),
        warnings=tuple(warnings),
        stats=stats,
    )


def compute_stats(blocks: Sequence[TimeBlock], sleep_reduced: bool = False) -> ScheduleStats:
    """Sum block durations per category from the laid-out blocks."""
    totals = {block_type: 0 for block_type in BlockType}
    for block in blocks:
        totals[BlockType(block.type)] += block.duration_minutes

    return ScheduleStats(
        total_work_minutes=totals[BlockType.WORK],
        total_essential_minutes=totals[BlockType.ESSENTIAL] + totals[BlockType.MOVEMENT],
        total_break_minutes=totals[BlockType.BREAK],
        total_phone_minutes=totals[BlockType.PHONE] + totals[BlockType.SOCIAL],
        total_leisure_minutes=totals[BlockType.LEISURE],
        total_meal_minutes=totals[BlockType.MEAL],
        sleep_hours=totals[BlockType.SLEEP] / 60,
        sleep_reduced=sleep_reduced,
    )


def _tradeoff_messages(
    intensity: Intensity,
    cfg: IntensityConfig,
    alloc: Allocation,
    has_ranged_work: bool,
    has_phone_tasks: bool,
    has_leisure_tasks: bool,
    sleep_hours: float,
) -> List[str]:
    tradeoffs: List[str] = []

    if intensity == Intensity.HIGH:
        tradeoffs.append("High intensity mode. Work blocks are fully protected.")
        if has_ranged_work:
            tradeoffs.append("Work time ranges set to maximum for maximum productivity.")
        if alloc.breaks_shortened:
            tradeoffs.append("Breaks shortened to maximize productive time.")
        if alloc.phone_reduced or has_phone_tasks:
            tradeoffs.append("Phone/social time minimized.")
        if alloc.leisure_reduced or has_leisure_tasks:
            tradeoffs.append("Leisure time reduced to protect work.")
        if alloc.sleep_reduced:
            tradeoffs.append(
                f"Sleep adjusted to {sleep_hours:.1f}h (minimum {cfg.min_sleep_hours:g}h protected)."
            )
    elif intensity == Intensity.MEDIUM:
        tradeoffs.append("Medium intensity. Balanced schedule with focused work time.")
        if has_ranged_work:
            tradeoffs.append("Work time ranges set to midpoint for balance.")
        if alloc.breaks_shortened:
            tradeoffs.append("Breaks shortened to fit the day.")
        if alloc.phone_reduced:
            tradeoffs.append("Phone time slightly limited.")
        if alloc.leisure_reduced:
            tradeoffs.append("Leisure time limited to fit the day.")
    else:
        tradeoffs.append("Low intensity day. Full recovery and balance prioritized.")
        if has_ranged_work:
            tradeoffs.append("Work time ranges set to minimum, leaving more time for you.")
        if alloc.breaks_shortened:
            tradeoffs.append("Breaks shortened to fit the day.")
        if alloc.phone_reduced:
            tradeoffs.append("Phone time limited to fit the day.")
        if alloc.leisure_reduced:
            tradeoffs.append("Leisure time limited to fit the day.")

    return tradeoffs
