"""Constants for PACE.

This module centralizes the lookup tables and magic numbers used by the
scheduler. Tables are read-only mappings keyed by enum.
"""

from dataclasses import dataclass
from types import MappingProxyType

from pace.models.task import BlockType, Intensity, DAY_MINUTES


@dataclass(frozen=True)
class IntensityConfig:
    """Per-intensity compression settings."""
    break_duration: int
    break_frequency: int
    max_phone_minutes: int
    max_leisure_minutes: int
    sleep_reduction_minutes: int
    min_sleep_hours: float


INTENSITY_CONFIGS = MappingProxyType({
    Intensity.LOW: IntensityConfig(
        break_duration=20,
        break_frequency=90,
        max_phone_minutes=60,
        max_leisure_minutes=120,
        sleep_reduction_minutes=0,
        min_sleep_hours=8.0,
    ),
    Intensity.MEDIUM: IntensityConfig(
        break_duration=15,
        break_frequency=90,
        max_phone_minutes=30,
        max_leisure_minutes=60,
        sleep_reduction_minutes=0,
        min_sleep_hours=7.5,
    ),
    Intensity.HIGH: IntensityConfig(
        break_duration=10,
        break_frequency=120,
        max_phone_minutes=15,
        max_leisure_minutes=30,
        sleep_reduction_minutes=60,
        min_sleep_hours=6.5,
    ),
})

# System-assigned durations; the user never picks a number.
DEFAULT_DURATIONS = MappingProxyType({
    BlockType.WORK: 90,
    BlockType.ESSENTIAL: 30,
    BlockType.MOVEMENT: 45,
    BlockType.PHONE: 30,
    BlockType.SOCIAL: 60,
    BlockType.LEISURE: 60,
    BlockType.BREAK: 15,  # System managed
    BlockType.SLEEP: 480,  # System managed
    BlockType.MEAL: 30,  # System managed
})

# Fixed blocks
DEFAULT_WORK_BLOCK_MINUTES = 90
MORNING_ROUTINE_MINUTES = 30
MEAL_DURATION_MINUTES = 30

# Reduction cascade
BREAK_REDUCTION_RATIO = 0.5  # Breaks give up at most half their nominal total

# Flexible-time allocation
PHONE_SHARE = 0.3
LEISURE_SHARE = 0.5
WIND_DOWN_CAP_MINUTES = 30
WIND_DOWN_MIN_MINUTES = 15  # Wind-down only when strictly more is left
MIN_PHONE_BLOCK_MINUTES = 10
MIN_LEISURE_BLOCK_MINUTES = 15

# Reduction flags for phone/leisure
REDUCTION_BASELINE_MINUTES = 30
REQUESTED_BASELINE_MINUTES = 60

# Breaks after long work blocks
LONG_WORK_BLOCK_MINUTES = 120
LONG_WORK_BREAK_BONUS_MINUTES = 5

# Lunch is slotted when the layout cursor's hour falls in [start, end)
LUNCH_WINDOW_START_HOUR = 12
LUNCH_WINDOW_END_HOUR = 14

# Labels
MORNING_ROUTINE_LABEL = "Morning Routine"
LUNCH_LABEL = "Lunch"
BREAK_LABEL = "Break"
PHONE_DEFAULT_LABEL = "Phone / Social Time"
LEISURE_DEFAULT_LABEL = "Free Time"
WIND_DOWN_LABEL = "Evening Wind-down"

# Day plan defaults
DEFAULT_WAKE_TIME = "07:00"
DEFAULT_SLEEP_TIME = "23:00"
DEFAULT_INTENSITY = Intensity.MEDIUM
