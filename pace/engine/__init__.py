"""Scheduling engine for PACE."""

from pace.engine.scheduler import generate_schedule, allocate, work_duration_minutes, compute_stats, Allocation
from pace.engine.encouragement import get_encouragement_message, get_streak_message, EncouragementMessage

__all__ = [
    "generate_schedule",
    "allocate",
    "work_duration_minutes",
    "compute_stats",
    "Allocation",
    "get_encouragement_message",
    "get_streak_message",
    "EncouragementMessage",
]
