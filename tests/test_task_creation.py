"""Tests for task creation and model validation."""

import pytest
from datetime import datetime, timedelta
from pydantic import ValidationError

from pace.models.task import Task, BlockType, Intensity
from pace.models.time_block import TimeBlock
from pace.models.schedule import ScheduleConfig, parse_time_of_day
from pace.models.day_plan import Preferences
from pace.models.task_factory import create_task, default_minutes_for, is_flexible_type


class TestTaskCreationDefaults:
    """Test that the factory assigns durations and flexibility."""

    @pytest.mark.parametrize("task_type,minutes", [
        (BlockType.WORK, 90),
        (BlockType.ESSENTIAL, 30),
        (BlockType.MOVEMENT, 45),
        (BlockType.PHONE, 30),
        (BlockType.SOCIAL, 60),
        (BlockType.LEISURE, 60),
    ])
    def test_default_minutes_per_type(self, task_type, minutes):
        """Each user type gets its fixed default duration."""
        task = create_task("Something", task_type)

        assert task.estimated_minutes == minutes
        assert task.type == task_type
        assert task.min_hours is None and task.max_hours is None

    def test_flexibility_by_type(self):
        """Only work and essential tasks are inflexible."""
        assert is_flexible_type(BlockType.WORK) is False
        assert is_flexible_type("essential") is False
        for task_type in (BlockType.MOVEMENT, BlockType.PHONE, BlockType.SOCIAL, BlockType.LEISURE):
            assert create_task("Something", task_type).is_flexible is True

    def test_work_range_estimate_is_midpoint(self):
        """A 2-4h work range is estimated at 180 minutes."""
        task = create_task("Design mockup", BlockType.WORK, min_hours=2, max_hours=4)

        assert task.estimated_minutes == 180
        assert task.has_range is True
        assert default_minutes_for(BlockType.WORK, 1, 2) == 90

    def test_ids_are_unique(self):
        """Every created task gets its own UUID."""
        ids = {create_task("Task", BlockType.WORK).id for _ in range(20)}
        assert len(ids) == 20

    def test_title_is_stripped(self):
        """Surrounding whitespace is removed from titles."""
        assert create_task("  Call mom  ", "phone").title == "Call mom"


class TestTaskCreationErrors:
    """Test inputs the factory rejects."""

    @pytest.mark.parametrize("task_type", ["break", "sleep", "meal"])
    def test_system_types_rejected(self, task_type):
        """Break, sleep and meal blocks are only made by the scheduler."""
        with pytest.raises(ValueError, match="managed by the scheduler"):
            create_task("Nap", task_type)

    def test_unknown_type_rejected(self):
        """An unknown type is a ValueError."""
        with pytest.raises(ValueError):
            create_task("Something", "chores")

    def test_range_on_non_work_rejected(self):
        """Only work tasks take an hour range."""
        with pytest.raises(ValueError, match="Only work tasks"):
            create_task("Gym", BlockType.MOVEMENT, min_hours=1, max_hours=2)

    def test_blank_title_rejected(self):
        """A whitespace-only title fails validation."""
        with pytest.raises(ValidationError):
            create_task("   ", BlockType.WORK)

    def test_half_range_rejected(self):
        """min_hours without max_hours fails validation."""
        with pytest.raises(ValidationError):
            create_task("Write", BlockType.WORK, min_hours=2)

    @pytest.mark.parametrize("max_hours", [float("inf"), float("nan"), 1e8, 24.5])
    def test_range_beyond_one_day_rejected(self, max_hours):
        """Work ranges are finite and at most 24 hours."""
        with pytest.raises(ValidationError):
            create_task("Write", BlockType.WORK, min_hours=1, max_hours=max_hours)

    def test_full_day_range_accepted(self):
        """A 24-hour upper bound is allowed."""
        assert create_task("Write", BlockType.WORK, min_hours=1, max_hours=24).max_hours == 24

    def test_estimated_minutes_beyond_one_day_rejected(self, make_task):
        """A task cannot be estimated at more than a day."""
        with pytest.raises(ValidationError):
            make_task(BlockType.ESSENTIAL, estimated_minutes=10 ** 13)

    def test_inverted_range_rejected(self):
        """min_hours above max_hours fails validation."""
        with pytest.raises(ValidationError):
            create_task("Write", BlockType.WORK, min_hours=4, max_hours=2)


class TestValueModels:
    """Tasks, blocks and configs are immutable and self-validating."""

    def test_task_is_frozen(self, make_task):
        """Assigning to a task field raises."""
        task = make_task(BlockType.WORK)
        with pytest.raises(ValidationError):
            task.title = "Changed"

    def test_block_must_end_after_start(self):
        """Zero-length blocks are invalid."""
        start = datetime(2024, 1, 15, 9, 0)
        with pytest.raises(ValidationError):
            TimeBlock(id="b1", start=start, end=start, label="Break", type=BlockType.BREAK)

    def test_original_minutes_only_when_reduced(self):
        """original_minutes without is_reduced is invalid."""
        start = datetime(2024, 1, 15, 9, 0)
        with pytest.raises(ValidationError):
            TimeBlock(
                id="b1",
                start=start,
                end=start + timedelta(minutes=5),
                label="Break",
                type=BlockType.BREAK,
                original_minutes=10,
            )

    def test_block_duration(self):
        """duration_minutes is end minus start."""
        start = datetime(2024, 1, 15, 9, 0)
        block = TimeBlock(id="b1", start=start, end=start + timedelta(minutes=45), label="Gym", type="movement")
        assert block.duration_minutes == 45
        assert block.type == "movement"

    @pytest.mark.parametrize("value", ["7:00", "24:00", "07:60", "", "noon"])
    def test_invalid_time_of_day(self, value):
        """Times must be zero-padded 24-hour HH:mm."""
        with pytest.raises(ValueError):
            parse_time_of_day(value)

    def test_config_rejects_bad_wake_time(self, make_config):
        """ScheduleConfig validates its times."""
        with pytest.raises(ValidationError):
            make_config(wake_time="25:00")

    def test_config_stores_enum_value(self, make_config):
        """Intensity is kept as its string value."""
        assert make_config(Intensity.HIGH).intensity == "high"


class TestPreferences:
    """Defaults for new plans."""

    def test_defaults(self):
        """Built-in defaults are 07:00, 23:00 and medium."""
        prefs = Preferences()
        assert (prefs.default_wake_time, prefs.default_sleep_time, prefs.default_intensity) == (
            "07:00", "23:00", "medium"
        )

    def test_from_env(self, monkeypatch):
        """PACE_DEFAULT_* variables override the defaults."""
        monkeypatch.setenv("PACE_DEFAULT_WAKE_TIME", "06:30")
        monkeypatch.setenv("PACE_DEFAULT_SLEEP_TIME", "22:15")
        monkeypatch.setenv("PACE_DEFAULT_INTENSITY", "HIGH")

        prefs = Preferences.from_env()
        assert prefs.default_wake_time == "06:30"
        assert prefs.default_sleep_time == "22:15"
        assert prefs.default_intensity == "high"

    def test_from_env_rejects_bad_time(self, monkeypatch):
        """A malformed time in the environment fails validation."""
        monkeypatch.setenv("PACE_DEFAULT_WAKE_TIME", "late")
        with pytest.raises(ValidationError):
            Preferences.from_env()
