# Import all models so they register with SQLAlchemy Base.metadata
# This ensures Base.metadata.create_all() creates all tables

from habit_tracker.models.user import User, Weekday
from habit_tracker.models.habit_category import HabitCategory
from habit_tracker.models.habit_task import HabitTask
from habit_tracker.models.task_log import TaskLog
from habit_tracker.models.target_history import TargetHistoryEntry
from habit_tracker.models.workout_log import WorkoutLog

__all__ = [
    "User",
    "Weekday",
    "HabitCategory",
    "HabitTask",
    "TaskLog",
    "TargetHistoryEntry",
    "WorkoutLog",
]
