import pytest

from habit_tracker.models import HabitCategory, HabitTask, TaskLog, User, WorkoutLog


@pytest.mark.parametrize("model", [User, HabitCategory, HabitTask, TaskLog, WorkoutLog])
def test_created_at_is_timezone_aware(model):
    assert model.__table__.c.created_at.type.timezone is True
