"""
progress_tracker.py — Cumulative progress toward a habit's numeric target.

A habit is in one of three target states:
  NO_TARGET    target_value is None; quantities are not accumulated
  IN_PROGRESS  target set, not yet reached; quantities accumulate
  ACHIEVED     target reached and stamped; frozen until a new target starts
"""

import enum
import logging
import math
from datetime import datetime, timezone
from typing import Callable, Optional

from habit_tracker.errors import InvalidQuantity, InvalidTarget, NegativeQuantity, InvalidTransition
from habit_tracker.services.habit_state import HabitState, TargetHistoryRecord

logger = logging.getLogger(__name__)


class TargetState(str, enum.Enum):
    NO_TARGET = "no_target"
    IN_PROGRESS = "in_progress"
    ACHIEVED = "achieved"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _is_number(value) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool) and math.isfinite(value)


def validate_target(value, unit):
    """Raise InvalidTarget unless value is a finite positive number and unit is non-blank."""
    if not _is_number(value) or value <= 0:
        raise InvalidTarget("target_value must be a positive number")
    if not isinstance(unit, str) or not unit.strip():
        raise InvalidTarget("target_unit is required")


class ProgressTracker:
    def __init__(self, clock: Optional[Callable[[], datetime]] = None):
        self.clock = clock or _utcnow

    @staticmethod
    def state_of(habit: HabitState) -> TargetState:
        if habit.target_value is None:
            return TargetState.NO_TARGET
        if habit.target_achieved:
            return TargetState.ACHIEVED
        return TargetState.IN_PROGRESS

    def add_progress(self, habit: HabitState, quantity) -> HabitState:
        if not _is_number(quantity):
            raise InvalidQuantity(f"Quantity must be a number, got {quantity!r}")
        if quantity < 0:
            raise NegativeQuantity(f"Quantity must not be negative, got {quantity}")

        state = self.state_of(habit)
        if state is TargetState.NO_TARGET:
            return habit
        if state is TargetState.ACHIEVED:
            raise InvalidTransition("Target already achieved; start a new target before adding progress")

        return habit.with_changes(current_progress=(habit.current_progress or 0.0) + quantity)

    def evaluate_achievement(self, habit: HabitState, now: Optional[datetime] = None) -> HabitState:
        if self.state_of(habit) is not TargetState.IN_PROGRESS:
            return habit
        if (habit.current_progress or 0.0) < habit.target_value:
            return habit

        achieved_at = now or self.clock()
        logger.info(f"Target {habit.target_value} {habit.target_unit} reached at {achieved_at.isoformat()}")
        return habit.with_changes(target_achieved=True, target_achieved_at=achieved_at)

    def start_new_target(self, habit: HabitState, new_target_value, new_target_unit,
                         now: Optional[datetime] = None):
        """Replace the habit's target. Returns (new state, archived cycle or None).

        Validation happens before anything is built, so a rejected target
        leaves no trace.
        """
        validate_target(new_target_value, new_target_unit)

        now = now or self.clock()
        archived = None
        if habit.target_value is not None:
            archived = TargetHistoryRecord(
                target_value=habit.target_value,
                target_unit=habit.target_unit or "",
                started_at=habit.target_started_at,
                achieved_at=habit.target_achieved_at,
                final_progress=habit.current_progress or 0.0,
            )

        updated = habit.with_changes(
            target_value=float(new_target_value),
            target_unit=new_target_unit.strip(),
            current_progress=0.0,
            target_achieved=False,
            target_achieved_at=None,
            target_started_at=now,
        )
        return updated, archived
