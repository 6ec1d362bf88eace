"""
log_reconciler.py — Turns one recorded habit log into the habit-row changes it implies.
Only completed logs move a habit: the due date advances and, for habits with an
open target, the logged quantity is folded into progress.
"""

import logging
from datetime import datetime
from typing import Optional

from habit_tracker.errors import TrackerError
from habit_tracker.services.due_dates import compute_next_due_date
from habit_tracker.services.habit_state import HabitState, HabitMutation, LogEvent
from habit_tracker.services.progress_tracker import ProgressTracker, TargetState

logger = logging.getLogger(__name__)

COMPLETED = "completed"


class LogReconciler:
    def __init__(self, progress: Optional[ProgressTracker] = None):
        self.progress = progress or ProgressTracker()

    def reconcile(self, habit: HabitState, log: LogEvent, now: Optional[datetime] = None) -> HabitMutation:
        mutation = HabitMutation()
        if log.status != COMPLETED:
            return mutation

        # Scheduling and progress fail independently; whatever succeeded stays staged.
        try:
            self._stage_schedule(habit, log, mutation)
        except Exception as e:
            logger.exception("Failed to compute next due date")
            mutation.warn(f"Schedule not updated: {e}")

        try:
            self._stage_progress(habit, log, mutation, now)
        except TrackerError as e:
            logger.warning(f"Progress not updated: {e.message}")
            mutation.warn(f"Progress not updated: {e.message}")
        except Exception as e:
            logger.exception("Failed to update progress")
            mutation.warn(f"Progress not updated: {e}")

        return mutation

    def _stage_schedule(self, habit: HabitState, log: LogEvent, mutation: HabitMutation):
        update = compute_next_due_date(habit.start_date, habit.frequency_of_task, log.local_date)
        if update is None:
            return
        mutation.stage(
            last_execution_date=update.last_execution_date,
            next_execution_date=update.next_execution_date,
        )

    def _stage_progress(self, habit: HabitState, log: LogEvent, mutation: HabitMutation,
                        now: Optional[datetime]):
        if log.quantity is None or habit.target_value is None:
            return
        if self.progress.state_of(habit) is TargetState.ACHIEVED:
            logger.debug(f"Target already achieved; quantity {log.quantity} not accumulated")
            return

        updated = self.progress.add_progress(habit, log.quantity)
        updated = self.progress.evaluate_achievement(updated, now=now)
        mutation.stage(
            current_progress=updated.current_progress,
            target_achieved=updated.target_achieved,
            target_achieved_at=updated.target_achieved_at,
        )
