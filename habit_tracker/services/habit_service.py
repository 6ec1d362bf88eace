"""
habit_service.py — Habits, due lists and target cycles
CRUD for recurring habits, the "due as of" query, and the two writes the
scheduling core drives: applying a reconciled log and starting a new target.
"""

import logging
from datetime import date, datetime, timezone
from typing import Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from habit_tracker.errors import HabitNotFound, InvalidCategory
from habit_tracker.models.habit_task import HabitTask
from habit_tracker.models.target_history import TargetHistoryEntry
from habit_tracker.services.category_service import CategoryService
from habit_tracker.services.due_dates import initial_due_date
from habit_tracker.services.habit_state import HabitState, HabitMutation, LogEvent
from habit_tracker.services.log_reconciler import LogReconciler
from habit_tracker.services.progress_tracker import ProgressTracker, validate_target

logger = logging.getLogger(__name__)

# Fields a plain edit may touch. Targets change only through set_target.
EDITABLE_FIELDS = (
    "name", "description", "start_date", "frequency_of_task", "routine",
    "display_order", "kind", "category_id", "last_execution_date", "next_execution_date",
)
# Columns that are NOT NULL; a null in an edit leaves them unchanged
REQUIRED_FIELDS = ("name", "start_date")


class HabitService:
    @staticmethod
    def _check_category(db: Session, user_id: int, category_id: Optional[int]):
        if category_id is not None and not CategoryService.get_by_id(db, user_id, category_id):
            raise InvalidCategory(f"Category {category_id} not found")

    @staticmethod
    def create(db: Session, user_id: int, data: dict) -> HabitTask:
        target_value = data.get("target_value")
        target_unit = data.get("target_unit")
        if target_value is not None:
            validate_target(target_value, target_unit)
        HabitService._check_category(db, user_id, data.get("category_id"))

        start_date = data["start_date"]
        now = datetime.now(timezone.utc)
        try:
            task = HabitTask(
                user_id=user_id,
                category_id=data.get("category_id"),
                name=data["name"],
                description=data.get("description"),
                start_date=start_date,
                frequency_of_task=str(data["frequency_of_task"]),
                routine=data.get("routine"),
                display_order=data.get("display_order"),
                kind=data.get("kind"),
                last_execution_date=data.get("last_execution_date"),
                next_execution_date=data.get("next_execution_date") or initial_due_date(start_date),
                target_value=target_value,
                target_unit=target_unit.strip() if target_value is not None else None,
                current_progress=0.0,
                target_achieved=False,
                target_set_at=now if target_value is not None else None,
            )
            db.add(task)
            db.commit()
            db.refresh(task)
            return task
        except Exception:
            db.rollback()
            raise

    @staticmethod
    def get_all(db: Session, user_id: int, as_of: Optional[date] = None,
                include_archived: bool = False) -> list[HabitTask]:
        """Active habits, or only those due on/before ``as_of``."""
        query = db.query(HabitTask).filter(HabitTask.user_id == user_id)
        if not include_archived:
            query = query.filter(HabitTask.archived_at.is_(None))
        if as_of is not None:
            due = func.coalesce(HabitTask.next_execution_date, HabitTask.start_date)
            query = query.filter(due <= as_of)
        # display_order NULLs last, then creation order
        return query.order_by(
            HabitTask.display_order.is_(None),
            HabitTask.display_order,
            HabitTask.id,
        ).all()

    @staticmethod
    def get_by_id(db: Session, user_id: int, task_id: int) -> HabitTask | None:
        return db.query(HabitTask).filter_by(id=task_id, user_id=user_id).first()

    @staticmethod
    def update(db: Session, user_id: int, task_id: int, data: dict) -> HabitTask | None:
        try:
            task = HabitService.get_by_id(db, user_id, task_id)
            if not task:
                return None
            if "category_id" in data:
                HabitService._check_category(db, user_id, data["category_id"])
            for k, v in data.items():
                if v is None and k in REQUIRED_FIELDS:
                    continue
                if k == "archived":
                    task.archived_at = datetime.now(timezone.utc) if v else None
                elif k == "frequency_of_task" and v is not None:
                    task.frequency_of_task = str(v)
                elif k in EDITABLE_FIELDS:
                    setattr(task, k, v)
            db.commit()
            db.refresh(task)
            return task
        except Exception:
            db.rollback()
            raise

    @staticmethod
    def delete(db: Session, user_id: int, task_id: int) -> bool:
        try:
            task = HabitService.get_by_id(db, user_id, task_id)
            if task:
                db.delete(task)
                db.commit()
                return True
            return False
        except Exception:
            db.rollback()
            raise

    @staticmethod
    def _lock(db: Session, task_id: int, user_id: Optional[int] = None) -> HabitTask:
        """Fresh read of the habit row, locked for the rest of the transaction."""
        query = db.query(HabitTask).filter(HabitTask.id == task_id)
        if user_id is not None:
            query = query.filter(HabitTask.user_id == user_id)
        task = query.with_for_update().populate_existing().first()
        if not task:
            raise HabitNotFound(task_id)
        return task

    @staticmethod
    def apply_log(db: Session, task_id: int, event: LogEvent,
                  reconciler: LogReconciler, now: Optional[datetime] = None) -> tuple[HabitTask, HabitMutation]:
        """Reconcile one log against the current row and write the result in one transaction."""
        try:
            task = HabitService._lock(db, task_id)
            mutation = reconciler.reconcile(HabitState.from_task(task), event, now=now)
            if not mutation.is_empty:
                mutation.apply_to(task)
            db.commit()
            db.refresh(task)
            return task, mutation
        except Exception:
            db.rollback()
            raise

    @staticmethod
    def set_target(db: Session, user_id: int, task_id: int, target_value, target_unit,
                   tracker: ProgressTracker, now: Optional[datetime] = None):
        """Archive the running target cycle (if any) and start a new one, atomically."""
        try:
            task = HabitService._lock(db, task_id, user_id=user_id)
            updated, archived = tracker.start_new_target(
                HabitState.from_task(task), target_value, target_unit, now=now
            )

            entry = None
            if archived is not None:
                entry = TargetHistoryEntry(
                    task_id=task.id,
                    target_value=archived.target_value,
                    target_unit=archived.target_unit,
                    started_at=archived.started_at,
                    achieved_at=archived.achieved_at,
                    final_progress=archived.final_progress,
                )
                db.add(entry)

            task.target_value = updated.target_value
            task.target_unit = updated.target_unit
            task.current_progress = updated.current_progress
            task.target_achieved = updated.target_achieved
            task.target_achieved_at = updated.target_achieved_at
            task.target_set_at = updated.target_started_at

            db.commit()
            db.refresh(task)
            if entry is not None:
                db.refresh(entry)
                logger.info(f"Archived target {entry.target_value} {entry.target_unit} for habit {task.id}")
            return task, entry
        except Exception:
            db.rollback()
            raise

    @staticmethod
    def get_target_history(db: Session, task_id: int) -> list[TargetHistoryEntry]:
        return db.query(TargetHistoryEntry).filter_by(task_id=task_id)\
                 .order_by(TargetHistoryEntry.started_at.desc(), TargetHistoryEntry.id.desc()).all()
