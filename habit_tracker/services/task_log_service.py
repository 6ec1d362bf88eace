"""
task_log_service.py — Habit logs
Records completions/skips/failures (one per habit per local day) and then
lets the scheduling core update the habit. The log write is committed first
and stands even when the habit update fails.
"""

import logging
from datetime import datetime, timezone
from typing import Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from habit_tracker.config import DEFAULT_TZ, HABIT_LOG_LIMIT
from habit_tracker.errors import HabitNotFound, InvalidTimeZone
from habit_tracker.models.habit_task import HabitTask
from habit_tracker.models.task_log import TaskLog
from habit_tracker.services.habit_service import HabitService
from habit_tracker.services.habit_state import LogEvent, local_date_for, to_utc
from habit_tracker.services.log_reconciler import LogReconciler

logger = logging.getLogger(__name__)


def resolve_tz(tz: Optional[str]) -> str:
    name = tz or DEFAULT_TZ
    try:
        ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError):
        raise InvalidTimeZone(f"Unknown time zone: {name}")
    return name


class TaskLogService:
    @staticmethod
    def get_all(db: Session, user_id: int, task_id: Optional[int] = None,
                limit: int = HABIT_LOG_LIMIT) -> list[TaskLog]:
        query = db.query(TaskLog).filter(TaskLog.user_id == user_id)
        if task_id is not None:
            query = query.filter(TaskLog.task_id == task_id)
        return query.order_by(TaskLog.occurred_at.desc(), TaskLog.id.desc()).limit(limit).all()

    @staticmethod
    def _write_fields(log: TaskLog, data: dict, occurred_at: datetime, tz: str):
        log.habit_name = data.get("habit_name")
        log.status = data.get("status") or "completed"
        log.quantity = data.get("quantity")
        log.unit = data.get("unit")
        log.duration_seconds = data.get("duration_seconds")
        log.occurred_at = to_utc(occurred_at, tz)
        log.tz = tz
        log.local_date = local_date_for(occurred_at, tz)
        log.source = data.get("source") or "manual"
        log.note = data.get("note")
        log.meta = data.get("metadata") or {}

    @staticmethod
    def _upsert(db: Session, user_id: int, task_id: int, data: dict,
                occurred_at: datetime, tz: str) -> TaskLog:
        local_date = local_date_for(occurred_at, tz)
        log = db.query(TaskLog).filter_by(task_id=task_id, local_date=local_date).first()
        if log is None:
            log = TaskLog(user_id=user_id, task_id=task_id)
            db.add(log)
        TaskLogService._write_fields(log, data, occurred_at, tz)
        db.commit()
        db.refresh(log)
        return log

    @staticmethod
    def create(db: Session, user_id: int, data: dict, reconciler: LogReconciler,
               now: Optional[datetime] = None) -> dict:
        """Record a log, then reconcile the habit. Returns {"log", "habit", "warnings"}."""
        task_id = data["task_id"]
        task = db.query(HabitTask).filter_by(id=task_id, user_id=user_id).first()
        if not task:
            raise HabitNotFound(task_id)

        tz = resolve_tz(data.get("tz"))
        occurred_at = data.get("occurred_at") or datetime.now(timezone.utc)

        try:
            log = TaskLogService._upsert(db, user_id, task_id, data, occurred_at, tz)
        except IntegrityError:
            # Another request wrote the same habit/day first; replace its fields
            db.rollback()
            log = TaskLogService._upsert(db, user_id, task_id, data, occurred_at, tz)
        except Exception:
            db.rollback()
            raise

        warnings = []
        try:
            task, mutation = HabitService.apply_log(db, task_id, LogEvent.from_log(log), reconciler, now=now)
            warnings.extend(mutation.warnings)
        except Exception as e:
            logger.exception(f"Log {log.id} recorded but habit {task_id} was not updated")
            warnings.append(f"Habit not updated: {e}")
            task = db.query(HabitTask).filter_by(id=task_id).first()

        return {
            "log": log.to_dict(),
            "habit": task.to_dict() if task else None,
            "warnings": warnings,
        }

    @staticmethod
    def delete(db: Session, user_id: int, log_id: int) -> bool:
        """Remove a log. The habit's dates and progress are left as they are."""
        try:
            log = db.query(TaskLog).filter_by(id=log_id, user_id=user_id).first()
            if log:
                db.delete(log)
                db.commit()
                return True
            return False
        except Exception:
            db.rollback()
            raise
