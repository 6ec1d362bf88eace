"""
workout_service.py — Gym workout logs
Saves what was actually lifted against the day's plan. Sets that were never
filled in (no reps or no weight) are dropped before anything is stored.
"""

import copy
import logging
from datetime import date, timedelta
from typing import Optional

from sqlalchemy.orm import Session

from habit_tracker.models.user import Weekday
from habit_tracker.models.workout_log import WorkoutLog

logger = logging.getLogger(__name__)


def _positive(value) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool) and value > 0


def is_set_complete(s: dict) -> bool:
    if s.get("type") == "strip":
        drops = s.get("actualSets") or s.get("stripSets") or []
        return any(_positive(d.get("reps")) and _positive(d.get("weight")) for d in drops)
    return _positive(s.get("reps")) and _positive(s.get("weight"))


def _filter_exercise(exercise: dict) -> dict:
    exercise = copy.deepcopy(exercise)
    if exercise.get("type") == "circuit":
        exercise["exercises"] = [_filter_exercise(inner) for inner in exercise.get("exercises") or []]
    else:
        exercise["sets"] = [s for s in exercise.get("sets") or [] if is_set_complete(s)]
    return exercise


def filter_completed_sets(entries):
    """Copy of ``entries`` keeping only sets with reps and weight filled in.

    Accepts the bare exercise list or a log document with an "exercises" key.
    """
    if isinstance(entries, list):
        return [_filter_exercise(ex) if isinstance(ex, dict) else ex for ex in entries]
    if isinstance(entries, dict) and isinstance(entries.get("exercises"), list):
        filtered = dict(entries)
        filtered["exercises"] = filter_completed_sets(entries["exercises"])
        return filtered
    return entries


class WorkoutService:
    @staticmethod
    def create(db: Session, user_id: int, day: Weekday, plan: dict, entries,
               log_date: Optional[date] = None) -> WorkoutLog:
        log_date = log_date or date.today()
        try:
            log = WorkoutLog(
                user_id=user_id,
                date=log_date,
                day_name=Weekday.from_date(log_date).short_name,
                plan_name=(plan or {}).get("workoutDay") or "",
                entries=filter_completed_sets(entries),
            )
            db.add(log)
            db.commit()
            db.refresh(log)
            logger.info(f"Workout log {log.id} saved for user {user_id} ({day.value}, {log_date})")
            return log
        except Exception:
            db.rollback()
            raise

    @staticmethod
    def get_all(db: Session, user_id: int, on_date: Optional[date] = None,
                day_name: Optional[str] = None) -> list[WorkoutLog]:
        query = db.query(WorkoutLog).filter(WorkoutLog.user_id == user_id)
        if on_date is not None:
            query = query.filter(WorkoutLog.date == on_date)
        if day_name:
            query = query.filter(WorkoutLog.day_name == day_name)
        return query.order_by(WorkoutLog.date.desc(), WorkoutLog.id.desc()).all()

    @staticmethod
    def get_by_id(db: Session, user_id: int, log_id: int) -> WorkoutLog | None:
        return db.query(WorkoutLog).filter_by(id=log_id, user_id=user_id).first()

    @staticmethod
    def update_entries(db: Session, user_id: int, log_id: int, entries) -> WorkoutLog | None:
        try:
            log = WorkoutService.get_by_id(db, user_id, log_id)
            if not log:
                return None
            log.entries = filter_completed_sets(entries)
            db.commit()
            db.refresh(log)
            return log
        except Exception:
            db.rollback()
            raise

    @staticmethod
    def delete(db: Session, user_id: int, log_id: int) -> bool:
        try:
            log = WorkoutService.get_by_id(db, user_id, log_id)
            if log:
                db.delete(log)
                db.commit()
                return True
            return False
        except Exception:
            db.rollback()
            raise

    @staticmethod
    def find_previous_week(db: Session, user_id: int, day_name: str, current: date) -> WorkoutLog | None:
        """The first log for the same weekday exactly seven days before ``current``."""
        previous = current - timedelta(days=7)
        return db.query(WorkoutLog).filter_by(user_id=user_id, day_name=day_name, date=previous)\
                 .order_by(WorkoutLog.created_at.asc(), WorkoutLog.id.asc()).first()
