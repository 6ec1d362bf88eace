from datetime import date as dt_date
from typing import Any, Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel
from sqlalchemy.orm import Session

from habit_tracker.database import get_db
from habit_tracker.routes.plan_routes import parse_day
from habit_tracker.services.user_service import PlanService
from habit_tracker.services.workout_service import WorkoutService

router = APIRouter(prefix="/api/v1/users/{user_id}/logs", tags=["Workouts"])

class WorkoutLogCreate(BaseModel):
    day_key: str
    entries: Any = None
    date: Optional[dt_date] = None

class WorkoutLogUpdate(BaseModel):
    entries: Any = None

@router.get("")
async def list_workout_logs(user_id: int, date: Optional[dt_date] = None, day: Optional[str] = None,
                            db: Session = Depends(get_db)):
    return [l.to_dict() for l in WorkoutService.get_all(db, user_id, on_date=date, day_name=day)]

@router.post("", status_code=201)
async def create_workout_log(log_data: WorkoutLogCreate, user_id: int, db: Session = Depends(get_db)):
    weekday = parse_day(log_data.day_key)
    if not log_data.entries:
        raise HTTPException(status_code=400, detail="entries missing")

    found, plan = PlanService.get(db, user_id, weekday)
    if not found:
        raise HTTPException(status_code=404, detail="User not found")
    if not plan:
        raise HTTPException(status_code=404, detail=f"No plan found for {weekday.value}")

    try:
        log = WorkoutService.create(db, user_id, weekday, plan, log_data.entries, log_date=log_data.date)
        return log.to_dict()
    except Exception as e:
        raise HTTPException(status_code=500, detail=str(e))

@router.get("/previous-week")
async def previous_week_log(user_id: int, day: str, date: dt_date, db: Session = Depends(get_db)):
    """Same-weekday log from seven days before ``date``, or null."""
    day_name = parse_day(day[:3]).short_name
    log = WorkoutService.find_previous_week(db, user_id, day_name, date)
    return log.to_dict() if log else None

@router.get("/{log_id}")
async def get_workout_log(user_id: int, log_id: int, db: Session = Depends(get_db)):
    log = WorkoutService.get_by_id(db, user_id, log_id)
    if not log:
        raise HTTPException(status_code=404, detail="Log not found")
    return log.to_dict()

@router.put("/{log_id}")
async def update_workout_log(user_id: int, log_id: int, log_data: WorkoutLogUpdate,
                             db: Session = Depends(get_db)):
    if not log_data.entries:
        raise HTTPException(status_code=400, detail="entries missing")
    try:
        log = WorkoutService.update_entries(db, user_id, log_id, log_data.entries)
        if not log:
            raise HTTPException(status_code=404, detail="Log not found")
        return log.to_dict()
    except HTTPException:
        raise
    except Exception as e:
        raise HTTPException(status_code=500, detail=str(e))

@router.delete("/{log_id}")
async def delete_workout_log(user_id: int, log_id: int, db: Session = Depends(get_db)):
    try:
        if not WorkoutService.delete(db, user_id, log_id):
            raise HTTPException(status_code=404, detail="Log not found")
        return {"success": True}
    except HTTPException:
        raise
    except Exception as e:
        raise HTTPException(status_code=500, detail=str(e))
