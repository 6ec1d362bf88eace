from datetime import date as dt_date
from typing import Optional, Union

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel
from sqlalchemy.orm import Session

from habit_tracker.database import get_db
from habit_tracker.errors import TrackerError
from habit_tracker.models.habit_task import ROUTINES, KINDS
from habit_tracker.routes.deps import get_progress_tracker
from habit_tracker.services.habit_service import HabitService
from habit_tracker.services.progress_tracker import ProgressTracker
from habit_tracker.services.user_service import UserService

router = APIRouter(prefix="/api/v1/users/{user_id}/habits", tags=["Habits"])

class HabitCreate(BaseModel):
    name: str
    description: Optional[str] = None
    start_date: dt_date
    frequency_of_task: Union[int, str, None] = None
    routine: Optional[str] = None
    display_order: Optional[int] = None
    kind: Optional[str] = None
    category_id: Optional[int] = None
    last_execution_date: Optional[dt_date] = None
    next_execution_date: Optional[dt_date] = None
    target_value: Optional[float] = None
    target_unit: Optional[str] = None

class HabitUpdate(BaseModel):
    name: Optional[str] = None
    description: Optional[str] = None
    start_date: Optional[dt_date] = None
    frequency_of_task: Union[int, str, None] = None
    routine: Optional[str] = None
    display_order: Optional[int] = None
    kind: Optional[str] = None
    category_id: Optional[int] = None
    last_execution_date: Optional[dt_date] = None
    next_execution_date: Optional[dt_date] = None
    archived: Optional[bool] = None

class TargetSet(BaseModel):
    target_value: Optional[float] = None
    target_unit: Optional[str] = None


def validate_enums(data: dict):
    if data.get("routine") and data["routine"] not in ROUTINES:
        raise HTTPException(status_code=400, detail=f"Invalid routine. Allowed: {', '.join(ROUTINES)}")
    if data.get("kind") and data["kind"] not in KINDS:
        raise HTTPException(status_code=400, detail=f"Invalid kind. Allowed: {', '.join(KINDS)}")

@router.get("")
async def list_habits(user_id: int, as_of: Optional[dt_date] = None, db: Session = Depends(get_db)):
    """All active habits, or only the ones due on ``as_of``."""
    return [h.to_dict() for h in HabitService.get_all(db, user_id, as_of=as_of)]

@router.post("", status_code=201)
async def create_habit(user_id: int, habit_data: HabitCreate, db: Session = Depends(get_db)):
    data = habit_data.model_dump()
    errors = []
    if not data["name"].strip():
        errors.append("name is required")
    if data["frequency_of_task"] is None or str(data["frequency_of_task"]).strip() == "":
        errors.append("frequency_of_task (days) is required")
    if errors:
        raise HTTPException(status_code=400, detail=", ".join(errors))
    validate_enums(data)
    if not UserService.get_by_id(db, user_id):
        raise HTTPException(status_code=404, detail="User not found")

    try:
        habit = HabitService.create(db, user_id, data)
        return habit.to_dict()
    except TrackerError:
        raise
    except Exception as e:
        raise HTTPException(status_code=500, detail=str(e))

@router.get("/{task_id}")
async def get_habit(user_id: int, task_id: int, db: Session = Depends(get_db)):
    habit = HabitService.get_by_id(db, user_id, task_id)
    if not habit:
        raise HTTPException(status_code=404, detail="Habit not found")
    return habit.to_dict()

@router.put("/{task_id}")
async def update_habit(user_id: int, task_id: int, habit_data: HabitUpdate, db: Session = Depends(get_db)):
    data = habit_data.model_dump(exclude_unset=True)
    if not data:
        raise HTTPException(status_code=400, detail="Nothing to update")
    validate_enums(data)
    try:
        habit = HabitService.update(db, user_id, task_id, data)
        if not habit:
            raise HTTPException(status_code=404, detail="Habit not found")
        return habit.to_dict()
    except HTTPException:
        raise
    except TrackerError:
        raise
    except Exception as e:
        raise HTTPException(status_code=500, detail=str(e))

@router.delete("/{task_id}")
async def delete_habit(user_id: int, task_id: int, db: Session = Depends(get_db)):
    try:
        if not HabitService.delete(db, user_id, task_id):
            raise HTTPException(status_code=404, detail="Habit not found")
        return {"status": "success", "id": task_id}
    except HTTPException:
        raise
    except Exception as e:
        raise HTTPException(status_code=500, detail=str(e))

@router.post("/{task_id}/target")
async def set_habit_target(user_id: int, task_id: int, target_data: TargetSet,
                           db: Session = Depends(get_db),
                           tracker: ProgressTracker = Depends(get_progress_tracker)):
    """Archive the current target (if any) and start counting toward a new one."""
    errors = []
    if target_data.target_value is None:
        errors.append("target_value is required")
    if not target_data.target_unit:
        errors.append("target_unit is required")
    if errors:
        raise HTTPException(status_code=400, detail=", ".join(errors))

    try:
        habit, archived = HabitService.set_target(
            db, user_id, task_id, target_data.target_value, target_data.target_unit, tracker
        )
        return {
            "habit": habit.to_dict(),
            "archived_target": archived.to_dict() if archived else None,
        }
    except TrackerError:
        raise
    except Exception as e:
        raise HTTPException(status_code=500, detail=str(e))

@router.get("/{task_id}/target-history")
async def habit_target_history(user_id: int, task_id: int, db: Session = Depends(get_db)):
    if not HabitService.get_by_id(db, user_id, task_id):
        raise HTTPException(status_code=404, detail="Habit not found")
    return [e.to_dict() for e in HabitService.get_target_history(db, task_id)]
