from fastapi import APIRouter, Body, Depends, HTTPException
from sqlalchemy.orm import Session

from habit_tracker.database import get_db
from habit_tracker.models.user import Weekday
from habit_tracker.services.user_service import PlanService

router = APIRouter(prefix="/api/v1/users/{user_id}/plans", tags=["Plans"])


def parse_day(day: str) -> Weekday:
    try:
        return Weekday(day.lower())
    except ValueError:
        raise HTTPException(status_code=400, detail=f"Invalid day parameter: {day}")

@router.get("/{day}")
async def get_plan(user_id: int, day: str, db: Session = Depends(get_db)):
    weekday = parse_day(day)
    found, plan = PlanService.get(db, user_id, weekday)
    if not found:
        raise HTTPException(status_code=404, detail="User not found")
    return plan

@router.put("/{day}")
async def put_plan(user_id: int, day: str, plan: dict = Body(...), db: Session = Depends(get_db)):
    weekday = parse_day(day)
    try:
        user = PlanService.put(db, user_id, weekday, plan)
        if not user:
            raise HTTPException(status_code=404, detail="User not found")
        return user.get_plan(weekday)
    except HTTPException:
        raise
    except Exception as e:
        raise HTTPException(status_code=500, detail=str(e))

@router.delete("/{day}")
async def clear_plan(user_id: int, day: str, db: Session = Depends(get_db)):
    weekday = parse_day(day)
    try:
        if not PlanService.clear(db, user_id, weekday):
            raise HTTPException(status_code=404, detail="User not found")
        return {"success": True}
    except HTTPException:
        raise
    except Exception as e:
        raise HTTPException(status_code=500, detail=str(e))
