from datetime import datetime
from typing import Any, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import BaseModel
from sqlalchemy.orm import Session

from habit_tracker.config import HABIT_LOG_LIMIT
from habit_tracker.database import get_db
from habit_tracker.errors import TrackerError
from habit_tracker.models.task_log import STATUSES, SOURCES
from habit_tracker.routes.deps import get_reconciler
from habit_tracker.services.log_reconciler import LogReconciler
from habit_tracker.services.task_log_service import TaskLogService

# Registered ahead of the habit router so "/habits/logs" is not read as a habit id
router = APIRouter(prefix="/api/v1/users/{user_id}/habits/logs", tags=["Habit Logs"])

class TaskLogCreate(BaseModel):
    task_id: Optional[int] = None
    habit_name: Optional[str] = None
    status: Optional[str] = None
    quantity: Optional[float] = None
    unit: Optional[str] = None
    duration_seconds: Optional[int] = None
    occurred_at: Optional[datetime] = None
    tz: Optional[str] = None
    source: Optional[str] = None
    note: Optional[str] = None
    metadata: Optional[dict[str, Any]] = None

@router.get("")
async def list_task_logs(user_id: int, task_id: Optional[int] = None,
                         limit: int = Query(HABIT_LOG_LIMIT, ge=1, le=500),
                         db: Session = Depends(get_db)):
    return [l.to_dict() for l in TaskLogService.get_all(db, user_id, task_id=task_id, limit=limit)]

@router.post("", status_code=201)
async def create_task_log(user_id: int, log_data: TaskLogCreate, db: Session = Depends(get_db),
                          reconciler: LogReconciler = Depends(get_reconciler)):
    """Record a habit log. Habit bookkeeping problems come back as warnings, not errors."""
    if not log_data.task_id:
        raise HTTPException(status_code=400, detail="task_id is required")
    if log_data.status and log_data.status not in STATUSES:
        raise HTTPException(status_code=400, detail=f"Invalid status. Allowed: {', '.join(STATUSES)}")
    if log_data.source and log_data.source not in SOURCES:
        raise HTTPException(status_code=400, detail=f"Invalid source. Allowed: {', '.join(SOURCES)}")

    try:
        return TaskLogService.create(db, user_id, log_data.model_dump(), reconciler)
    except TrackerError:
        raise
    except Exception as e:
        raise HTTPException(status_code=500, detail=str(e))

@router.delete("/{log_id}")
async def delete_task_log(user_id: int, log_id: int, db: Session = Depends(get_db)):
    try:
        if not TaskLogService.delete(db, user_id, log_id):
            raise HTTPException(status_code=404, detail="Not found")
        return {"status": "success", "id": log_id}
    except HTTPException:
        raise
    except Exception as e:
        raise HTTPException(status_code=500, detail=str(e))
