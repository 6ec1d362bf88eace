from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from typing import Optional

from habit_tracker.database import get_db
from habit_tracker.services.user_service import UserService

router = APIRouter(prefix="/api/v1/users", tags=["Users"])

class UserCreate(BaseModel):
    name: str
    email: str

class UserUpdate(BaseModel):
    name: Optional[str] = None
    email: Optional[str] = None

@router.get("")
async def list_users(db: Session = Depends(get_db)):
    return [u.to_dict() for u in UserService.get_all(db)]

@router.post("", status_code=201)
async def create_user(user_data: UserCreate, db: Session = Depends(get_db)):
    if not user_data.name.strip() or not user_data.email.strip():
        raise HTTPException(status_code=400, detail="name and email are required")
    try:
        user = UserService.create(db, user_data.name.strip(), user_data.email.strip())
        return user.to_dict()
    except IntegrityError:
        raise HTTPException(status_code=409, detail="Email already exists")
    except Exception as e:
        raise HTTPException(status_code=500, detail=str(e))

@router.get("/{user_id}")
async def get_user(user_id: int, db: Session = Depends(get_db)):
    user = UserService.get_by_id(db, user_id)
    if not user:
        raise HTTPException(status_code=404, detail="User not found")
    return user.to_dict()

@router.put("/{user_id}")
async def update_user(user_id: int, user_data: UserUpdate, db: Session = Depends(get_db)):
    data = user_data.model_dump(exclude_none=True)
    if not data:
        raise HTTPException(status_code=400, detail="Nothing to update")
    try:
        user = UserService.update(db, user_id, data)
        if not user:
            raise HTTPException(status_code=404, detail="User not found")
        return user.to_dict()
    except HTTPException:
        raise
    except IntegrityError:
        raise HTTPException(status_code=409, detail="Email already exists")
    except Exception as e:
        raise HTTPException(status_code=500, detail=str(e))

@router.delete("/{user_id}")
async def delete_user(user_id: int, db: Session = Depends(get_db)):
    try:
        if not UserService.delete(db, user_id):
            raise HTTPException(status_code=404, detail="User not found")
        return {"status": "success", "id": user_id}
    except HTTPException:
        raise
    except Exception as e:
        raise HTTPException(status_code=500, detail=str(e))
