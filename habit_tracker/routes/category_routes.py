from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from typing import Optional

from habit_tracker.database import get_db
from habit_tracker.services.category_service import CategoryService

router = APIRouter(prefix="/api/v1/users/{user_id}/categories", tags=["Categories"])

class CategoryCreate(BaseModel):
    name: str
    color: Optional[str] = None

class CategoryUpdate(BaseModel):
    name: Optional[str] = None
    color: Optional[str] = None

@router.get("")
async def list_categories(user_id: int, db: Session = Depends(get_db)):
    return [c.to_dict() for c in CategoryService.get_all(db, user_id)]

@router.post("", status_code=201)
async def create_category(user_id: int, category_data: CategoryCreate, db: Session = Depends(get_db)):
    if not category_data.name.strip():
        raise HTTPException(status_code=400, detail="name is required")
    try:
        category = CategoryService.create(db, user_id, category_data.name, category_data.color)
        return category.to_dict()
    except IntegrityError:
        raise HTTPException(status_code=400, detail="Category name already exists")
    except Exception as e:
        raise HTTPException(status_code=500, detail=str(e))

@router.put("/{category_id}")
async def update_category(user_id: int, category_id: int, category_data: CategoryUpdate,
                          db: Session = Depends(get_db)):
    data = category_data.model_dump(exclude_unset=True)
    if not data:
        raise HTTPException(status_code=400, detail="Nothing to update")
    try:
        category = CategoryService.update(db, user_id, category_id, data)
        if not category:
            raise HTTPException(status_code=404, detail="Category not found")
        return category.to_dict()
    except HTTPException:
        raise
    except IntegrityError:
        raise HTTPException(status_code=400, detail="Category name already exists")
    except Exception as e:
        raise HTTPException(status_code=500, detail=str(e))

@router.delete("/{category_id}")
async def delete_category(user_id: int, category_id: int, db: Session = Depends(get_db)):
    try:
        if not CategoryService.delete(db, user_id, category_id):
            raise HTTPException(status_code=404, detail="Not found")
        return {"status": "success", "id": category_id}
    except HTTPException:
        raise
    except Exception as e:
        raise HTTPException(status_code=500, detail=str(e))
