"""
category_service.py — Habit categories (per-user labels with a colour)
"""

from sqlalchemy.orm import Session

from habit_tracker.models.habit_category import HabitCategory


class CategoryService:
    @staticmethod
    def create(db: Session, user_id: int, name: str, color: str | None = None) -> HabitCategory:
        try:
            category = HabitCategory(user_id=user_id, name=name.strip(), color=color)
            db.add(category)
            db.commit()
            db.refresh(category)
            return category
        except Exception:
            db.rollback()
            raise

    @staticmethod
    def get_all(db: Session, user_id: int) -> list[HabitCategory]:
        return db.query(HabitCategory).filter_by(user_id=user_id).order_by(HabitCategory.name).all()

    @staticmethod
    def get_by_id(db: Session, user_id: int, category_id: int) -> HabitCategory | None:
        return db.query(HabitCategory).filter_by(id=category_id, user_id=user_id).first()

    @staticmethod
    def update(db: Session, user_id: int, category_id: int, data: dict) -> HabitCategory | None:
        try:
            category = CategoryService.get_by_id(db, user_id, category_id)
            if not category:
                return None
            if data.get("name"):
                category.name = data["name"].strip()
            if "color" in data:
                category.color = data["color"]
            db.commit()
            db.refresh(category)
            return category
        except Exception:
            db.rollback()
            raise

    @staticmethod
    def delete(db: Session, user_id: int, category_id: int) -> bool:
        try:
            category = CategoryService.get_by_id(db, user_id, category_id)
            if category:
                db.delete(category)
                db.commit()
                return True
            return False
        except Exception:
            db.rollback()
            raise
