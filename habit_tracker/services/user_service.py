"""
user_service.py — Users and their weekly workout plans
One plan document per weekday, addressed through the Weekday enum.
"""

from sqlalchemy.orm import Session

from habit_tracker.models.user import User, Weekday


class UserService:
    @staticmethod
    def create(db: Session, name: str, email: str) -> User:
        try:
            user = User(name=name, email=email)
            db.add(user)
            db.commit()
            db.refresh(user)
            return user
        except Exception:
            db.rollback()
            raise

    @staticmethod
    def get_all(db: Session) -> list[User]:
        return db.query(User).order_by(User.id).all()

    @staticmethod
    def get_by_id(db: Session, user_id: int) -> User | None:
        return db.query(User).filter_by(id=user_id).first()

    @staticmethod
    def update(db: Session, user_id: int, data: dict) -> User | None:
        try:
            user = UserService.get_by_id(db, user_id)
            if not user:
                return None
            for k in ("name", "email"):
                if data.get(k) is not None:
                    setattr(user, k, data[k])
            db.commit()
            db.refresh(user)
            return user
        except Exception:
            db.rollback()
            raise

    @staticmethod
    def delete(db: Session, user_id: int) -> bool:
        try:
            user = UserService.get_by_id(db, user_id)
            if user:
                db.delete(user)
                db.commit()
                return True
            return False
        except Exception:
            db.rollback()
            raise


class PlanService:
    @staticmethod
    def get(db: Session, user_id: int, day: Weekday):
        """Returns (found, plan). found is False when the user does not exist."""
        user = UserService.get_by_id(db, user_id)
        if not user:
            return False, None
        return True, user.get_plan(day)

    @staticmethod
    def put(db: Session, user_id: int, day: Weekday, plan) -> User | None:
        try:
            user = UserService.get_by_id(db, user_id)
            if not user:
                return None
            user.set_plan(day, plan)
            db.commit()
            db.refresh(user)
            return user
        except Exception:
            db.rollback()
            raise

    @staticmethod
    def clear(db: Session, user_id: int, day: Weekday) -> bool:
        return PlanService.put(db, user_id, day, None) is not None
