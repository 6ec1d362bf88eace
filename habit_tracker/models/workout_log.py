from datetime import datetime, timezone

from sqlalchemy import Column, Integer, String, Date, DateTime, ForeignKey, JSON
from habit_tracker.database import Base


class WorkoutLog(Base):
    __tablename__ = "workout_logs"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    date = Column(Date, nullable=False)
    day_name = Column(String(3), nullable=False)  # Mon/Tue/...
    plan_name = Column(String(200), nullable=False, default="")
    entries = Column(JSON, nullable=False)  # exercises with their completed sets
    created_at = Column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "user_id": self.user_id,
            "date": self.date.isoformat() if self.date else None,
            "day_name": self.day_name,
            "plan_name": self.plan_name,
            "entries": self.entries,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }
