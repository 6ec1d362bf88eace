from datetime import datetime, timezone

from sqlalchemy import (
    Column, Integer, String, Text, Date, DateTime, Float, ForeignKey, JSON, UniqueConstraint,
)
from habit_tracker.database import Base

STATUSES = ("completed", "skipped", "failed")
SOURCES = ("manual", "reminder", "import", "automation")


class TaskLog(Base):
    __tablename__ = "task_logs"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    task_id = Column(Integer, ForeignKey("habit_tasks.id", ondelete="CASCADE"), nullable=False)
    habit_name = Column(String(200), nullable=True)
    status = Column(String(20), nullable=False, default="completed")
    quantity = Column(Float, nullable=True)
    unit = Column(String(50), nullable=True)
    duration_seconds = Column(Integer, nullable=True)
    occurred_at = Column(DateTime(timezone=True), nullable=False)  # stored in UTC
    tz = Column(String(64), nullable=False)  # IANA zone the log was recorded in
    local_date = Column(Date, nullable=False)  # occurred_at as a calendar date in tz
    source = Column(String(20), nullable=False, default="manual")
    note = Column(Text, nullable=True)
    meta = Column("metadata", JSON, nullable=True)
    created_at = Column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))

    __table_args__ = (
        UniqueConstraint("task_id", "local_date", name="uq_task_log_local_date"),
    )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "user_id": self.user_id,
            "task_id": self.task_id,
            "habit_name": self.habit_name,
            "status": self.status,
            "quantity": self.quantity,
            "unit": self.unit,
            "duration_seconds": self.duration_seconds,
            "occurred_at": self.occurred_at.isoformat() if self.occurred_at else None,
            "tz": self.tz,
            "local_date": self.local_date.isoformat() if self.local_date else None,
            "source": self.source,
            "note": self.note,
            "metadata": self.meta or {},
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }
