from datetime import datetime, timezone

from sqlalchemy import (
    Column, Integer, String, Text, Date, DateTime, Float, Boolean, ForeignKey, CheckConstraint,
)
from habit_tracker.database import Base

ROUTINES = ("anytime", "morning", "afternoon", "evening")
KINDS = ("binary", "quantity", "timer")


def _iso(value):
    return value.isoformat() if value is not None else None


class HabitTask(Base):
    __tablename__ = "habit_tasks"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    category_id = Column(Integer, ForeignKey("habit_categories.id", ondelete="SET NULL"), nullable=True)
    name = Column(String(200), nullable=False)
    description = Column(Text, nullable=True)
    start_date = Column(Date, nullable=False)
    frequency_of_task = Column(String(20), nullable=True)  # days between occurrences, e.g. "7"
    routine = Column(String(20), nullable=True)  # anytime/morning/afternoon/evening
    display_order = Column(Integer, nullable=True)
    kind = Column(String(20), nullable=True)  # binary/quantity/timer

    last_execution_date = Column(Date, nullable=True)
    next_execution_date = Column(Date, nullable=True)  # falls back to start_date when NULL

    target_value = Column(Float, nullable=True)
    target_unit = Column(String(50), nullable=True)
    current_progress = Column(Float, nullable=False, default=0.0)
    target_achieved = Column(Boolean, nullable=False, default=False)
    target_achieved_at = Column(DateTime(timezone=True), nullable=True)
    target_set_at = Column(DateTime(timezone=True), nullable=True)  # start of the current target cycle

    created_at = Column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))
    updated_at = Column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )
    archived_at = Column(DateTime(timezone=True), nullable=True)

    __table_args__ = (
        CheckConstraint("current_progress >= 0", name="ck_habit_progress_non_negative"),
        CheckConstraint("target_value IS NULL OR target_unit IS NOT NULL", name="ck_habit_target_has_unit"),
    )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "user_id": self.user_id,
            "category_id": self.category_id,
            "name": self.name,
            "description": self.description,
            "start_date": _iso(self.start_date),
            "frequency_of_task": self.frequency_of_task,
            "routine": self.routine,
            "display_order": self.display_order,
            "kind": self.kind,
            "last_execution_date": _iso(self.last_execution_date),
            "next_execution_date": _iso(self.next_execution_date),
            "target_value": self.target_value,
            "target_unit": self.target_unit,
            "current_progress": self.current_progress,
            "target_achieved": self.target_achieved,
            "target_achieved_at": _iso(self.target_achieved_at),
            "target_set_at": _iso(self.target_set_at),
            "created_at": _iso(self.created_at),
            "updated_at": _iso(self.updated_at),
            "archived_at": _iso(self.archived_at),
        }
