from sqlalchemy import Column, Integer, String, DateTime, Float, ForeignKey
from habit_tracker.database import Base


class TargetHistoryEntry(Base):
    """A finished target cycle. Written once when a new target replaces it, never updated."""

    __tablename__ = "task_targets_history"

    id = Column(Integer, primary_key=True, autoincrement=True)
    task_id = Column(Integer, ForeignKey("habit_tasks.id", ondelete="CASCADE"), nullable=False, index=True)
    target_value = Column(Float, nullable=False)
    target_unit = Column(String(50), nullable=False)
    started_at = Column(DateTime(timezone=True), nullable=True)
    achieved_at = Column(DateTime(timezone=True), nullable=True)
    final_progress = Column(Float, nullable=False, default=0.0)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "task_id": self.task_id,
            "target_value": self.target_value,
            "target_unit": self.target_unit,
            "started_at": self.started_at.isoformat() if self.started_at else None,
            "achieved_at": self.achieved_at.isoformat() if self.achieved_at else None,
            "final_progress": self.final_progress,
        }
