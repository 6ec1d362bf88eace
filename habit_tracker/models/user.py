import enum
from datetime import date, datetime, timezone

from sqlalchemy import Column, Integer, String, DateTime, JSON
from habit_tracker.database import Base


class Weekday(str, enum.Enum):
    MON = "mon"
    TUE = "tue"
    WED = "wed"
    THU = "thu"
    FRI = "fri"
    SAT = "sat"
    SUN = "sun"

    @property
    def short_name(self) -> str:
        """'Mon', 'Tue', ... as stored on workout logs."""
        return self.value.capitalize()

    @classmethod
    def from_date(cls, d: date) -> "Weekday":
        return list(cls)[d.weekday()]


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(100), nullable=False)
    email = Column(String(255), unique=True, nullable=False)
    # Weekly workout templates, one JSON document per weekday
    mon_plan = Column(JSON, nullable=True)
    tue_plan = Column(JSON, nullable=True)
    wed_plan = Column(JSON, nullable=True)
    thu_plan = Column(JSON, nullable=True)
    fri_plan = Column(JSON, nullable=True)
    sat_plan = Column(JSON, nullable=True)
    sun_plan = Column(JSON, nullable=True)
    created_at = Column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))

    def get_plan(self, day: Weekday):
        return getattr(self, PLAN_COLUMNS[day].key)

    def set_plan(self, day: Weekday, plan):
        setattr(self, PLAN_COLUMNS[day].key, plan)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "email": self.email,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }


PLAN_COLUMNS = {
    Weekday.MON: User.mon_plan,
    Weekday.TUE: User.tue_plan,
    Weekday.WED: User.wed_plan,
    Weekday.THU: User.thu_plan,
    Weekday.FRI: User.fri_plan,
    Weekday.SAT: User.sat_plan,
    Weekday.SUN: User.sun_plan,
}
