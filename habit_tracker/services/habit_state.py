"""
habit_state.py — Value objects shared by the scheduling/progress core.
The core never touches ORM rows or sessions; it reads HabitState and LogEvent
snapshots and hands back HabitMutation / TargetHistoryRecord values.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import date, datetime, timezone
from typing import Optional, Union
from zoneinfo import ZoneInfo


def local_date_for(occurred_at: datetime, tz: str) -> date:
    """Calendar date of ``occurred_at`` as seen in the IANA zone ``tz``.

    Naive timestamps are wall-clock time in ``tz`` already, so their date
    components are taken as they are.
    """
    if occurred_at.tzinfo is None:
        return occurred_at.date()
    return occurred_at.astimezone(ZoneInfo(tz)).date()


def to_utc(occurred_at: datetime, tz: str) -> datetime:
    if occurred_at.tzinfo is None:
        occurred_at = occurred_at.replace(tzinfo=ZoneInfo(tz))
    return occurred_at.astimezone(timezone.utc)


@dataclass(frozen=True)
class HabitState:
    start_date: date
    frequency_of_task: Union[str, int, float, None] = None
    last_execution_date: Optional[date] = None
    next_execution_date: Optional[date] = None
    target_value: Optional[float] = None
    target_unit: Optional[str] = None
    current_progress: float = 0.0
    target_achieved: bool = False
    target_achieved_at: Optional[datetime] = None
    target_started_at: Optional[datetime] = None

    @classmethod
    def from_task(cls, task) -> "HabitState":
        return cls(
            start_date=task.start_date,
            frequency_of_task=task.frequency_of_task,
            last_execution_date=task.last_execution_date,
            next_execution_date=task.next_execution_date,
            target_value=task.target_value,
            target_unit=task.target_unit,
            current_progress=task.current_progress or 0.0,
            target_achieved=bool(task.target_achieved),
            target_achieved_at=task.target_achieved_at,
            # older rows have no cycle start; the habit's creation is the first cycle
            target_started_at=task.target_set_at or task.created_at,
        )

    @property
    def due_date(self) -> date:
        return self.next_execution_date or self.start_date

    def with_changes(self, **changes) -> "HabitState":
        return replace(self, **changes)


@dataclass(frozen=True)
class LogEvent:
    status: str
    occurred_at: datetime
    tz: str
    local_date: date
    quantity: Optional[float] = None

    @classmethod
    def create(cls, status: str, occurred_at: datetime, tz: str, quantity: Optional[float] = None) -> "LogEvent":
        return cls(
            status=status,
            occurred_at=occurred_at,
            tz=tz,
            local_date=local_date_for(occurred_at, tz),
            quantity=quantity,
        )

    @classmethod
    def from_log(cls, log) -> "LogEvent":
        # the stored local_date is the fact; stored timestamps may come back naive
        return cls(
            status=log.status,
            occurred_at=log.occurred_at,
            tz=log.tz,
            local_date=log.local_date,
            quantity=log.quantity,
        )


@dataclass(frozen=True)
class ScheduleUpdate:
    last_execution_date: date
    next_execution_date: date


@dataclass(frozen=True)
class TargetHistoryRecord:
    target_value: float
    target_unit: str
    started_at: Optional[datetime]
    achieved_at: Optional[datetime]
    final_progress: float


@dataclass
class HabitMutation:
    """Field changes staged for one habit row, plus bookkeeping warnings."""

    changes: dict = field(default_factory=dict)
    warnings: list = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.changes

    def stage(self, **fields):
        self.changes.update(fields)

    def warn(self, message: str):
        self.warnings.append(message)

    def apply_to(self, task):
        for key, value in self.changes.items():
            setattr(task, key, value)
        return task
