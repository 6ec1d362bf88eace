"""
due_dates.py — Next-due-date arithmetic for recurring habits.
Pure calendar math on datetime.date: no clock, no time zones, no storage.
"""

import logging
import math
import re
from datetime import date, timedelta
from typing import Optional

from habit_tracker.errors import InvalidFrequency
from habit_tracker.services.habit_state import ScheduleUpdate

logger = logging.getLogger(__name__)

_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")


def parse_frequency(value) -> int:
    """Frequency in days as a positive int.

    Stored frequencies are strings ("7"); the leading integer part is used
    the way the web forms always submitted it. Raises InvalidFrequency.
    """
    if value is None or isinstance(value, bool):
        raise InvalidFrequency(f"Frequency {value!r} is not a number of days")

    if isinstance(value, int):
        days = value
    elif isinstance(value, float):
        if not math.isfinite(value) or not value.is_integer():
            raise InvalidFrequency(f"Frequency {value!r} is not a whole number of days")
        days = int(value)
    else:
        match = _LEADING_INT.match(str(value))
        if not match:
            raise InvalidFrequency(f"Frequency {value!r} is not a number of days")
        days = int(match.group(1))

    if days <= 0:
        raise InvalidFrequency(f"Frequency must be positive, got {days}")
    return days


def initial_due_date(start_date: date) -> date:
    """A new habit is first due on its start date."""
    return start_date


def compute_next_due_date(start_date: date, frequency_days, completion_local_date: date) -> Optional[ScheduleUpdate]:
    """Dates a habit moves to after being completed on ``completion_local_date``.

    Returns None when the habit is not auto-rescheduled (frequency missing,
    zero, negative or unparsable).
    """
    try:
        days = parse_frequency(frequency_days)
    except InvalidFrequency as e:
        logger.debug(f"No reschedule for habit starting {start_date}: {e}")
        return None

    return ScheduleUpdate(
        last_execution_date=completion_local_date,
        next_execution_date=completion_local_date + timedelta(days=days),
    )
