"""
errors.py — Domain errors raised by the scheduling/progress core and services.
Each carries the HTTP status the API layer answers with.
"""


class TrackerError(Exception):
    status_code = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class InvalidFrequency(TrackerError):
    """Frequency is not a finite positive integer. The calculator turns this into "no change"."""


class InvalidTarget(TrackerError):
    pass


class InvalidQuantity(TrackerError):
    pass


class NegativeQuantity(InvalidQuantity):
    pass


class InvalidCategory(TrackerError):
    pass


class InvalidTimeZone(TrackerError):
    pass


class InvalidTransition(TrackerError):
    status_code = 409


class HabitNotFound(TrackerError):
    status_code = 404

    def __init__(self, task_id: int):
        super().__init__(f"Habit {task_id} not found")
        self.task_id = task_id
