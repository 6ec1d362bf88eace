from fastapi import Request

from habit_tracker.services.log_reconciler import LogReconciler
from habit_tracker.services.progress_tracker import ProgressTracker


def get_progress_tracker(request: Request) -> ProgressTracker:
    return request.app.state.progress


def get_reconciler(request: Request) -> LogReconciler:
    return request.app.state.reconciler
