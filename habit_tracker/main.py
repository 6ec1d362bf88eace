import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from habit_tracker.config import APP_NAME, LOG_LEVEL
from habit_tracker.database import Database
from habit_tracker.errors import TrackerError
from habit_tracker.services.log_reconciler import LogReconciler
from habit_tracker.services.progress_tracker import ProgressTracker

from habit_tracker.routes.user_routes import router as user_router
from habit_tracker.routes.plan_routes import router as plan_router
from habit_tracker.routes.workout_routes import router as workout_router
from habit_tracker.routes.category_routes import router as category_router
from habit_tracker.routes.task_log_routes import router as task_log_router
from habit_tracker.routes.habit_routes import router as habit_router

logger = logging.getLogger(__name__)


def create_app(database: Database | None = None, clock=None) -> FastAPI:
    """Build the API around an explicitly owned database handle.

    ``clock`` stamps target achievements and new target cycles; tests pass a
    fixed one.
    """
    logging.basicConfig(level=LOG_LEVEL)
    db = database or Database()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        db.create_all()
        yield
        db.dispose()

    app = FastAPI(title=APP_NAME, lifespan=lifespan)
    app.state.db = db
    app.state.progress = ProgressTracker(clock=clock)
    app.state.reconciler = LogReconciler(progress=app.state.progress)

    @app.get("/api/v1/health-check")
    async def health():
        return {"status": "ok", "message": "Backend is alive!"}

    @app.exception_handler(TrackerError)
    async def tracker_error_handler(request: Request, exc: TrackerError):
        return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(user_router)
    app.include_router(plan_router)
    app.include_router(workout_router)
    app.include_router(category_router)
    app.include_router(task_log_router)
    app.include_router(habit_router)
    return app


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("habit_tracker.main:create_app", factory=True, host="0.0.0.0", port=8000, reload=True)
