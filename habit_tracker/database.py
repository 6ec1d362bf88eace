import os
import logging

from fastapi import Request
from sqlalchemy import create_engine, event
from sqlalchemy.orm import Session, sessionmaker, declarative_base
from sqlalchemy.pool import StaticPool

from habit_tracker.config import DATABASE_URL, DB_ECHO

logger = logging.getLogger(__name__)

Base = declarative_base()


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    # SQLite ignores ON DELETE CASCADE unless this is set per connection
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


class Database:
    """Owns the engine and session factory for one process.

    Built by the application entry point and handed to the app, never
    created at import time. ``dispose()`` releases the connection pool.
    """

    def __init__(self, url: str = DATABASE_URL, echo: bool = DB_ECHO):
        self.url = url
        # Only use connect_args if we are using SQLite
        engine_args = {}
        if url.startswith("sqlite"):
            engine_args["connect_args"] = {"check_same_thread": False}
            if ":memory:" in url or url in ("sqlite://", "sqlite:///"):
                # One shared connection, otherwise every session sees an empty database
                engine_args["poolclass"] = StaticPool
        else:
            # Production settings for PostgreSQL
            engine_args.update({
                "pool_size": 5,
                "max_overflow": 10,
                "pool_timeout": 30,
                "pool_recycle": 1800,
            })

        try:
            self.engine = create_engine(url, echo=echo, **engine_args)
            if url.startswith("sqlite"):
                event.listen(self.engine, "connect", _enable_sqlite_foreign_keys)
            self.SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=self.engine)
        except Exception as e:
            logger.error(f"Failed to create engine: {e}")
            raise

    def session(self) -> Session:
        return self.SessionLocal()

    def create_all(self):
        """Create the data/ directory for file-backed SQLite, then create all tables."""
        if self.url.startswith("sqlite:///./"):
            os.makedirs(os.path.dirname(self.url[len("sqlite:///"):]) or ".", exist_ok=True)

        # Import all models so they register with Base.metadata
        import habit_tracker.models  # noqa: F401

        Base.metadata.create_all(bind=self.engine)
        logger.info("Database initialized successfully.")

    def dispose(self):
        self.engine.dispose()
        logger.info("Database connections closed.")


def get_db(request: Request):
    """FastAPI dependency — yields a database session and closes it after use."""
    db = request.app.state.db.session()
    try:
        yield db
    finally:
        db.close()
