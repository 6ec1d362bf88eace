import os
from dotenv import load_dotenv

load_dotenv()

# --- App ---
APP_NAME = os.getenv("APP_NAME", "Habit & Gym Tracker")
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

# --- Database ---
# Default to local SQLite, but prefer environment variable (for hosted Postgres)
DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./data/habit_tracker.db")

# Fix for common SQLAlchemy issues with postgres:// vs postgresql://
if DATABASE_URL.startswith("postgres://"):
    DATABASE_URL = DATABASE_URL.replace("postgres://", "postgresql://", 1)

DB_ECHO = os.getenv("DB_ECHO", "false").lower() in ("1", "true", "yes")

# --- Habits ---
# Zone used for habit logs that arrive without one
DEFAULT_TZ = os.getenv("DEFAULT_TZ", "Asia/Kolkata")
HABIT_LOG_LIMIT = int(os.getenv("HABIT_LOG_LIMIT", "50"))
