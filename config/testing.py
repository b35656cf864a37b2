import os

from .config import Config

SECRET_KEY = "test-secret"

DB_CONFIG = Config.db_config(os.getenv("DB_PASSWORD", ""))

DEBUG = False
TESTING = True

# Tests inject in-memory repositories; never touch a database on startup.
AUTO_INIT_DB = False
AUTO_SEED_DB = False

TARGET_HOURS = 8
SESSION_POLICY = "multiple"
DISPLAY_TIMEZONE = "UTC"
ATTENDANCE_CUTOFF = "08:10"

LOG_LEVEL = "WARNING"
LOG_JSON = False
