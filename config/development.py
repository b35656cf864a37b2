import os

from .config import Config, env_flag

SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")

DB_CONFIG = Config.db_config(os.getenv("DB_PASSWORD", ""))

DEBUG = True

# If enabled, app will apply schema.sql on startup (idempotent: CREATE IF NOT EXISTS)
AUTO_INIT_DB = env_flag("AUTO_INIT_DB", "1")
# Optional: also seed the demo company and users on startup
AUTO_SEED_DB = env_flag("AUTO_SEED_DB", "0")

TARGET_HOURS = Config.TARGET_HOURS
SESSION_POLICY = Config.SESSION_POLICY
DISPLAY_TIMEZONE = Config.DISPLAY_TIMEZONE
ATTENDANCE_CUTOFF = Config.ATTENDANCE_CUTOFF

LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")
LOG_JSON = Config.LOG_JSON
