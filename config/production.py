import os

from .config import Config, env_flag

SECRET_KEY = os.getenv("SECRET_KEY", "please-set-SECRET_KEY")

DB_CONFIG = Config.db_config(os.getenv("DB_PASSWORD", ""))

DEBUG = False

AUTO_INIT_DB = env_flag("AUTO_INIT_DB", "0")
AUTO_SEED_DB = env_flag("AUTO_SEED_DB", "0")

TARGET_HOURS = Config.TARGET_HOURS
SESSION_POLICY = Config.SESSION_POLICY
DISPLAY_TIMEZONE = Config.DISPLAY_TIMEZONE
ATTENDANCE_CUTOFF = Config.ATTENDANCE_CUTOFF

LOG_LEVEL = Config.LOG_LEVEL
LOG_JSON = env_flag("LOG_JSON", "1")
