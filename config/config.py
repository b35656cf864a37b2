import os


def env_flag(name: str, default: str = "0") -> bool:
    return bool(int(os.getenv(name, default)))


class Config:
    """Settings shared by every environment module."""

    DB_HOST = os.getenv("DB_HOST", "localhost")
    DB_PORT = int(os.getenv("DB_PORT", "3306"))
    DB_USER = os.getenv("DB_USER", "root")
    DB_NAME = os.getenv("DB_NAME", "control_horario")

    # Daily target used for performance classes and the hours breakdown.
    TARGET_HOURS = float(os.getenv("TARGET_HOURS", "8"))
    # multiple: split shifts allowed; single: one session per calendar day.
    SESSION_POLICY = os.getenv("SESSION_POLICY", "multiple").lower()
    DISPLAY_TIMEZONE = os.getenv("DISPLAY_TIMEZONE", "UTC")
    ATTENDANCE_CUTOFF = os.getenv("ATTENDANCE_CUTOFF", "08:10")

    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
    LOG_JSON = env_flag("LOG_JSON")

    @classmethod
    def db_config(cls, password: str) -> dict:
        return {
            "host": cls.DB_HOST,
            "port": cls.DB_PORT,
            "user": cls.DB_USER,
            "password": password,
            "database": cls.DB_NAME,
        }
