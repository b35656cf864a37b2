"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

DEFAULT_TARGET_HOURS = 8
GOOD_PERFORMANCE_RATIO = 0.8
DEFAULT_ATTENDANCE_CUTOFF = "08:10"
DEFAULT_DISPLAY_TIMEZONE = "UTC"
MIN_REPORTED_MINUTES = 1
MONTH_WEEK_BUCKETS = 4
DASHBOARD_CHART_DAYS = 7
TICK_INTERVAL_SECONDS = 1.0

MONTH_NAMES = (
    "Enero",
    "Febrero",
    "Marzo",
    "Abril",
    "Mayo",
    "Junio",
    "Julio",
    "Agosto",
    "Septiembre",
    "Octubre",
    "Noviembre",
    "Diciembre",
)

# Monday first, matching date.weekday().
WEEKDAY_NAMES = ("lunes", "martes", "miércoles", "jueves", "viernes", "sábado", "domingo")
WEEKDAY_SHORT_NAMES = ("Lun", "Mar", "Mié", "Jue", "Vie", "Sáb", "Dom")
