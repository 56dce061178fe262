"""Settings shared by every environment. Environment modules override."""
import os

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "clock_terminal"),
    "connect_timeout": int(os.getenv("DB_CONNECT_TIMEOUT", "5")),
}

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

# Device-local SQLite file: staff snapshot, sticky branch, punch outbox
LOCAL_STORE_PATH = os.getenv("LOCAL_STORE_PATH", "instance/terminal.db")

# Geofence: default radius when a shop does not set its own
GEOFENCE_RADIUS_M = float(os.getenv("GEOFENCE_RADIUS_M", "1500"))
GEO_TIMEOUT_SECONDS = float(os.getenv("GEO_TIMEOUT_SECONDS", "10"))

RESULT_RESET_SECONDS = float(os.getenv("RESULT_RESET_SECONDS", "5"))
CONNECTIVITY_POLL_SECONDS = float(os.getenv("CONNECTIVITY_POLL_SECONDS", "15"))
PRESENCE_TTL_SECONDS = float(os.getenv("PRESENCE_TTL_SECONDS", "60"))

# Lateness: late when the clock-in minute is after start + grace
LATE_GRACE_MINUTES = int(os.getenv("LATE_GRACE_MINUTES", "0"))
SHIFT_STARTS = {
    "early": os.getenv("SHIFT_EARLY_START", "07:00"),
    "standard": os.getenv("SHIFT_STANDARD_START", "08:00"),
}
# Sunday: everyone is expected by this time
WEEKLY_SHIFT_START = os.getenv("WEEKLY_SHIFT_START", "11:00")

SHOPS = [
    {"id": "315", "name": "Shop 315", "lat": -1.2841054429337717, "lng": 36.88731212229706},
    {"id": "172", "name": "Shop 172", "lat": -1.2841054429337717, "lng": 36.88731212229706},
    {"id": "Stage", "name": "Stage Outlet", "lat": -1.2838701169767366, "lng": 36.88786582236666},
]
