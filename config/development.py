import os

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "cast_portal"),
}

# Every day/month window is computed in this zone
TIME_ZONE = os.getenv("TIME_ZONE", "Asia/Tokyo")

DEBUG = True

LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")
LOG_JSON = bool(int(os.getenv("LOG_JSON", "0")))

# If enabled, app will apply schema.sql on startup (idempotent: CREATE IF NOT EXISTS)
AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "1")))

DASHBOARD_UPCOMING_LIMIT = int(os.getenv("DASHBOARD_UPCOMING_LIMIT", "10"))
QUERY_WORKERS = int(os.getenv("QUERY_WORKERS", "6"))
