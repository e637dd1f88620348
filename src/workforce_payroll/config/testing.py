import os

SECRET_KEY = "test-secret"

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "workforce_test"),
}

REPORT_TIMEZONE = "America/Chicago"

DEBUG = False
TESTING = True

LOG_LEVEL = "WARNING"
LOG_JSON = False
