import os

SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")

# mysql | memory
STORAGE_BACKEND = os.getenv("STORAGE_BACKEND", "memory")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "classroom_checkin"),
}

# Check-in code rotation, in seconds
ROTATION_PERIOD_SECONDS = int(os.getenv("ROTATION_PERIOD_SECONDS", "60"))
GRACE_SECONDS = int(os.getenv("GRACE_SECONDS", "5"))
TIMER_INTERVAL_SECONDS = int(os.getenv("TIMER_INTERVAL_SECONDS", "1"))

DEBUG = True
LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")

# If enabled, app will apply schema.sql on startup (idempotent: CREATE IF NOT EXISTS)
AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "1")))
# Fill empty storage with demo accounts, courses and history
AUTO_SEED_DB = bool(int(os.getenv("AUTO_SEED_DB", "1")))
