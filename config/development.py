import os

SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")

# "mysql" (shared backend) or "local" (single-user JSON file)
STORAGE_BACKEND = os.getenv("STORAGE_BACKEND", "local")
LOCAL_STORE_PATH = os.getenv("LOCAL_STORE_PATH", "instance/attendance_lists.json")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "class_attendance"),
}

MAX_UPLOAD_MB = int(os.getenv("MAX_UPLOAD_MB", "10"))
LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")

DEBUG = True

# If enabled, app will apply schema.sql on startup (idempotent: CREATE IF NOT EXISTS)
AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "1")))
