import os

SECRET_KEY = "test-secret"

STORAGE_BACKEND = "local"
LOCAL_STORE_PATH = os.getenv("LOCAL_STORE_PATH", "instance/test_attendance_lists.json")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "class_attendance_test"),
}

MAX_UPLOAD_MB = 10
LOG_LEVEL = "WARNING"

DEBUG = False
TESTING = True

AUTO_INIT_DB = False
