import os

SECRET_KEY = "test-secret"

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "attendance_bot_test"),
}

OPENAI_API_KEY = "test-key"
AI_TIMEOUT_SECONDS = 5

WHATSAPP_VERIFY_TOKEN = "test-verify-token"
DEFAULT_COUNTRY_CODE = "91"
LOW_ATTENDANCE_THRESHOLD = 75.0
MAX_UPLOAD_MB = 2

DEBUG = False
TESTING = True
LOG_LEVEL = "WARNING"

AUTO_INIT_DB = False
