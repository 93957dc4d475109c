import os
import tempfile

SECRET_KEY = "test-secret"

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "backoffice_test"),
}

DEBUG = False
TESTING = True

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))
AUTO_SEED_DB = bool(int(os.getenv("AUTO_SEED_DB", "0")))

OWNER_EMAIL = "owner@test.local"
OWNER_PASSWORD = "owner123"

UPLOAD_FOLDER = os.path.join(tempfile.gettempdir(), "backoffice-test-proof")
MAX_UPLOAD_FILES = 20
MAX_UPLOAD_BYTES = 5 * 1024 * 1024

AZURE_ENDPOINT = "https://ocr.test.local"
AZURE_KEY = "test-key"
OCR_POLL_ATTEMPTS = 3
OCR_POLL_INTERVAL = 0.0

LOG_LEVEL = "WARNING"
LOG_FILE = os.path.join(tempfile.gettempdir(), "backoffice-test.log")

SESSION_DAYS = 7
