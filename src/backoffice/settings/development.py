import os

SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "backoffice_db"),
}

DEBUG = True

# If enabled, app will apply schema.sql on startup (idempotent: CREATE IF NOT EXISTS)
AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "1")))
# Optional: also create the bootstrap owner account on startup
AUTO_SEED_DB = bool(int(os.getenv("AUTO_SEED_DB", "0")))

OWNER_EMAIL = os.getenv("OWNER_EMAIL", "owner@example.com")
OWNER_PASSWORD = os.getenv("OWNER_PASSWORD", "owner123")

UPLOAD_FOLDER = os.getenv("UPLOAD_FOLDER", os.path.join(os.getcwd(), "uploads", "proof"))
MAX_UPLOAD_FILES = int(os.getenv("MAX_UPLOAD_FILES", "20"))
MAX_UPLOAD_BYTES = int(os.getenv("MAX_UPLOAD_BYTES", str(5 * 1024 * 1024)))

AZURE_ENDPOINT = os.getenv("AZURE_ENDPOINT", "")
AZURE_KEY = os.getenv("AZURE_KEY", "")
OCR_POLL_ATTEMPTS = int(os.getenv("OCR_POLL_ATTEMPTS", "10"))
OCR_POLL_INTERVAL = float(os.getenv("OCR_POLL_INTERVAL", "1.5"))

LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")
LOG_FILE = os.getenv("LOG_FILE", "backoffice.log")

SESSION_DAYS = 7
