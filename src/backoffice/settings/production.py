import os

SECRET_KEY = os.getenv("SECRET_KEY", "please-set-SECRET_KEY")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "backoffice_db"),
}

DEBUG = False

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))
AUTO_SEED_DB = bool(int(os.getenv("AUTO_SEED_DB", "0")))

OWNER_EMAIL = os.getenv("OWNER_EMAIL", "")
OWNER_PASSWORD = os.getenv("OWNER_PASSWORD", "")

UPLOAD_FOLDER = os.getenv("UPLOAD_FOLDER", "/var/lib/backoffice/proof")
MAX_UPLOAD_FILES = int(os.getenv("MAX_UPLOAD_FILES", "20"))
MAX_UPLOAD_BYTES = int(os.getenv("MAX_UPLOAD_BYTES", str(5 * 1024 * 1024)))

AZURE_ENDPOINT = os.getenv("AZURE_ENDPOINT", "")
AZURE_KEY = os.getenv("AZURE_KEY", "")
OCR_POLL_ATTEMPTS = int(os.getenv("OCR_POLL_ATTEMPTS", "10"))
OCR_POLL_INTERVAL = float(os.getenv("OCR_POLL_INTERVAL", "1.5"))

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
LOG_FILE = os.getenv("LOG_FILE", "backoffice.log")

SESSION_DAYS = 7
