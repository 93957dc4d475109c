"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

DEFAULT_SESSION_DAYS = 7
MIN_PASSWORD_LENGTH = 6

# Drink types settled through commission (the remaining addons are plain expenses).
DRINK_TYPES = ("tea", "juice")

OCR_READ_PATH = "/vision/v3.2/read/analyze"
