import os


def get_settings_module() -> str:
    env = os.getenv("APP_ENV", "development").lower()

    if env in {"prod", "production"}:
        return "backoffice.settings.production"

    if env in {"test", "testing"}:
        return "backoffice.settings.testing"

    return "backoffice.settings.development"
