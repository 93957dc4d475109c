from __future__ import annotations

import importlib

from dotenv import load_dotenv

from backoffice.database.bootstrap import ensure_owner_user
from backoffice.settings import get_settings_module


def main() -> None:
    load_dotenv(override=False)
    settings = importlib.import_module(get_settings_module())
    db_config = dict(settings.DB_CONFIG)

    ensure_owner_user(db_config, email=settings.OWNER_EMAIL, password=settings.OWNER_PASSWORD)

    print(
        f"OK: Owner account {settings.OWNER_EMAIL} ready -> "
        f"{db_config.get('user')}@{db_config.get('host')}:{db_config.get('port', 3306)}/{db_config.get('database')}"
    )


if __name__ == "__main__":
    main()
