from __future__ import annotations

import importlib

from punchclock.config import get_settings_module
from punchclock.database.bootstrap import ensure_demo_users
from punchclock.database.connection import DBConfig, DatabaseConnection


def main() -> None:
    settings = importlib.import_module(get_settings_module())
    db_config = dict(settings.DB_CONFIG)
    conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))

    ensure_demo_users(conn, admin_email=settings.ADMIN_EMAIL, admin_password=settings.ADMIN_PASSWORD)

    print(
        "OK: Seeded demo users -> "
        f"{db_config.get('user')}@{db_config.get('host')}:{db_config.get('port', 3306)}/{db_config.get('database')}"
    )


if __name__ == "__main__":
    main()
