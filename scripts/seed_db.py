"""Create the first admin account (ADMIN_USERNAME / ADMIN_PASSWORD) if none exists."""

from __future__ import annotations

import importlib
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from dotenv import load_dotenv

from config import get_settings_module

from src.timeclock.timeclock.database.bootstrap import ensure_default_admin
from src.timeclock.timeclock.database.connection import DBConfig


def main() -> None:
    load_dotenv(override=False)
    settings = importlib.import_module(get_settings_module())
    db_config = dict(settings.DB_CONFIG)

    created = ensure_default_admin(
        db_config,
        username=settings.ADMIN_USERNAME,
        password=settings.ADMIN_PASSWORD,
    )
    target = DBConfig.from_dict(db_config).describe()
    if created:
        print(f"OK: Created admin {settings.ADMIN_USERNAME!r} -> {target}")
    else:
        print(f"OK: Admin account already present -> {target}")


if __name__ == "__main__":
    main()
