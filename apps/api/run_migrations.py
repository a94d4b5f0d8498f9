#!/usr/bin/env python3
"""Container startup step: wait for the database, then `alembic upgrade head`.

Exits non-zero when the database never comes up or a migration fails, so
the API never starts on an unknown schema.
"""

import os
import sys
import time
from typing import Optional

from dotenv import load_dotenv

load_dotenv()

API_ROOT = os.path.dirname(os.path.abspath(__file__))
READY_ATTEMPTS = 30


def alembic_config(database_url: Optional[str] = None):
    """Alembic config for this app, optionally pointed at a specific database."""
    from alembic.config import Config

    cfg = Config(os.path.join(API_ROOT, "alembic.ini"))
    cfg.set_main_option("script_location", os.path.join(API_ROOT, "alembic"))
    if database_url:
        cfg.set_main_option("sqlalchemy.url", database_url.replace("%", "%%"))
    return cfg


def upgrade_to_head(database_url: Optional[str] = None) -> None:
    from alembic import command

    command.upgrade(alembic_config(database_url), "head")


def downgrade_to_base(database_url: Optional[str] = None) -> None:
    from alembic import command

    command.downgrade(alembic_config(database_url), "base")


def wait_for_database(attempts: int = READY_ATTEMPTS, delay: float = 1.0) -> bool:
    from core.database import check_db_connection

    for attempt in range(1, attempts + 1):
        if check_db_connection():
            return True
        print(f"Database unavailable, retrying ({attempt}/{attempts})")
        time.sleep(delay)
    return False


def main() -> int:
    if not wait_for_database():
        print("ERROR: database did not become ready")
        return 1
    try:
        upgrade_to_head()
    except Exception as e:
        print(f"ERROR: alembic upgrade failed: {e}")
        return 1
    print("Migrations applied")
    return 0


if __name__ == '__main__':
    sys.exit(main())
