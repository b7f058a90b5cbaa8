# src/heartline/scripts/migrate.py
from __future__ import annotations

import os

from alembic import command
from alembic.config import Config

from heartline.core.settings import settings

PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), "..", "..", ".."))


def run_upgrade_head() -> None:
    """Apply every migration under ``migrations/`` to the configured database."""
    cfg = Config()
    cfg.set_main_option("script_location", os.path.join(PROJECT_ROOT, "migrations"))
    cfg.set_main_option("sqlalchemy.url", settings.database_url)
    command.upgrade(cfg, "head")


if __name__ == "__main__":
    run_upgrade_head()
