from __future__ import annotations

import logging
from pathlib import Path

from alembic import command
from alembic.config import Config

logger = logging.getLogger(__name__)


def _project_root() -> Path:
    # infra/migrate.py -> infra -> project root
    return Path(__file__).resolve().parents[1]


def migration_dir() -> Path:
    script_location = _project_root() / "migration"
    if not script_location.exists():
        raise RuntimeError(f"Alembic script_location missing: {script_location}")
    return script_location


def run_migrations(db_url: str) -> None:
    """Upgrade the ledger database at ``db_url`` to the newest revision."""
    script_location = migration_dir()
    alembic_ini = script_location / "alembic.ini"
    if not alembic_ini.exists():
        raise RuntimeError(f"Alembic config missing: {alembic_ini}")

    cfg = Config(str(alembic_ini))
    cfg.set_main_option("script_location", str(script_location))
    cfg.set_main_option("sqlalchemy.url", db_url)
    cfg.attributes["configure_logger"] = False

    logger.info("Running migrations against %s", db_url)
    command.upgrade(cfg, "head")
