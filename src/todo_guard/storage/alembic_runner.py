"""Utilities to run Alembic migrations programmatically."""

from __future__ import annotations

from pathlib import Path

from alembic import command
from alembic.config import Config

_PACKAGE_DIR = Path(__file__).resolve().parents[1]


def script_location() -> Path:
    """Migration scripts bundled in the wheel, or the source checkout's `alembic/`."""

    bundled = _PACKAGE_DIR / "alembic"
    if bundled.is_dir():
        return bundled
    return _PACKAGE_DIR.parents[1] / "alembic"


def upgrade_head(db_path: Path) -> None:
    """Apply Alembic migrations up to head for the given SQLite database."""

    config = Config()
    config.set_main_option("script_location", str(script_location()))
    config.set_main_option("sqlalchemy.url", f"sqlite:///{db_path}")
    command.upgrade(config, "head")
