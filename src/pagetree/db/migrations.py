from pathlib import Path

from alembic.config import Config

from alembic import command

_REPO_ROOT = Path(__file__).resolve().parents[3]


def get_alembic_config(db_url: str) -> Config:
    alembic_cfg = Config(str(_REPO_ROOT / "alembic.ini"))
    alembic_cfg.set_main_option("script_location", str(_REPO_ROOT / "alembic"))
    alembic_cfg.set_main_option("sqlalchemy.url", db_url)
    return alembic_cfg


def run_migrations(db_url: str, revision: str = "head") -> None:
    command.upgrade(get_alembic_config(db_url), revision)


def reset_schema(db_url: str) -> None:
    """Drop every page table and recreate the schema from scratch."""
    cfg = get_alembic_config(db_url)
    command.downgrade(cfg, "base")
    command.upgrade(cfg, "head")
