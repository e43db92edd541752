"""Shared fixtures and helpers for tests."""

import logging
import warnings
from pathlib import Path

import pytest
from testcontainers.core.container import DockerContainer
from testcontainers.core.waiting_utils import wait_for_logs

from alembic import command
from alembic.config import Config
from pagetree.db import InMemoryPageStore
from pagetree.models import Page, Translation

logger = logging.getLogger(__name__)

_REPO_ROOT = Path(__file__).parent.parent


# ---------------------------------------------------------------------------
# Auto-marker: tag tests as "unit" or "integration" based on directory
# ---------------------------------------------------------------------------


def pytest_collection_modifyitems(items: list[pytest.Item]) -> None:
    for item in items:
        test_path = Path(str(item.fspath))
        rel = test_path.relative_to(_REPO_ROOT / "tests")
        parts = rel.parts
        if parts and parts[0] == "integration":
            item.add_marker(pytest.mark.integration)
        else:
            item.add_marker(pytest.mark.unit)


# ---------------------------------------------------------------------------
# PostgresTestBase: helpers for integration tests that need a database container
# ---------------------------------------------------------------------------


class PostgresTestBase:
    IMAGE = "postgres:16-alpine"

    @staticmethod
    def create_container() -> DockerContainer:
        logger.info("Starting %s container", PostgresTestBase.IMAGE)
        return (
            DockerContainer(PostgresTestBase.IMAGE)
            .with_exposed_ports(5432)
            .with_env("POSTGRES_PASSWORD", "postgres")
        )

    @staticmethod
    def get_alembic_config() -> Config:
        cfg = Config(str(_REPO_ROOT / "alembic.ini"))
        cfg.set_main_option("script_location", str(_REPO_ROOT / "alembic"))
        return cfg

    @staticmethod
    def run_migrations(connection_url: str) -> None:
        cfg = PostgresTestBase.get_alembic_config()
        cfg.set_main_option("sqlalchemy.url", connection_url)
        command.upgrade(cfg, "head")

    @staticmethod
    def cleanup_migrations(connection_url: str) -> None:
        cfg = PostgresTestBase.get_alembic_config()
        cfg.set_main_option("sqlalchemy.url", connection_url)
        command.downgrade(cfg, "base")

    @staticmethod
    def wait_for_postgres(container: DockerContainer) -> None:
        with warnings.catch_warnings():
            warnings.simplefilter("ignore", DeprecationWarning)
            # The official image restarts once after initdb, so wait for the second message.
            wait_for_logs(container, r"(?s)ready to accept connections.*ready to accept connections", timeout=60)


# ---------------------------------------------------------------------------
# Shared unit-test fixtures
# ---------------------------------------------------------------------------


def add_page(
    store: InMemoryPageStore,
    page_id: int,
    slug: str,
    parent_id: int | None = None,
    full_path: str = "",
    sort_order: int = 0,
    show_on_menu: bool = False,
) -> Page:
    return store.add(
        Page(
            id=page_id,
            title=slug.replace("-", " ").title(),
            slug=slug,
            parent_id=parent_id,
            sort_order=sort_order,
            show_on_menu=show_on_menu,
            full_path=full_path,
        )
    )


def add_translation(
    store: InMemoryPageStore, page_id: int, locale: str, title: str, published: bool = True
) -> Translation:
    translation = Translation(page_id=page_id, locale=locale, title=title, published=published)
    store.translations[(page_id, locale)] = translation
    return translation


@pytest.fixture
def store() -> InMemoryPageStore:
    return InMemoryPageStore()


@pytest.fixture
def site(store: InMemoryPageStore) -> InMemoryPageStore:
    """about / about/team / about/team/lead plus a root-level contact page."""
    add_page(store, 1, "about", full_path="about", sort_order=0, show_on_menu=True)
    add_page(store, 2, "team", parent_id=1, full_path="about/team", show_on_menu=True)
    add_page(store, 3, "lead", parent_id=2, full_path="about/team/lead", show_on_menu=True)
    add_page(store, 4, "contact", full_path="contact", sort_order=1, show_on_menu=True)
    titles = [(1, "About", "درباره"), (2, "Team", "تیم"), (3, "Lead", "مدیر"), (4, "Contact", "تماس")]
    for page_id, en, fa in titles:
        add_translation(store, page_id, "en", en)
        add_translation(store, page_id, "fa", fa)
    return store
