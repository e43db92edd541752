"""PostgresPageStore against a real database, including the path updates."""

from __future__ import annotations

import pytest

from pagetree.core import pages as page_service
from pagetree.core.errors import PageHasChildrenError, SlugConflictError
from pagetree.core.menu import get_menu
from pagetree.core.paths import generate_path
from pagetree.db import PostgresPageStore
from pagetree.models import NewPage, PageOrderEntry, PageUpdate, Translation


async def _seed(db: PostgresPageStore) -> dict[str, int]:
    about = await page_service.create_page(db, "About", "about", show_on_menu=True, locales=["en", "fa"])
    assert about.page is not None
    team = await page_service.create_page(db, "Team", "team", parent_id=about.page.id, locales=["en"])
    assert team.page is not None
    lead = await page_service.create_page(db, "Lead", "lead", parent_id=team.page.id, locales=["en"])
    assert lead.page is not None
    return {"about": about.page.id, "team": team.page.id, "lead": lead.page.id}


@pytest.mark.asyncio
async def test_create_materializes_paths(db: PostgresPageStore) -> None:
    ids = await _seed(db)

    lead = await db.get_page(ids["lead"])

    assert lead is not None
    assert lead.full_path == "about/team/lead"
    assert await generate_path(db, ids["lead"]) == "about/team/lead"
    assert [t.locale for t in await db.list_translations([ids["about"]])] == ["en", "fa"]


@pytest.mark.asyncio
async def test_slug_rename_rewrites_descendants(db: PostgresPageStore) -> None:
    ids = await _seed(db)

    result = await page_service.update_page(db, ids["about"], slug="about-us")

    assert [c.new_path for c in result.changes] == ["about-us", "about-us/team", "about-us/team/lead"]
    page = await db.get_page_by_full_path("about-us/team/lead")
    assert page is not None
    assert page.id == ids["lead"]


@pytest.mark.asyncio
async def test_prefix_query_treats_underscore_literally(db: PostgresPageStore) -> None:
    parent = await db.insert_page(NewPage(title="A", slug="a_b", full_path="a_b"))
    await db.insert_page(NewPage(title="Child", slug="child", parent_id=parent.id, full_path="a_b/child"))
    await db.insert_page(NewPage(title="Other", slug="axb-child", full_path="axb/child"))
    await db.insert_page(NewPage(title="Sibling", slug="a_bc", full_path="a_bc"))

    found = await db.list_pages_by_path_prefix("a_b")

    assert [p.full_path for p in found] == ["a_b/child"]


@pytest.mark.asyncio
async def test_duplicate_slug_raises_domain_error(db: PostgresPageStore) -> None:
    await db.insert_page(NewPage(title="About", slug="about"))
    other = await db.insert_page(NewPage(title="Contact", slug="contact"))

    with pytest.raises(SlugConflictError):
        await db.insert_page(NewPage(title="About again", slug="about"))
    with pytest.raises(SlugConflictError):
        await db.update_page(other.id, PageUpdate(slug="about"))


@pytest.mark.asyncio
async def test_reorder_and_rebuild(db: PostgresPageStore) -> None:
    ids = await _seed(db)
    contact = await page_service.create_page(db, "Contact", "contact", locales=["en"])
    assert contact.page is not None

    changes = await page_service.save_page_order(
        db, [PageOrderEntry(id=ids["team"], parent_id=contact.page.id, sort_order=0)]
    )

    assert {c.page_id for c in changes} == {ids["team"], ids["lead"]}
    assert await page_service.rebuild_paths(db) == []
    lead = await db.get_page(ids["lead"])
    assert lead is not None
    assert lead.full_path == "contact/team/lead"


@pytest.mark.asyncio
async def test_translation_content_round_trips_as_jsonb(db: PostgresPageStore) -> None:
    ids = await _seed(db)
    content = {"root": {"props": {"title": "تیم"}}, "content": [{"type": "Heading"}]}

    await db.upsert_translation(Translation(page_id=ids["team"], locale="fa", title="تیم", content=content))
    await db.upsert_translation(
        Translation(page_id=ids["team"], locale="fa", title="تیم", content=content, published=True)
    )

    stored = await db.get_translation(ids["team"], "fa")
    assert stored is not None
    assert stored.content == content
    assert stored.published is True


@pytest.mark.asyncio
async def test_menu_uses_published_translations(db: PostgresPageStore) -> None:
    ids = await _seed(db)
    await page_service.save_translation(db, ids["about"], "fa", title="درباره", published=True)

    menu = await get_menu(db, "fa")

    assert [item.title for item in menu] == ["درباره"]
    assert await get_menu(db, "en") == []


@pytest.mark.asyncio
async def test_delete_restricted_while_children_exist(db: PostgresPageStore) -> None:
    ids = await _seed(db)

    with pytest.raises(PageHasChildrenError):
        await page_service.delete_page(db, ids["team"])

    await page_service.delete_page(db, ids["lead"])
    assert await db.list_translations([ids["lead"]]) == []
    assert await db.ping() is True
    assert await db.has_schema() is True
