from typing import Any

from pydantic import BaseModel


class Page(BaseModel):
    id: int
    title: str
    slug: str
    parent_id: int | None = None
    sort_order: int = 0
    is_draft: bool = True
    show_on_menu: bool = False
    full_path: str = ""


class NewPage(BaseModel):
    title: str
    slug: str
    parent_id: int | None = None
    sort_order: int = 0
    is_draft: bool = True
    show_on_menu: bool = False
    full_path: str = ""


class PageUpdate(BaseModel):
    """Partial page update. Only fields that were explicitly set are written."""

    title: str | None = None
    slug: str | None = None
    parent_id: int | None = None
    sort_order: int | None = None
    is_draft: bool | None = None
    show_on_menu: bool | None = None
    full_path: str | None = None

    def changes(self) -> dict[str, Any]:
        return self.model_dump(exclude_unset=True)


class Translation(BaseModel):
    page_id: int
    locale: str
    title: str
    content: dict[str, Any] | None = None
    published: bool = False


class TranslationStatus(BaseModel):
    locale: str
    published: bool
    has_content: bool


class PageTreeNode(BaseModel):
    id: int
    title: str
    slug: str
    parent_id: int | None = None
    sort_order: int = 0
    is_draft: bool = True
    show_on_menu: bool = False
    full_path: str = ""
    translations: list[TranslationStatus] = []
    children: list["PageTreeNode"] = []


PageTreeNode.model_rebuild()  # necessary for recursive types


class MenuItem(BaseModel):
    id: int
    title: str
    slug: str
    full_path: str
    children: list["MenuItem"] = []


MenuItem.model_rebuild()


class PageOrderEntry(BaseModel):
    id: int
    parent_id: int | None = None
    sort_order: int


class PageContent(BaseModel):
    """A published translation served for a requested locale.

    ``fallback_locale`` is set when the translation comes from another locale.
    """

    translation: Translation
    fallback_locale: str | None = None
