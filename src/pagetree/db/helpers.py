from pagetree.core.paths import descendant_prefix

PAGE_COLUMNS = "id, title, slug, parent_id, sort_order, is_draft, show_on_menu, full_path"
TRANSLATION_COLUMNS = "page_id, locale, title, content, published"

LIKE_ESCAPE = "\\"


def escape_like(value: str) -> str:
    """Escape ``%``, ``_`` and the escape character itself for a LIKE pattern."""
    return value.replace(LIKE_ESCAPE, LIKE_ESCAPE * 2).replace("%", LIKE_ESCAPE + "%").replace("_", LIKE_ESCAPE + "_")


def descendant_pattern(full_path: str) -> str:
    """LIKE pattern matching every page below ``full_path``."""
    return escape_like(descendant_prefix(full_path)) + "%"
