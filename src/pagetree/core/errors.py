"""Domain errors raised by the page service and the page stores."""


class PageTreeError(Exception):
    """Base class for page tree errors."""


class PageNotFoundError(PageTreeError):
    def __init__(self, page_id: int) -> None:
        super().__init__(f"Page {page_id} not found")
        self.page_id = page_id


class SlugConflictError(PageTreeError):
    def __init__(self, slug: str) -> None:
        super().__init__(f"Slug {slug!r} is already in use by another page")
        self.slug = slug


class PageHasChildrenError(PageTreeError):
    def __init__(self, page_id: int) -> None:
        super().__init__(f"Page {page_id} has child pages; move or delete them first")
        self.page_id = page_id


class InvalidParentError(PageTreeError):
    """Raised when a parent assignment would make a page its own ancestor."""

    def __init__(self, page_id: int, parent_id: int) -> None:
        super().__init__(f"Page {parent_id} cannot become the parent of page {page_id}")
        self.page_id = page_id
        self.parent_id = parent_id


class TranslationNotFoundError(PageTreeError):
    def __init__(self, page_id: int, locale: str) -> None:
        super().__init__(f"Page {page_id} has no {locale!r} translation")
        self.page_id = page_id
        self.locale = locale


class InvalidSlugError(PageTreeError):
    """Raised for slugs that cannot be used as a single path segment."""

    def __init__(self, slug: str) -> None:
        super().__init__(f"Slug {slug!r} must be non-empty and contain no '/' or whitespace")
        self.slug = slug
