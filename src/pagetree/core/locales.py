import os

_DEFAULT_LOCALES = "en,fa"


def get_supported_locales() -> tuple[str, ...]:
    """Return the configured locales; the first one is the default locale."""
    raw = os.getenv("PAGETREE_LOCALES", _DEFAULT_LOCALES)
    locales = tuple(part.strip() for part in raw.split(",") if part.strip())
    return locales or tuple(_DEFAULT_LOCALES.split(","))


def get_default_locale() -> str:
    return get_supported_locales()[0]
