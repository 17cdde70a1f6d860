"""
Context manager for parsing configuration (e.g., number locale).
"""

from contextlib import contextmanager
from contextvars import ContextVar

DEFAULT_LOCALE = "en"

# Context variable for the locale used by readable number parsing
_locale: ContextVar[str] = ContextVar("locale", default=DEFAULT_LOCALE)


def current_locale() -> str:
    """Return the locale readable numbers are currently parsed with."""
    return _locale.get()


@contextmanager
def parsing_context(*, locale: str | None = None):
    """
    Context manager for parsing configuration.

    Args:
        locale: Locale tag (e.g. "en-US", "de_DE") deciding whether
               readable numbers use "." or "," as decimal separator.
               Parsers constructed with an explicit ``locale=`` ignore it.

    Example:
        from castparse import Number, parsing_context

        price = Number(readable=True)

        price.parse("1,234.5")        # 1234.5

        with parsing_context(locale="de-DE"):
            price.parse("1.234,5")    # 1234.5
    """
    token = _locale.set(locale or current_locale())
    try:
        yield
    finally:
        _locale.reset(token)
