"""
Helper functions for number coercion.
"""

import math
import re
from decimal import ROUND_HALF_UP, Decimal

# Languages writing "3,14" rather than "3.14"
DECIMAL_COMMA_LANGUAGES = frozenset(
    {
        "af", "az", "be", "bg", "bs", "ca", "cs", "da", "de", "el", "es", "et",
        "eu", "fi", "fo", "fr", "gl", "hr", "hu", "hy", "id", "is", "it", "ka",
        "kk", "ky", "lt", "lv", "mk", "mn", "nb", "nl", "nn", "no", "pl", "pt",
        "ro", "ru", "sk", "sl", "sq", "sr", "sv", "tr", "uk", "uz", "vi",
    }
)

# Regional exceptions to the language table
DECIMAL_POINT_REGIONS = frozenset({"de-ch", "de-li", "it-ch", "es-mx", "es-us"})

UNITS = {
    "k": 1_000,
    "m": 1_000_000,
    "b": 1_000_000_000,
    "t": 1_000_000_000_000,
}

INT_PATTERN = re.compile(r"^[+-]?\d+$")
SEPARATOR_PATTERN = re.compile(r"[\s-]")


def decimal_separator(locale: str) -> str:
    """Return the decimal separator ("." or ",") for a locale tag."""
    tag = locale.replace("_", "-").lower()
    if tag in DECIMAL_POINT_REGIONS:
        return "."
    language = tag.split("-", 1)[0]
    return "," if language in DECIMAL_COMMA_LANGUAGES else "."


def parse_numeric_string(text: str) -> int | float | None:
    """Parse a plain numeric string, returning None if it is not one."""
    text = text.strip()
    if not text or "_" in text:
        return None
    if INT_PATTERN.match(text):
        return int(text)
    try:
        value = float(text)
    except ValueError:
        return None
    if math.isnan(value):
        return None
    return value


def parse_readable_number(text: str, locale: str) -> int | float:
    """
    Parse a human readable number such as "3.5k" or "123,456.00".

    Spaces and hyphens are skipped, the thousand separator of the locale
    is removed, and a trailing k/m/b/t unit multiplies the value.

    Raises:
        ValueError: with the error reason when the text is not a number
    """
    text = SEPARATOR_PATTERN.sub("", text)
    if decimal_separator(locale) == ",":
        text = text.replace(".", "").replace(",", ".")
    else:
        text = text.replace(",", "")

    value = parse_numeric_string(text)
    if value is not None:
        return value

    unit = text[-1:]
    multiplier = UNITS.get(unit.lower())
    if multiplier is None:
        if not text or parse_numeric_string(text[:-1]) is None:
            raise ValueError("got string")
        raise ValueError(f'got unknown unit "{unit}"')
    value = parse_numeric_string(text[:-1])
    if value is None:
        raise ValueError("got string")
    return value * multiplier


def round_float_error(value: int | float) -> int | float:
    """Round away binary floating point noise, e.g. 0.1 + 0.2 -> 0.3."""
    if isinstance(value, float) and math.isfinite(value):
        return float(f"{value:.15g}")
    return value


def round_half_up(value: float, digits: int) -> float:
    """Round to a number of decimal places, halves away from zero (0.125 -> 0.13)."""
    if not math.isfinite(value):
        return value
    exact = Decimal(repr(value))
    if exact.as_tuple().exponent >= -digits:
        return value
    return float(exact.quantize(Decimal(1).scaleb(-digits), rounding=ROUND_HALF_UP))
