"""
Built-in primitive parsers for castparse.

Provides factory functions that return Parser instances. Each accepts a
deliberately wider input domain than its output type and performs only
whitelisted coercions before validating.
"""

from __future__ import annotations

import math
import random
import re
from typing import Any, Sequence, TypeVar

from .context import current_locale
from .core import Parser, ParserTag, populate_sample_props
from .lib.number_helpers import (
    parse_numeric_string,
    parse_readable_number,
    round_float_error,
    round_half_up,
)
from .lib.sample_helpers import random_delta, random_element, random_hex, random_id
from .types import (
    UNDEFINED,
    Kind,
    ParserContext,
    SampleProps,
    classify,
    raise_invalid,
    to_json,
    to_type,
)

T = TypeVar("T")

URL_PATTERN = re.compile(r"^(.+?)://(.+?)(/|$)")
EMAIL_PATTERN = re.compile(r"^.+?@(.+)$")
COLOR_PATTERN = re.compile(r"^#[0-9a-f]{6}$", re.IGNORECASE)


def format_number(value: int | float) -> str:
    """Render a number the way it would be written in a JSON payload."""
    if isinstance(value, float):
        if math.isinf(value):
            return "Infinity" if value > 0 else "-Infinity"
        if value.is_integer() and abs(value) < 1e21:
            return str(int(value))
    return repr(value)


def same_value(a: Any, b: Any) -> bool:
    """Strict equality: 1 and 1.0 are the same number, True is not."""
    if isinstance(a, bool) or isinstance(b, bool):
        return type(a) is type(b) and a == b
    if classify(a) is Kind.NUMBER and classify(b) is Kind.NUMBER:
        return a == b
    return type(a) is type(b) and a == b


# =============================================================================
# Strings
# =============================================================================


def String(
    *,
    non_empty: bool = False,
    min_length: int | None = None,
    max_length: int | None = None,
    match: str | re.Pattern[str] | None = None,
    trim: bool = True,
    **sample: Any,
) -> Parser[str]:
    """
    Parse a string; numbers are stringified.

    Usage:
        String()
        String(non_empty=True, max_length=32)
        String(match=r"^[a-z]+$", trim=False)
    """
    pattern = re.compile(match) if isinstance(match, str) else match

    def parse(value: Any, context: ParserContext) -> str:
        expected = context.expected("string")
        if trim and isinstance(value, str):
            value = value.strip()
        if non_empty:
            if not expected.startswith("non-empty "):
                expected = "non-empty " + expected
            if value == "":
                raise_invalid(context, expected, "got empty string")

        kind = classify(value)
        if kind is Kind.NAN:
            raise_invalid(context, expected, "got NaN")
        if kind is Kind.NUMBER:
            value = format_number(value)
        elif kind is not Kind.STRING:
            raise_invalid(context, expected, "got " + to_type(value))

        if min_length is not None and len(value) < min_length:
            raise_invalid(context, expected, f"minLength should be {min_length}")
        if max_length is not None and len(value) > max_length:
            raise_invalid(context, expected, f"maxLength should be {max_length}")
        if pattern is not None and not pattern.search(value):
            raise_invalid(context, expected, "should match " + to_json(pattern.pattern))
        return value

    return Parser(
        parse_fn=parse,
        type_name="string",
        sample=populate_sample_props(
            SampleProps("text", _random_text),
            sample,
        ),
        options=dict(
            non_empty=non_empty,
            min_length=min_length,
            max_length=max_length,
            match=pattern,
            trim=trim,
        ),
    )


def _random_text() -> str:
    return format(random.getrandbits(48), "x")


def Url(
    *,
    domain: str | None = None,
    protocol: str | None = None,
    protocols: Sequence[str] | None = None,
    non_empty: bool = False,
    min_length: int | None = None,
    max_length: int | None = None,
    match: str | re.Pattern[str] | None = None,
    trim: bool = True,
    **sample: Any,
) -> Parser[str]:
    """
    Parse a "<protocol>://<domain>/..." url. Empty string passes unless non_empty.

    Usage:
        Url(protocols=["https", "http"])
        Url(protocol="https", domain="example.net")
    """
    string_parser = String(
        non_empty=non_empty,
        min_length=min_length,
        max_length=max_length,
        match=match,
        trim=trim,
    )

    def parse(value: Any, context: ParserContext) -> str:
        if not non_empty and value == "":
            return ""
        expected = context.expected("url")
        url = string_parser.parse(value, context.with_override_type(expected))
        found = URL_PATTERN.match(url)
        if not found:
            raise_invalid(context, expected, "should contains protocol and domain/host")
        url_protocol, url_domain = found.group(1), found.group(2)
        if protocols is not None and url_protocol not in protocols:
            raise_invalid(
                context, expected, "protocol should be any of " + to_json(list(protocols))
            )
        if protocol is not None and url_protocol != protocol:
            raise_invalid(context, expected, "protocol should be " + to_json(protocol))
        if domain is not None and url_domain != domain:
            raise_invalid(context, expected, "domain should be " + to_json(domain))
        return url

    return Parser(
        parse_fn=parse,
        type_name="string",
        sample=populate_sample_props(
            SampleProps(
                "https://www.example.net",
                lambda: f"https://www.example.net/users/{random_id()}",
            ),
            sample,
        ),
        options=dict(
            string_parser.options, domain=domain, protocol=protocol, protocols=protocols
        ),
    )


def Email(
    *,
    domain: str | None = None,
    non_empty: bool = False,
    min_length: int | None = None,
    max_length: int | None = None,
    match: str | re.Pattern[str] | None = None,
    trim: bool = True,
    **sample: Any,
) -> Parser[str]:
    """Parse an email address, optionally of an exact domain."""
    string_parser = String(
        non_empty=non_empty,
        min_length=min_length,
        max_length=max_length,
        match=match,
        trim=trim,
    )

    def parse(value: Any, context: ParserContext) -> str:
        if not non_empty and value == "":
            return ""
        expected = context.expected("email")
        email = string_parser.parse(value, context.with_override_type(expected))
        found = EMAIL_PATTERN.match(email)
        if not found:
            raise_invalid(context, expected, 'should contains "@" and domain')
        if domain is not None and found.group(1) != domain:
            raise_invalid(context, expected, "domain should be " + to_json(domain))
        return email

    return Parser(
        parse_fn=parse,
        type_name="string",
        sample=populate_sample_props(
            SampleProps(
                "user@example.net",
                lambda: f"user-{random_id()}@example.net",
            ),
            sample,
        ),
        options=dict(string_parser.options, domain=domain),
    )


def Color(**sample: Any) -> Parser[str]:
    """Parse an html <input type="color"> value ("#rrggbb")."""

    def parse(value: Any, context: ParserContext) -> str:
        expected = context.expected("color")
        if not isinstance(value, str) or not value:
            raise_invalid(context, expected, "got " + to_type(value))
        if not COLOR_PATTERN.match(value):
            raise_invalid(context, expected, 'should be in "#rrggbb" hexadecimal format')
        return value

    return Parser(
        parse_fn=parse,
        type_name="string",
        sample=populate_sample_props(
            SampleProps("#c0ffee", lambda: "#" + "".join(random_hex() for _ in range(6))),
            sample,
        ),
    )


# =============================================================================
# Numbers
# =============================================================================


def Number(
    *,
    min: float | None = None,
    max: float | None = None,
    readable: bool = False,
    locale: str | None = None,
    round_error: bool = True,
    **sample: Any,
) -> Parser[int | float]:
    """
    Parse a number; numeric strings are converted.

    Args:
        readable: accept "3.5k", "123,456.00", "12 400" style strings
        locale: decides the decimal separator of readable numbers
                (defaults to the active parsing_context)
        round_error: round away float noise (0.1 + 0.2 -> 0.3)
    """

    def parse(value: Any, context: ParserContext) -> int | float:
        expected = context.expected("number")
        type_ = to_type(value)
        if isinstance(value, str):
            if not value.strip():
                raise_invalid(context, expected, "got " + type_)
            if readable:
                try:
                    value = parse_readable_number(value, locale or current_locale())
                except ValueError as e:
                    raise_invalid(context, expected, str(e))
            else:
                value = parse_numeric_string(value)
                if value is None:
                    raise_invalid(context, expected, "got " + type_)
        if classify(value) is not Kind.NUMBER:
            raise_invalid(context, expected, "got " + type_)

        if round_error:
            value = round_float_error(value)
        if min is not None and value < min:
            raise_invalid(context, expected, "min value should be " + format_number(min))
        if max is not None and value > max:
            raise_invalid(context, expected, "max value should be " + format_number(max))
        return value

    return Parser(
        parse_fn=parse,
        type_name="number",
        sample=populate_sample_props(
            SampleProps(3.14, lambda: random_delta(10)),
            sample,
        ),
        options=dict(min=min, max=max, readable=readable, locale=locale, round_error=round_error),
    )


def Float(
    *,
    min: float | None = None,
    max: float | None = None,
    readable: bool = False,
    locale: str | None = None,
    to_fixed: int | None = None,
    to_precision: int | None = None,
    **sample: Any,
) -> Parser[float]:
    """
    Parse a number reported as "float", optionally trimming digits.

    Usage:
        Float(to_fixed=2)        # 3.1415 -> 3.14 (decimal places)
        Float(to_precision=3)    # 3.1415 -> 3.14 (significant digits)
    """
    number_parser = Number(min=min, max=max, readable=readable, locale=locale)

    def parse(value: Any, context: ParserContext) -> float:
        result = float(
            number_parser.parse(value, context.with_override_type(context.expected("float")))
        )
        if to_fixed is not None:
            result = round_half_up(result, to_fixed)
        if to_precision is not None:
            result = float(f"{result:.{to_precision}g}")
        return result

    return Parser(
        parse_fn=parse,
        type_name="number",
        sample=populate_sample_props(SampleProps(3.14, random.random), sample),
        options=dict(number_parser.options, to_fixed=to_fixed, to_precision=to_precision),
    )


def Int(
    *,
    min: float | None = None,
    max: float | None = None,
    readable: bool = False,
    locale: str | None = None,
    **sample: Any,
) -> Parser[int]:
    """Parse an integer; integral floats such as 42.0 become ints."""
    number_parser = Number(min=min, max=max, readable=readable, locale=locale)

    def parse(value: Any, context: ParserContext) -> int:
        expected = context.expected("int")
        result = number_parser.parse(value, context.with_override_type(expected))
        if isinstance(result, int):
            return result
        if result.is_integer():
            return int(result)
        raise_invalid(context, expected, "got floating point number")

    return Parser(
        parse_fn=parse,
        type_name="number",
        sample=populate_sample_props(SampleProps(42, lambda: random_id() - 50), sample),
        options=number_parser.options,
    )


def Id(**sample: Any) -> Parser[int]:
    """Parse a database auto-increment primary key (int >= 1)."""
    int_parser = Int(min=1)

    def parse(value: Any, context: ParserContext) -> int:
        return int_parser.parse(value, context.with_override_type("id"))

    return Parser(
        parse_fn=parse,
        type_name="number",
        sample=populate_sample_props(SampleProps(1, random_id), sample),
        options=int_parser.options,
    )


# =============================================================================
# Booleans
# =============================================================================


def parse_boolean(value: Any) -> bool:
    """Truthiness of form / query-string values: " " and "false" are false."""
    kind = classify(value)
    if kind is Kind.STRING:
        return value.strip() not in ("", "false")
    if kind in (Kind.NULL, Kind.UNDEFINED, Kind.NAN):
        return False
    if kind is Kind.BOOL:
        return value
    if kind is Kind.NUMBER:
        return value != 0
    return True


def Boolean(expected_value: Any = None, **sample: Any) -> Parser[bool]:
    """
    Parse any value into a boolean by truthiness.

    Usage:
        Boolean()            # "on" -> True, "false" -> False
        Boolean(True)        # must be truthy, e.g. accepting terms
    """
    if expected_value is not None:
        expected_value = bool(expected_value)

    def parse(value: Any, context: ParserContext) -> bool:
        result = parse_boolean(value)
        if expected_value is not None and result is not expected_value:
            expected = context.expected(
                f"boolean (expect: {'true' if expected_value else 'false'})"
            )
            raise_invalid(context, expected, "got " + to_type(value))
        return result

    if expected_value is None:
        default_props = SampleProps(True, lambda: random.random() < 0.5)
    else:
        default_props = SampleProps(expected_value, lambda: expected_value)

    return Parser(
        parse_fn=parse,
        type_name="boolean",
        sample=populate_sample_props(default_props, sample),
        options=dict(expected_value=expected_value),
    )


def Checkbox(**sample: Any) -> Parser[bool]:
    """
    Parse an html <input type="checkbox"> value.

    "on" is True; absence or "" is False. Inside Object, a missing
    checkbox field is False instead of an error.
    """

    def parse(value: Any, context: ParserContext) -> bool:
        if value == "on":
            return True
        if value is UNDEFINED or value == "":
            return False
        raise_invalid(context, context.expected("checkbox"), "got " + to_type(value))

    return Parser(
        parse_fn=parse,
        type_name="boolean",
        sample=populate_sample_props(
            SampleProps(True, lambda: random.random() < 0.5),
            sample,
        ),
        tag=ParserTag.CHECKBOX,
    )


# =============================================================================
# Literals
# =============================================================================


def Literal(value: T) -> Parser[T]:
    """Accept exactly one value."""

    def parse(input_: Any, context: ParserContext) -> T:
        if same_value(input_, value):
            return value
        raise_invalid(
            context, context.expected("literal " + to_json(value)), "got " + to_type(input_)
        )

    return Parser(
        parse_fn=parse,
        type_name=to_json(value),
        sample=SampleProps(value, lambda: value),
        options=dict(value=value),
    )


def Values(values: Sequence[T], **sample: Any) -> Parser[T]:
    """
    Accept one member of a fixed set of values.

    Usage:
        Values(["guest", "customer", "shop"])
        Enums(["asc", "desc"])
    """
    members = list(values)
    if not members:
        raise ValueError("Values() requires at least one value")

    def parse(value: Any, context: ParserContext) -> T:
        for member in members:
            if same_value(value, member):
                return member
        if context.override_type:
            expected = context.override_type
        else:
            subject = "enums value"
            if context.name:
                subject += " of " + to_json(context.name)
            expected = subject + ", expect " + to_json(members)
        kind = classify(value)
        if kind is Kind.NUMBER:
            got = format_number(value)
        elif kind is Kind.STRING and value:
            got = to_json(value)
        else:
            got = to_type(value)
        raise_invalid(context, expected, "got " + got, name=None)

    return Parser(
        parse_fn=parse,
        type_name=" | ".join(to_json(member) for member in members),
        sample=populate_sample_props(
            SampleProps(members[0], lambda: random_element(members)),
            sample,
        ),
        options=dict(values=members),
    )


Enums = Values
