"""
Date and time parsers for castparse.

Date yields a datetime; DateString, TimeString and Timestamp reduce the
same input domain (datetime, epoch milliseconds, ISO-like strings) to a
canonical string whose lexicographic order is chronological.
"""

from __future__ import annotations

from datetime import datetime, timedelta
from functools import lru_cache
from typing import Any, Callable

from .core import Parser, populate_sample_props
from .lib.date_helpers import (
    PRECISIONS,
    TIME_PATTERN,
    Precision,
    format_time,
    fraction_to_microsecond,
    from_epoch_millis,
    parse_date_string,
    to_date_string,
    to_time_string,
    to_timestamp_string,
)
from .lib.sample_helpers import random_delta
from .types import Kind, ParserContext, SampleProps, classify, raise_invalid, to_json, to_type
from .validators import String

Bound = int | float | datetime | str


def to_datetime(value: Any) -> datetime | None:
    """Coerce a datetime, date, epoch-millis number or date string."""
    kind = classify(value)
    if kind is Kind.DATE:
        if isinstance(value, datetime):
            return value
        return datetime(value.year, value.month, value.day)
    if kind is Kind.NUMBER:
        return from_epoch_millis(value)
    if kind is Kind.STRING:
        return parse_date_string(value)
    return None


def _describe(value: Any) -> str:
    if isinstance(value, str) and value:
        return f"string ({to_json(value)})"
    return to_type(value)


def _check_range(
    context: ParserContext,
    expected: str,
    value: Any,
    parse_bound: Callable[[Any, ParserContext], Any],
    min: Bound | None,
    max: Bound | None,
    subject: str,
    key: Callable[[Any], Any] = lambda v: v,
) -> None:
    name_suffix = " of " + (context.name or subject)
    if min is not None:
        lower = parse_bound(min, ParserContext(name="min value" + name_suffix))
        if key(value) < key(lower):
            raise_invalid(context, expected, "min value should be " + to_json(min))
    if max is not None:
        upper = parse_bound(max, ParserContext(name="max value" + name_suffix))
        if key(value) > key(upper):
            raise_invalid(context, expected, "max value should be " + to_json(max))


def _check_precision(precision: str) -> None:
    if precision not in PRECISIONS:
        raise ValueError(
            f"Unknown precision {precision!r}, expected one of {', '.join(PRECISIONS)}"
        )


def _random_datetime() -> datetime:
    return datetime.now() + timedelta(days=random_delta(3650))


def Date(*, min: Bound | None = None, max: Bound | None = None, **sample: Any) -> Parser[datetime]:
    """
    Parse a datetime from a datetime, epoch milliseconds or date string.

    Date strings need at least day granularity ("2022-09-17"); a time
    part needs hours and minutes ("2022-09-17 13:45").

    Usage:
        Date()
        Date(min="2022-01-01", max=datetime.now())
    """

    def parse(value: Any, context: ParserContext) -> datetime:
        expected = context.expected("date")
        result = to_datetime(value)
        if result is None:
            raise_invalid(context, expected, "got " + _describe(value))
        _check_range(
            context,
            expected,
            result,
            _parse_date,
            min,
            max,
            "date",
            key=datetime.timestamp,
        )
        return result

    return Parser(
        parse_fn=parse,
        type_name="Date",
        sample=populate_sample_props(
            SampleProps(datetime(2022, 9, 17), _random_datetime),
            sample,
        ),
        options=dict(min=min, max=max),
    )


def _parse_date(value: Any, context: ParserContext) -> datetime:
    return _DATE_PARSER.parse(value, context)


def DateString(
    *,
    non_empty: bool = False,
    min: Bound | None = None,
    max: Bound | None = None,
    **sample: Any,
) -> Parser[str]:
    """Parse a date into "yyyy-mm-dd". Empty string passes unless non_empty."""
    string_parser = String(trim=True, non_empty=non_empty)

    def parse(value: Any, context: ParserContext) -> str:
        if not non_empty and value == "":
            return ""
        expected = context.expected("dateString")
        inner = context.with_override_type(expected)
        if isinstance(value, str):
            value = string_parser.parse(value, inner)
        result = to_date_string(_DATE_PARSER.parse(value, inner))
        _check_range(context, expected, result, _parse_date_string, min, max, "dateString")
        return result

    return Parser(
        parse_fn=parse,
        type_name="string",
        sample=populate_sample_props(
            SampleProps("2022-09-17", lambda: to_date_string(_random_datetime())),
            sample,
        ),
        options=dict(non_empty=non_empty, min=min, max=max),
    )


def _parse_date_string(value: Any, context: ParserContext) -> str:
    return _DATE_STRING_PARSER.parse(value, context)


def TimeString(
    *,
    non_empty: bool = False,
    min: Bound | None = None,
    max: Bound | None = None,
    precision: Precision = "minute",
    **sample: Any,
) -> Parser[str]:
    """
    Parse a time of day into "hh:mm" ("hh:mm:ss[.mmm]" with finer precision).

    Accepts "9:45", "09:45:00.123", "2023-09-07 09:45", ISO strings,
    datetimes and epoch milliseconds. Empty string passes unless non_empty.
    """
    _check_precision(precision)
    string_parser = String(trim=True, non_empty=non_empty)

    def parse(value: Any, context: ParserContext) -> str:
        if not non_empty and value == "":
            return ""
        expected = context.expected("timeString")
        inner = context.with_override_type(expected)
        if isinstance(value, str) and "T" not in value:
            text = string_parser.parse(value, inner)
            found = TIME_PATTERN.search(text)
            if not found:
                raise_invalid(context, expected, "got " + _describe(value))
            hour, minute, second, fraction = found.groups()
            hour, minute, second = int(hour), int(minute), int(second or 0)
            if hour > 23:
                raise_invalid(context, expected, "hour should be within 0 to 23")
            if minute > 59:
                raise_invalid(context, expected, "minute should be within 0 to 59")
            if second > 59:
                raise_invalid(context, expected, "second should be within 0 to 59")
            millisecond = fraction_to_microsecond(fraction) // 1000
            result = format_time(hour, minute, second, millisecond, precision)
        else:
            result = to_time_string(_DATE_PARSER.parse(value, inner), precision)
        _check_range(context, expected, result, bound_parser, min, max, "timeString")
        return result

    def bound_parser(value: Any, context: ParserContext) -> str:
        return _time_string_bounds(precision).parse(value, context)

    return Parser(
        parse_fn=parse,
        type_name="string",
        sample=populate_sample_props(
            SampleProps(
                format_time(13, 45, 0, 0, precision),
                lambda: to_time_string(_random_datetime(), precision),
            ),
            sample,
        ),
        options=dict(non_empty=non_empty, min=min, max=max, precision=precision),
    )


def Timestamp(
    *,
    non_empty: bool = False,
    min: Bound | None = None,
    max: Bound | None = None,
    precision: Precision = "second",
    **sample: Any,
) -> Parser[str]:
    """Parse a date into "yyyy-mm-dd hh:mm:ss" (time part trimmed to precision)."""
    _check_precision(precision)
    string_parser = String(trim=True, non_empty=non_empty)

    def parse(value: Any, context: ParserContext) -> str:
        if not non_empty and value == "":
            return ""
        expected = context.expected("timestamp")
        inner = context.with_override_type(expected)
        if isinstance(value, str):
            value = string_parser.parse(value, inner)
        result = to_timestamp_string(_DATE_PARSER.parse(value, inner), precision)
        _check_range(context, expected, result, bound_parser, min, max, "timestamp")
        return result

    def bound_parser(value: Any, context: ParserContext) -> str:
        return _timestamp_bounds(precision).parse(value, context)

    return Parser(
        parse_fn=parse,
        type_name="string",
        sample=populate_sample_props(
            SampleProps(
                to_timestamp_string(datetime(2022, 9, 17, 13, 45), precision),
                lambda: to_timestamp_string(_random_datetime(), precision),
            ),
            sample,
        ),
        options=dict(non_empty=non_empty, min=min, max=max, precision=precision),
    )


@lru_cache(maxsize=None)
def _time_string_bounds(precision: Precision) -> Parser[str]:
    return TimeString(precision=precision)


@lru_cache(maxsize=None)
def _timestamp_bounds(precision: Precision) -> Parser[str]:
    return Timestamp(precision=precision)


_DATE_PARSER = Date()
_DATE_STRING_PARSER = DateString()
