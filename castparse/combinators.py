"""
Structural combinators for castparse.

Provides Object, Array, Optional, Nullable, Or, Dict and SingletonArray,
each wrapping child parsers into a larger schema.
"""

from __future__ import annotations

import logging
import random
import re
from functools import cache
from typing import Any, Mapping, Sequence, TypeVar

from .core import (
    Parser,
    ParserTag,
    get_parser_type,
    is_checkbox,
    is_optional,
    is_simple_type,
    populate_sample_props,
)
from .lib.sample_helpers import random_element
from .types import (
    UNDEFINED,
    InvalidInputError,
    Kind,
    ParserContext,
    SampleProps,
    classify,
    compose,
    raise_invalid,
    to_json,
    to_type,
)
from .validators import String

logger = logging.getLogger(__name__)

T = TypeVar("T")

IDENTIFIER_PATTERN = re.compile(r"^[A-Za-z_$][\w$]*$")


def Object(fields: Mapping[str, Any] | None = None, **sample: Any) -> Parser[dict[str, Any]]:
    """
    Parse a mapping into a dict holding only the declared fields.

    Unknown input keys are dropped (a projection, not a strict shape
    check). For an absent key, an Optional field is omitted, a Checkbox
    field becomes False, and any other field is an error. A None value
    counts as absent for Optional fields only.

    Usage:
        Object({
            "username": String(min_length=3),
            "is_admin": Optional(Boolean()),
        })
    """
    field_parsers = dict(fields or {})

    def parse(value: Any, context: ParserContext) -> dict[str, Any]:
        expected = context.expected("object")
        if classify(value) is not Kind.OBJECT:
            raise_invalid(context, expected, "got " + to_type(value))

        result: dict[str, Any] = {}
        for key, field_parser in field_parsers.items():
            if key not in value:
                if is_optional(field_parser):
                    continue
                if is_checkbox(field_parser):
                    result[key] = False
                    continue
                raise_invalid(context, expected, "missing " + to_json(key))
            field_value = value[key]
            if (field_value is None or field_value is UNDEFINED) and is_optional(field_parser):
                continue
            result[key] = field_parser.parse(field_value, context.child(key))
        return result

    @cache
    def get_type() -> str:
        quote = any(not IDENTIFIER_PATTERN.match(key) for key in field_parsers)
        type_ = "{"
        for key, field_parser in field_parsers.items():
            field_name = "'" + key.replace("'", "\\'") + "'" if quote else key
            if is_optional(field_parser):
                field_name += "?"
            value_type = get_parser_type(field_parser).replace("\n", "\n  ")
            type_ += f"\n  {field_name}: {value_type}"
        return type_ + "\n}"

    def random_sample() -> dict[str, Any]:
        return {key: field_parser.random_sample() for key, field_parser in field_parsers.items()}

    if sample:
        # custom samples replace the per-field defaults, no need to build them
        default_props = SampleProps(None, random_sample)
    else:
        default_props = SampleProps(
            {key: field_parser.sample_value for key, field_parser in field_parsers.items()},
            random_sample,
        )

    return Parser(
        parse_fn=parse,
        type_name=get_type,
        sample=populate_sample_props(default_props, sample),
        options=dict(fields=field_parsers),
    )


def Optional(parser: Parser[T]) -> Parser[T]:
    """
    Tag a parser as an optional Object field.

    Outside of Object the returned parser behaves exactly like the
    wrapped one; it does not accept None by itself (see Nullable).
    """
    if not isinstance(parser, Parser):
        raise TypeError(f"Optional() requires a Parser, got {type(parser).__name__}")
    return parser.with_tag(ParserTag.OPTIONAL)


def Nullable(parser: Parser[T], **sample: Any) -> Parser[T | None]:
    """Pass None through as None, otherwise delegate to the wrapped parser."""

    def parse(value: Any, context: ParserContext) -> T | None:
        if value is None:
            return None
        return parser.parse(
            value, context.with_type_prefix(compose("nullable", context.type_prefix))
        )

    inner_type = get_parser_type(parser)
    if is_simple_type(inner_type):
        type_ = f"null | {inner_type}"
    else:
        type_ = f"null | ({inner_type})"

    def random_sample() -> T | None:
        return None if random.random() < 0.5 else parser.random_sample()

    return Parser(
        parse_fn=parse,
        type_name=type_,
        sample=populate_sample_props(SampleProps(None, random_sample), sample),
        options=dict(parser=parser),
    )


def Array(
    parser: Parser[T],
    *,
    min_length: int | None = None,
    max_length: int | None = None,
    maybe_single: bool = False,
    **sample: Any,
) -> Parser[list[T]]:
    """
    Parse a list (or tuple), mapping every element through the inner parser.

    Args:
        maybe_single: wrap a non-list value into a one-element list, for
                      query strings where a key given once is a scalar
    """

    def parse(value: Any, context: ParserContext) -> list[T]:
        expected = context.expected("array")
        if classify(value) is not Kind.ARRAY and maybe_single:
            value = [value]
        if classify(value) is not Kind.ARRAY:
            raise_invalid(context, expected, "got " + to_type(value))
        if min_length is not None and len(value) < min_length:
            raise_invalid(context, expected, f"minLength should be {min_length}")
        if max_length is not None and len(value) > max_length:
            raise_invalid(context, expected, f"maxLength should be {max_length}")

        element_context = ParserContext(
            name=context.name,
            type_prefix=compose("array of", context.type_prefix),
            reason_suffix=compose(context.reason_suffix, "in array"),
        )
        return [parser.parse(element, element_context) for element in value]

    return Parser(
        parse_fn=parse,
        type_name=f"Array<{get_parser_type(parser)}>",
        sample=populate_sample_props(
            SampleProps([parser.sample_value], lambda: [parser.random_sample()]),
            sample,
        ),
        options=dict(
            parser=parser,
            min_length=min_length,
            max_length=max_length,
            maybe_single=maybe_single,
        ),
    )


def SingletonArray(parser: Parser[T]) -> Parser[T]:
    """Unwrap a one-element list, e.g. a multipart form field value."""
    array_parser = Array(parser, min_length=1, max_length=1)

    def parse(value: Any, context: ParserContext) -> T:
        elements = array_parser.parse(
            value, context.with_override_type(context.expected("singletonArray"))
        )
        return elements[0]

    return Parser(
        parse_fn=parse,
        type_name=get_parser_type(parser),
        sample=SampleProps(parser.sample_value, parser.random_sample),
        options=dict(parser=parser),
    )


def Or(parsers: Sequence[Parser[Any]], **sample: Any) -> Parser[Any]:
    """
    Try each parser in order and return the first success.

    Order is the tie-break: Or([String(), Number()]).parse(42) == "42".
    When every candidate fails, the error aggregates their reasons and
    keeps them on ``InvalidInputError.errors``.
    """
    candidates = list(parsers)
    if not candidates:
        raise ValueError("Or() requires at least one parser")

    @cache
    def get_type() -> str:
        return " | ".join(get_parser_type(candidate) for candidate in candidates)

    def parse(value: Any, context: ParserContext) -> Any:
        candidate_context = ParserContext(name=context.name)
        errors: list[InvalidInputError] = []
        for candidate in candidates:
            try:
                return candidate.parse(value, candidate_context)
            except InvalidInputError as e:
                logger.debug("Union candidate %s rejected input: %s", get_parser_type(candidate), e)
                errors.append(e)

        reasons: dict[str, None] = {}
        got_types: dict[str, None] = {}
        for error in errors:
            if error.reason.startswith("got "):
                got_types[compose(error.reason[len("got ") :], error.reason_suffix)] = None
            else:
                reasons[error.message] = None

        reason = " and ".join(f"({message})" for message in reasons)
        if got_types:
            reason = (reason + ", " if reason else "") + "got " + " and ".join(got_types)
        raise_invalid(
            context,
            context.expected(f"union type of ({get_type()})"),
            reason,
            errors=errors,
        )

    return Parser(
        parse_fn=parse,
        type_name=get_type,
        sample=populate_sample_props(
            SampleProps(
                candidates[0].sample_value,
                lambda: random_element(candidates).random_sample(),
            ),
            sample,
        ),
        options=dict(parsers=candidates),
    )


def Dict(
    *,
    value: Parser[T],
    key: Parser[Any] | None = None,
    **sample: Any,
) -> Parser[dict[Any, T]]:
    """
    Parse a mapping with arbitrary keys, checking every key and value.

    Usage:
        Dict(value=Int())                                  # str -> int
        Dict(key=Values(["asc", "desc"]), value=Boolean())
    """
    key_parser = key if key is not None else String()
    value_parser = value
    shape_parser = Object()

    def parse(input_: Any, context: ParserContext) -> dict[Any, T]:
        expected = context.expected("dict/record")
        entry_context = context.with_override_type(expected)
        shape_parser.parse(input_, entry_context)
        key_context = entry_context.with_reason_suffix(compose(context.reason_suffix, "in key"))
        value_context = entry_context.with_reason_suffix(
            compose(context.reason_suffix, "in value")
        )
        result: dict[Any, T] = {}
        for entry_key, entry_value in input_.items():
            parsed_key = key_parser.parse(entry_key, key_context)
            result[parsed_key] = value_parser.parse(entry_value, value_context)
        return result

    @cache
    def get_type() -> str:
        return f"Record<{get_parser_type(key_parser)},{get_parser_type(value_parser)}>"

    return Parser(
        parse_fn=parse,
        type_name=get_type,
        sample=populate_sample_props(
            SampleProps(
                {key_parser.sample_value: value_parser.sample_value},
                lambda: {key_parser.random_sample(): value_parser.random_sample()},
            ),
            sample,
        ),
        options=dict(key=key_parser, value=value_parser),
    )


Union = Or
Record = Dict
