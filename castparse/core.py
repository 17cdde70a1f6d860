"""
Core parser class for castparse.

Provides the immutable Parser node, its field tags, and the sample /
reflection helpers shared by every primitive and combinator.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field, replace
from enum import Enum, auto
from typing import Any, Callable, Generic, Mapping, Sequence, TypedDict, TypeVar

from .lib.sample_helpers import random_element
from .types import (
    UNDEFINED,
    Kind,
    ParseFn,
    ParserContext,
    SampleProps,
    classify,
    to_type,
)

T = TypeVar("T")

SIMPLE_TYPE_PATTERN = re.compile(r"^\w+$")


class ParserTag(Enum):
    """How the Object combinator treats a field whose key is absent."""

    NONE = auto()
    OPTIONAL = auto()
    CHECKBOX = auto()


class CustomSampleOptions(TypedDict, total=False):
    sample_value: Any
    sample_values: Sequence[Any]
    random_sample: Callable[[], Any]


@dataclass(frozen=True, slots=True)
class Parser(Generic[T]):
    """
    Immutable parser node.

    The fundamental building block. Wraps a parse function with a type
    signature and sample hooks. Combinators hold references to child
    Parser values; nothing is mutated after construction, so one parser
    tree can be shared across threads.
    """

    parse_fn: ParseFn
    type_name: str | Callable[[], str]
    sample: SampleProps[T]
    tag: ParserTag = ParserTag.NONE
    options: Mapping[str, Any] = field(default_factory=dict)

    def parse(
        self, value: Any, context: ParserContext | Mapping[str, Any] | None = None
    ) -> T:
        """
        Validate and coerce a value.

        Returns:
            The parsed value

        Raises:
            InvalidInputError: if the value is invalid
        """
        return self.parse_fn(value, ParserContext.of(context))

    def __call__(
        self, value: Any, context: ParserContext | Mapping[str, Any] | None = None
    ) -> T:
        return self.parse(value, context)

    @property
    def type(self) -> str:
        """Textual type signature, e.g. ``Array<string>``."""
        if callable(self.type_name):
            return self.type_name()
        return self.type_name

    @property
    def sample_value(self) -> T:
        return self.sample.sample_value

    def random_sample(self) -> T:
        return self.sample.random_sample()

    @property
    def optional(self) -> bool:
        return self.tag is ParserTag.OPTIONAL

    @property
    def checkbox(self) -> bool:
        return self.tag is ParserTag.CHECKBOX

    def with_tag(self, tag: ParserTag) -> Parser[T]:
        """Return a new parser carrying the tag; this one is unchanged."""
        return replace(self, tag=tag)


def populate_sample_props(
    default_props: SampleProps[T], custom_props: Mapping[str, Any] | None = None
) -> SampleProps[T]:
    """
    Resolve the sample hooks of a parser from user overrides.

    sample_value falls back to: explicit ``sample_value`` > first of
    ``sample_values`` > a call of ``random_sample`` > the default.
    """
    if not custom_props:
        return default_props

    unknown = set(custom_props) - set(CustomSampleOptions.__annotations__)
    if unknown:
        raise TypeError(f"Unknown sample options: {', '.join(sorted(unknown))}")

    sample_value = custom_props.get("sample_value", UNDEFINED)
    sample_values = custom_props.get("sample_values")
    random_sample = custom_props.get("random_sample")

    if sample_value is UNDEFINED:
        if sample_values:
            sample_value = sample_values[0]
        elif random_sample is not None:
            sample_value = random_sample()
        else:
            sample_value = default_props.sample_value

    if random_sample is None:
        if sample_values:
            choices = list(sample_values)

            def random_sample() -> Any:
                return random_element(choices)

        else:
            random_sample = default_props.random_sample

    return SampleProps(sample_value=sample_value, random_sample=random_sample)


def typeof(value: Any) -> str:
    """Name a sample value's type in the vocabulary of type signatures."""
    kind = classify(value)
    if kind is Kind.BOOL:
        return "boolean"
    if kind is Kind.STRING:
        return "string"
    if kind is Kind.NAN:
        return "number"
    if kind is Kind.DATE:
        return "Date"
    return to_type(value)


def get_parser_type(parser: Any) -> str:
    """Type signature of an arbitrary parser-like object."""
    type_ = getattr(parser, "type", None)
    if isinstance(type_, str) and type_:
        return type_
    sample_value = getattr(parser, "sample_value", UNDEFINED)
    if sample_value is not UNDEFINED:
        return typeof(sample_value)
    random_sample = getattr(parser, "random_sample", None)
    if callable(random_sample):
        return typeof(random_sample())
    return "unknown"


def is_simple_type(type_: str) -> bool:
    return SIMPLE_TYPE_PATTERN.match(type_) is not None


def is_optional(parser: Any) -> bool:
    return getattr(parser, "tag", None) is ParserTag.OPTIONAL


def is_checkbox(parser: Any) -> bool:
    return getattr(parser, "tag", None) is ParserTag.CHECKBOX
