"""
Type definitions for castparse.

Provides the error model, the per-call parser context, runtime kind
classification and a minimal Result type (Ok/Err).
"""

from __future__ import annotations

import json
import math
from dataclasses import dataclass, field, replace
from datetime import date as _date
from enum import Enum, auto
from typing import Any, Callable, Generic, Mapping, NoReturn, TypeVar

T = TypeVar("T")
E = TypeVar("E")


class _Undefined(Enum):
    """Sentinel for an absent value (distinct from JSON null / None)."""

    UNDEFINED = auto()

    def __repr__(self) -> str:
        return "UNDEFINED"

    def __bool__(self) -> bool:
        return False


UNDEFINED = _Undefined.UNDEFINED


class Kind(Enum):
    NULL = auto()
    UNDEFINED = auto()
    NAN = auto()
    BOOL = auto()
    NUMBER = auto()
    STRING = auto()
    ARRAY = auto()
    OBJECT = auto()
    DATE = auto()
    OTHER = auto()


def classify(value: Any) -> Kind:
    """Classify a dynamic input value into the kinds parsers reason about."""
    if value is None:
        return Kind.NULL
    if value is UNDEFINED:
        return Kind.UNDEFINED
    if isinstance(value, bool):
        return Kind.BOOL
    if isinstance(value, (int, float)):
        if isinstance(value, float) and math.isnan(value):
            return Kind.NAN
        return Kind.NUMBER
    if isinstance(value, str):
        return Kind.STRING
    if isinstance(value, (list, tuple)):
        return Kind.ARRAY
    if isinstance(value, Mapping):
        return Kind.OBJECT
    if isinstance(value, _date):
        return Kind.DATE
    return Kind.OTHER


_KIND_NAMES = {
    Kind.NULL: "null",
    Kind.UNDEFINED: "undefined",
    Kind.NAN: "NaN",
    Kind.NUMBER: "number",
    Kind.STRING: "string",
    Kind.ARRAY: "array",
    Kind.OBJECT: "object",
    Kind.DATE: "date",
}


def to_type(value: Any) -> str:
    """Describe a value for the ``got ...`` part of an error message."""
    kind = classify(value)
    if kind is Kind.BOOL:
        return "boolean (true)" if value else "boolean (false)"
    if kind is Kind.STRING and value == "":
        return "empty string"
    if kind is Kind.OTHER:
        return type(value).__name__
    return _KIND_NAMES[kind]


def to_json(value: Any) -> str:
    """Compact JSON rendering used when quoting names, bounds and members."""
    return json.dumps(value, separators=(",", ":"), ensure_ascii=False, default=_json_default)


def _json_default(value: Any) -> Any:
    if isinstance(value, _date):
        return value.isoformat()
    if value is UNDEFINED:
        return None
    return str(value)


def compose(a: str | None, b: str | None) -> str | None:
    """Join two optional phrases with a space, keeping whichever is present."""
    if a and b:
        return a + " " + b
    return a or b


@dataclass(frozen=True, slots=True)
class ParserContext:
    """
    Immutable per-call context threaded through nested parse calls.

    Combinators never mutate a context; they derive a new one for each
    child call with the ``with_*`` / ``child`` builders.
    """

    name: str | None = None
    type_prefix: str | None = None
    reason_suffix: str | None = None
    override_type: str | None = None

    @classmethod
    def of(cls, context: ParserContext | Mapping[str, Any] | None) -> ParserContext:
        if context is None:
            return _ROOT
        if isinstance(context, ParserContext):
            return context
        return cls(**context)

    def child(self, key: str) -> ParserContext:
        """Context for an object field: only the dotted name survives."""
        return ParserContext(name=f"{self.name}.{key}" if self.name else key)

    def with_type_prefix(self, prefix: str | None) -> ParserContext:
        return replace(self, type_prefix=prefix)

    def with_reason_suffix(self, suffix: str | None) -> ParserContext:
        return replace(self, reason_suffix=suffix)

    def with_override_type(self, override_type: str | None) -> ParserContext:
        return replace(self, override_type=override_type)

    def expected(self, default: str) -> str:
        return self.override_type or default


_ROOT = ParserContext()


class InvalidInputError(ValueError):
    """
    Raised when an input value fails validation.

    The message is self-contained and meant to be shown to API clients
    as-is. ``status`` / ``status_code`` are fixed at 400 (bad client
    input). ``errors`` holds the child errors of a failed union.
    """

    status = 400
    status_code = 400

    def __init__(
        self,
        *,
        expected_type: str,
        reason: str,
        name: str | None = None,
        type_prefix: str | None = None,
        reason_suffix: str | None = None,
        errors: list[InvalidInputError] | None = None,
    ):
        message = "Invalid "
        if type_prefix:
            message += type_prefix + " "
        message += expected_type
        if name:
            message += " " + to_json(name)
        message += ", " + reason
        if reason_suffix:
            message += " " + reason_suffix
        super().__init__(message)
        self.message = message
        self.name = name
        self.type_prefix = type_prefix
        self.expected_type = expected_type
        self.reason = reason
        self.reason_suffix = reason_suffix
        self.errors: list[InvalidInputError] = list(errors or [])


def raise_invalid(
    context: ParserContext,
    expected_type: str,
    reason: str,
    *,
    name: str | None | _Undefined = UNDEFINED,
    errors: list[InvalidInputError] | None = None,
) -> NoReturn:
    raise InvalidInputError(
        name=context.name if name is UNDEFINED else name,
        type_prefix=context.type_prefix,
        expected_type=expected_type,
        reason=reason,
        reason_suffix=context.reason_suffix,
        errors=errors,
    )


@dataclass(frozen=True, slots=True)
class Ok(Generic[T]):
    """Success result containing a value."""

    value: T

    def is_ok(self) -> bool:
        return True

    def is_err(self) -> bool:
        return False


@dataclass(frozen=True, slots=True)
class Err(Generic[E]):
    """Error result containing an error value."""

    error: E

    def is_ok(self) -> bool:
        return False

    def is_err(self) -> bool:
        return True


@dataclass(frozen=True, slots=True)
class SampleProps(Generic[T]):
    """Resolved sample hooks of a parser."""

    sample_value: T
    random_sample: Callable[[], T] = field(compare=False)


# Type aliases
ParseFn = Callable[[Any, ParserContext], Any]
