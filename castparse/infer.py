"""
Infer a parser from an example value.

Object keys may carry modifier suffixes, in any order and combination:

    "status$enums" / "status$enum"   value is a list of allowed values
    "cancel_time$nullable" / "$null" field may be None
    "remark$optional" / "remark?"    field may be absent

    infer_from_sample_value({
        "id": 1,
        "title": "Hello world",
        "status$enums": ["active", "hidden"],
        "cancel_time$nullable?": datetime(2022, 9, 17),
    })
"""

from __future__ import annotations

import logging
import math
from datetime import date
from typing import Any, Mapping

from .combinators import Array, Nullable, Object, Optional
from .core import Parser
from .dates import Date
from .types import to_json
from .validators import Boolean, Float, Int, Number, String, Values

logger = logging.getLogger(__name__)

ENUM_SUFFIXES = ("$enums", "$enum")
NULLABLE_SUFFIXES = ("$nullable", "$null")
OPTIONAL_SUFFIXES = ("$optional", "?")


def infer_from_sample_value(value: Any) -> Parser[Any]:
    """
    Build the most specific parser matching an example value.

    Raises:
        TypeError: if the value (or a nested one) has no matching parser
        ValueError: if a list is empty, so its element type is unknown
    """
    if isinstance(value, bool):
        return Boolean()
    if isinstance(value, str):
        return String(sample_value=value)
    if isinstance(value, int):
        return Int(sample_value=value)
    if isinstance(value, float):
        if value.is_integer():
            return Int(sample_value=int(value))
        if math.isfinite(value):
            return Float(sample_value=value)
        return Number(sample_value=value)
    if isinstance(value, date):
        return Date(sample_value=value)
    if isinstance(value, (list, tuple)):
        if not value:
            raise ValueError("Cannot infer element type from an empty list")
        return Array(infer_from_sample_value(value[0]))
    if isinstance(value, Mapping):
        fields = dict(infer_field(key, val) for key, val in value.items())
        return Object(fields, sample_value=value)
    raise TypeError("unsupported sample value: " + to_json(value))


def infer_field(key: str, value: Any) -> tuple[str, Parser[Any]]:
    """Peel modifier suffixes off a key until none match, then build its parser."""
    if not isinstance(key, str):
        return key, infer_from_sample_value(value)
    name = key
    parser: Parser[Any] | None = None
    nullable = False
    optional = False

    while True:
        suffix = _match_suffix(name, ENUM_SUFFIXES)
        if suffix and isinstance(value, (list, tuple)):
            name = name[: -len(suffix)]
            parser = Values(value, sample_values=value)
            continue
        suffix = _match_suffix(name, NULLABLE_SUFFIXES)
        if suffix:
            name = name[: -len(suffix)]
            nullable = True
            continue
        suffix = _match_suffix(name, OPTIONAL_SUFFIXES)
        if suffix:
            name = name[: -len(suffix)]
            optional = True
            continue
        break

    if name != key:
        logger.debug(
            "Inferred field %r from %r (enums=%s, nullable=%s, optional=%s)",
            name,
            key,
            parser is not None,
            nullable,
            optional,
        )

    if parser is None:
        parser = infer_from_sample_value(value)
    if nullable:
        parser = Nullable(parser)
    if optional:
        parser = Optional(parser)
    return name, parser


def _match_suffix(name: str, suffixes: tuple[str, ...]) -> str | None:
    for suffix in suffixes:
        if name.endswith(suffix):
            return suffix
    return None
