"""
castparse - Composable parsers that validate and coerce untyped input.

Usage:
    from castparse import Array, Id, Int, Object, Optional, String

    search_query = Object({
        "keyword": String(min_length=3),
        "page": Optional(Int(min=1)),
        "cat": Optional(Array(Id(), maybe_single=True)),
    })

    query = search_query.parse(request.args)   # raises InvalidInputError
    print(search_query.type)
"""

from .combinators import (
    Array,
    Dict,
    Nullable,
    Object,
    Optional,
    Or,
    Record,
    SingletonArray,
    Union,
)
from .context import current_locale, parsing_context
from .core import (
    CustomSampleOptions,
    Parser,
    ParserTag,
    get_parser_type,
    populate_sample_props,
)
from .dates import Date, DateString, Timestamp, TimeString
from .infer import infer_from_sample_value
from .lib.date_helpers import d2, d3, to_date_string, to_time_string, to_timestamp_string
from .schema import to_pydantic, validate
from .types import (
    UNDEFINED,
    Err,
    InvalidInputError,
    Ok,
    ParserContext,
    SampleProps,
    classify,
    compose,
    raise_invalid,
    to_type,
)
from .validators import (
    Boolean,
    Checkbox,
    Color,
    Email,
    Enums,
    Float,
    Id,
    Int,
    Literal,
    Number,
    String,
    Url,
    Values,
)

__all__ = [
    # Core
    "Parser",
    "ParserTag",
    "ParserContext",
    "InvalidInputError",
    "raise_invalid",
    "compose",
    "classify",
    "to_type",
    "UNDEFINED",
    # Result types
    "Ok",
    "Err",
    # Samples
    "SampleProps",
    "CustomSampleOptions",
    "populate_sample_props",
    "get_parser_type",
    # Primitives
    "String",
    "Url",
    "Email",
    "Color",
    "Number",
    "Float",
    "Int",
    "Id",
    "Boolean",
    "Checkbox",
    "Literal",
    "Values",
    "Enums",
    "Date",
    "DateString",
    "TimeString",
    "Timestamp",
    # Combinators
    "Object",
    "Array",
    "SingletonArray",
    "Optional",
    "Nullable",
    "Or",
    "Union",
    "Dict",
    "Record",
    # Inference
    "infer_from_sample_value",
    # Schema
    "validate",
    "to_pydantic",
    # Configuration
    "parsing_context",
    "current_locale",
    # Date helpers
    "d2",
    "d3",
    "to_date_string",
    "to_time_string",
    "to_timestamp_string",
]
