"""
Schema operations for castparse.

Provides validate() and to_pydantic() functions.
"""

from __future__ import annotations

import logging
import re
from typing import Annotated, Any, Callable, TypeVar

from pydantic import BaseModel, BeforeValidator, Field, create_model

from .core import Parser, is_checkbox, is_optional
from .types import Err, InvalidInputError, Ok, ParserContext

logger = logging.getLogger(__name__)

T = TypeVar("T")


def validate(value: Any, parser: Parser[T]) -> Ok[T] | Err[InvalidInputError]:
    """
    Parse a value without raising.

    Returns:
        Ok(parsed) if the value is valid
        Err(InvalidInputError) otherwise

    Usage:
        match validate(payload, user_parser):
            case Ok(value=user):
                ...
            case Err(error=error):
                return {"error": error.message}, error.status
    """
    try:
        return Ok(parser.parse(value))
    except InvalidInputError as e:
        return Err(e)


def to_pydantic(name: str, parser: Parser[Any]) -> type[BaseModel]:
    """
    Compile an Object parser to a Pydantic model.

    Each field runs its castparse parser as a before-validator, so the
    model applies the same coercions and raises pydantic.ValidationError
    carrying the castparse message. Optional fields default to None,
    Checkbox fields to False.

    Usage:
        User = to_pydantic("User", Object({
            "name": String(non_empty=True),
            "age": Optional(Int(min=0)),
        }))
        user = User(name="Alice", age="30")    # user.age == 30
    """
    fields = parser.options.get("fields") if isinstance(parser, Parser) else None
    if fields is None:
        raise TypeError("to_pydantic() requires an Object parser")

    definitions: dict[str, Any] = {}
    for key, field_parser in fields.items():
        field_type = Annotated[Any, BeforeValidator(_field_validator(key, field_parser))]
        if is_optional(field_parser):
            default: Any = None
        elif is_checkbox(field_parser):
            default = False
        else:
            default = ...
        attribute = _attribute_name(key)
        if attribute == key:
            definitions[attribute] = (field_type, default)
        else:
            definitions[attribute] = (field_type, Field(default, alias=key))

    logger.debug("Generated pydantic model %s with fields %s", name, list(definitions))
    return create_model(name, **definitions)


def _field_validator(key: str, parser: Parser[Any]) -> Callable[[Any], Any]:
    context = ParserContext(name=key)

    def validator(value: Any) -> Any:
        if value is None and is_optional(parser):
            return None
        return parser.parse(value, context)

    return validator


def _attribute_name(key: str) -> str:
    if key.isidentifier() and not key.startswith("_"):
        return key
    attribute = re.sub(r"\W", "_", key).lstrip("_")
    return attribute if attribute.isidentifier() else "field_" + attribute
