"""
Tests for castparse.schema: validate() and to_pydantic().
"""

import pytest
from pydantic import BaseModel, ValidationError

from castparse import (
    Array,
    Checkbox,
    Err,
    Id,
    Int,
    InvalidInputError,
    Object,
    Ok,
    Optional,
    String,
    to_pydantic,
    validate,
)


class TestValidate:
    def test_ok(self):
        result = validate("42", Int())
        assert isinstance(result, Ok)
        assert result.is_ok()
        assert result.value == 42

    def test_err(self):
        result = validate("x", Int())
        assert isinstance(result, Err)
        assert result.is_err()
        assert isinstance(result.error, InvalidInputError)
        assert result.error.message == "Invalid int, got string"
        assert result.error.status == 400

    def test_match_statement(self):
        match validate({"id": "3"}, Object({"id": Id()})):
            case Ok(value=value):
                assert value == {"id": 3}
            case Err():
                pytest.fail("expected Ok")


class TestToPydantic:
    user_parser = Object(
        {
            "name": String(non_empty=True),
            "age": Optional(Int(min=0)),
            "agree": Checkbox(),
            "tags": Optional(Array(String())),
            "first-name": Optional(String()),
        }
    )

    def test_model_class(self):
        User = to_pydantic("User", self.user_parser)
        assert issubclass(User, BaseModel)
        assert User.__name__ == "User"

    def test_coerce(self):
        User = to_pydantic("User", self.user_parser)
        user = User(name=" Alice ", age="30", agree="on", tags=[1, "b"])
        assert user.name == "Alice"
        assert user.age == 30
        assert user.agree is True
        assert user.tags == ["1", "b"]

    def test_defaults(self):
        User = to_pydantic("User", self.user_parser)
        user = User(name="Alice")
        assert user.age is None
        assert user.agree is False
        assert user.first_name is None

    def test_optional_none(self):
        User = to_pydantic("User", self.user_parser)
        assert User(name="Alice", age=None).age is None

    def test_alias(self):
        User = to_pydantic("User", self.user_parser)
        user = User.model_validate({"name": "Alice", "first-name": "Al"})
        assert user.first_name == "Al"

    def test_validation_error_carries_message(self):
        User = to_pydantic("User", self.user_parser)
        with pytest.raises(ValidationError) as exc_info:
            User(name="")
        assert 'Invalid non-empty string "name", got empty string' in str(exc_info.value)

    def test_missing_required(self):
        User = to_pydantic("User", self.user_parser)
        with pytest.raises(ValidationError):
            User(age=3)

    def test_requires_object_parser(self):
        with pytest.raises(TypeError):
            to_pydantic("Name", String())
