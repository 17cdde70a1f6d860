"""
Tests for castparse primitive parsers.
"""

import json

import pytest

from castparse import (
    UNDEFINED,
    Boolean,
    Checkbox,
    Color,
    Email,
    Enums,
    Float,
    Id,
    Int,
    InvalidInputError,
    Literal,
    Number,
    Object,
    String,
    Url,
    Values,
)


def error_message(parser, value):
    with pytest.raises(InvalidInputError) as exc_info:
        parser.parse(value)
    return exc_info.value.message


class TestString:
    def test_pass_string(self):
        assert String().parse("hello") == "hello"

    def test_trim_by_default(self):
        assert String().parse("  hello ") == "hello"
        assert String(trim=False).parse("  hello ") == "  hello "

    def test_stringify_numbers(self):
        assert String().parse(42) == "42"
        assert String().parse(3.5) == "3.5"
        assert String().parse(2.0) == "2"

    def test_reject_non_string(self):
        assert error_message(String(), None) == "Invalid string, got null"
        assert error_message(String(), True) == "Invalid string, got boolean (true)"
        assert error_message(String(), ["a"]) == "Invalid string, got array"
        assert error_message(String(), float("nan")) == "Invalid string, got NaN"

    def test_empty_string(self):
        assert String().parse("") == ""
        assert error_message(String(non_empty=True), "") == (
            "Invalid non-empty string, got empty string"
        )
        assert error_message(String(non_empty=True), "   ") == (
            "Invalid non-empty string, got empty string"
        )

    def test_length(self):
        assert error_message(String(min_length=3), "ab") == "Invalid string, minLength should be 3"
        assert error_message(String(max_length=3), "abcd") == (
            "Invalid string, maxLength should be 3"
        )
        assert String(min_length=3, max_length=3).parse("abc") == "abc"

    def test_match(self):
        parser = String(match="^[a-z]+$")
        assert parser.parse("abc") == "abc"
        assert error_message(parser, "ABC") == 'Invalid string, should match "^[a-z]+$"'

    def test_named_field(self):
        parser = Object({"user": Object({"name": String()})})
        assert error_message(parser, {"user": {"name": None}}) == (
            'Invalid string "user.name", got null'
        )

    def test_type(self):
        assert String().type == "string"


class TestUrl:
    def test_pass_url(self):
        assert Url().parse("https://example.net/path") == "https://example.net/path"

    def test_empty_string_passthrough(self):
        assert Url().parse("") == ""
        assert error_message(Url(non_empty=True), "") == "Invalid non-empty url, got empty string"

    def test_missing_protocol(self):
        assert error_message(Url(), "example.net") == (
            "Invalid url, should contains protocol and domain/host"
        )

    def test_protocols(self):
        parser = Url(protocols=["https", "http"])
        assert parser.parse("http://example.net") == "http://example.net"
        assert error_message(parser, "ftp://example.net") == (
            'Invalid url, protocol should be any of ["https","http"]'
        )

    def test_protocol(self):
        assert error_message(Url(protocol="https"), "http://example.net") == (
            'Invalid url, protocol should be "https"'
        )

    def test_domain(self):
        parser = Url(domain="example.net")
        assert parser.parse("https://example.net/users/1") == "https://example.net/users/1"
        assert error_message(parser, "https://example.com") == (
            'Invalid url, domain should be "example.net"'
        )

    def test_reject_non_string(self):
        assert error_message(Url(), None) == "Invalid url, got null"


class TestEmail:
    def test_pass_email(self):
        assert Email().parse(" user@example.net ") == "user@example.net"

    def test_reject_missing_at(self):
        assert error_message(Email(), "user") == 'Invalid email, should contains "@" and domain'

    def test_domain(self):
        parser = Email(domain="example.net")
        assert error_message(parser, "user@example.com") == (
            'Invalid email, domain should be "example.net"'
        )

    def test_sample(self):
        assert Email().sample_value == "user@example.net"
        assert "@" in Email().random_sample()


class TestColor:
    def test_pass_color(self):
        assert Color().parse("#C0FFEE") == "#C0FFEE"

    def test_reject_format(self):
        assert error_message(Color(), "red") == (
            'Invalid color, should be in "#rrggbb" hexadecimal format'
        )
        assert error_message(Color(), "#fff") == (
            'Invalid color, should be in "#rrggbb" hexadecimal format'
        )

    def test_reject_non_string(self):
        assert error_message(Color(), 123) == "Invalid color, got number"
        assert error_message(Color(), "") == "Invalid color, got empty string"

    def test_random_sample_is_valid(self):
        parser = Color()
        for _ in range(20):
            sample = parser.random_sample()
            assert parser.parse(sample) == sample


class TestNumber:
    def test_pass_number(self):
        assert Number().parse(42) == 42
        assert Number().parse(4.2) == 4.2

    def test_numeric_string(self):
        assert Number().parse("42") == 42
        assert Number().parse(" 3.14 ") == 3.14
        assert Number().parse("1e3") == 1000

    def test_reject(self):
        assert error_message(Number(), "abc") == "Invalid number, got string"
        assert error_message(Number(), " ") == "Invalid number, got string"
        assert error_message(Number(), "") == "Invalid number, got empty string"
        assert error_message(Number(), "NaN") == "Invalid number, got string"
        assert error_message(Number(), float("nan")) == "Invalid number, got NaN"
        assert error_message(Number(), None) == "Invalid number, got null"
        assert error_message(Number(), True) == "Invalid number, got boolean (true)"

    def test_range(self):
        assert error_message(Number(min=50), 49) == "Invalid number, min value should be 50"
        assert error_message(Number(max=10), 10.5) == "Invalid number, max value should be 10"
        assert error_message(Number(min=0.5), 0) == "Invalid number, min value should be 0.5"
        assert Number(min=0, max=10).parse(10) == 10

    def test_round_float_error(self):
        assert Number().parse(0.1 + 0.2) == 0.3
        assert Number(round_error=False).parse(0.1 + 0.2) == 0.30000000000000004

    def test_readable(self):
        parser = Number(readable=True)
        assert parser.parse("3.5k") == 3500
        assert parser.parse("1.5M") == 1_500_000
        assert parser.parse("2b") == 2_000_000_000
        assert parser.parse("123,456.00") == 123456
        assert parser.parse("12 400") == 12400

    def test_readable_reject(self):
        parser = Number(readable=True)
        assert error_message(parser, "2x") == 'Invalid number, got unknown unit "x"'
        assert error_message(parser, "abc") == "Invalid number, got string"

    def test_readable_locale(self):
        assert Number(readable=True, locale="de").parse("1.234,5") == 1234.5
        assert Number(readable=True, locale="pt_BR").parse("3,5k") == 3500
        assert Number(readable=True, locale="de-CH").parse("1,234.5") == 1234.5

    def test_plain_numbers_ignore_thousands(self):
        assert error_message(Number(), "1,234") == "Invalid number, got string"


class TestFloat:
    def test_always_float(self):
        result = Float().parse("3")
        assert result == 3.0
        assert isinstance(result, float)

    def test_to_fixed(self):
        assert Float(to_fixed=2).parse(3.14159) == 3.14

    def test_to_fixed_rounds_half_up(self):
        assert Float(to_fixed=2).parse(0.125) == 0.13
        assert Float(to_fixed=2).parse(-0.125) == -0.13
        assert Float(to_fixed=0).parse(2.5) == 3.0
        assert Float(to_fixed=2).parse(1.5) == 1.5

    def test_to_precision(self):
        assert Float(to_precision=3).parse(3.14159) == 3.14
        assert Float(to_precision=3).parse(1234.5) == 1230.0

    def test_reject(self):
        assert error_message(Float(), "x") == "Invalid float, got string"
        assert error_message(Float(min=1), 0.5) == "Invalid float, min value should be 1"


class TestInt:
    def test_pass_int(self):
        assert Int().parse(42) == 42
        assert Int().parse("-7") == -7

    def test_integral_float_becomes_int(self):
        result = Int().parse(42.0)
        assert result == 42
        assert isinstance(result, int)

    def test_reject_floating_point(self):
        assert error_message(Int(), 4.2) == "Invalid int, got floating point number"
        assert error_message(Int(), "4.2") == "Invalid int, got floating point number"

    def test_reject_non_number(self):
        assert error_message(Int(), "abc") == "Invalid int, got string"
        assert error_message(Int(), None) == "Invalid int, got null"

    def test_range(self):
        assert error_message(Int(min=1), 0) == "Invalid int, min value should be 1"
        assert error_message(Int(max=100), 101) == "Invalid int, max value should be 100"

    def test_readable(self):
        assert Int(readable=True).parse("1.2k") == 1200

    def test_type(self):
        assert Int().type == "number"


class TestId:
    def test_pass_id(self):
        assert Id().parse(1) == 1
        assert Id().parse("12") == 12

    def test_reject_zero(self):
        assert error_message(Id(), 0) == "Invalid id, min value should be 1"

    def test_reject_float(self):
        assert error_message(Id(), 1.5) == "Invalid id, got floating point number"

    def test_random_sample(self):
        for _ in range(20):
            assert Id().random_sample() >= 1


class TestBoolean:
    @pytest.mark.parametrize("value", [True, 1, "true", "on", "0", "yes", [], {}])
    def test_truthy(self, value):
        assert Boolean().parse(value) is True

    @pytest.mark.parametrize(
        "value", [False, 0, "", " ", "false", None, UNDEFINED, float("nan")]
    )
    def test_falsy(self, value):
        assert Boolean().parse(value) is False

    def test_expected_value(self):
        assert Boolean(True).parse("on") is True
        assert error_message(Boolean(True), False) == (
            "Invalid boolean (expect: true), got boolean (false)"
        )
        assert error_message(Boolean(False), "yes") == (
            "Invalid boolean (expect: false), got string"
        )

    def test_expected_sample(self):
        assert Boolean(True).sample_value is True
        assert Boolean(False).random_sample() is False


class TestCheckbox:
    def test_checked(self):
        assert Checkbox().parse("on") is True

    def test_unchecked(self):
        assert Checkbox().parse("") is False
        assert Checkbox().parse(UNDEFINED) is False

    def test_reject(self):
        assert error_message(Checkbox(), "yes") == "Invalid checkbox, got string"
        assert error_message(Checkbox(), None) == "Invalid checkbox, got null"

    def test_missing_in_object(self):
        parser = Object({"agree": Checkbox()})
        assert parser.parse({}) == {"agree": False}
        assert parser.parse({"agree": "on"}) == {"agree": True}

    def test_tag(self):
        assert Checkbox().checkbox
        assert Checkbox().type == "boolean"


class TestLiteral:
    def test_pass(self):
        assert Literal("admin").parse("admin") == "admin"
        assert Literal(None).parse(None) is None

    def test_strict_equality(self):
        assert error_message(Literal(1), True) == "Invalid literal 1, got boolean (true)"
        assert error_message(Literal(1), "1") == "Invalid literal 1, got string"

    def test_int_and_float_are_one_number(self):
        assert Literal(1).parse(1.0) == 1
        assert Literal(1).parse(json.loads("1.0")) == 1
        assert Literal(2.0).parse(2) == 2.0
        assert error_message(Literal(True), 1) == "Invalid literal true, got number"

    def test_type(self):
        assert Literal("admin").type == '"admin"'
        assert Literal(42).type == "42"
        assert Literal(None).type == "null"


class TestValues:
    def test_pass(self):
        assert Values(["admin", "user"]).parse("user") == "user"

    def test_json_float_matches_int_member(self):
        assert Values([1, 2]).parse(json.loads("2.0")) == 2
        assert Values([1, 2]).parse(2.0) == 2
        assert error_message(Values([0, 1]), False) == (
            "Invalid enums value, expect [0,1], got boolean (false)"
        )

    def test_reject(self):
        assert error_message(Values(["admin", "user"]), "guest") == (
            'Invalid enums value, expect ["admin","user"], got "guest"'
        )
        assert error_message(Values([1, 2]), 3) == "Invalid enums value, expect [1,2], got 3"
        assert error_message(Values([1, 2]), "1") == 'Invalid enums value, expect [1,2], got "1"'
        assert error_message(Values(["a"]), "") == (
            'Invalid enums value, expect ["a"], got empty string'
        )

    def test_named(self):
        parser = Object({"query": Object({"type": Values(["admin", "user"])})})
        assert error_message(parser, {"query": {"type": "guest"}}) == (
            'Invalid enums value of "query.type", expect ["admin","user"], got "guest"'
        )

    def test_type(self):
        assert Values(["asc", "desc"]).type == '"asc" | "desc"'

    def test_requires_values(self):
        with pytest.raises(ValueError):
            Values([])

    def test_enums_alias(self):
        assert Enums is Values
