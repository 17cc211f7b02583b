"""
Tests for single-value schema validation.
"""
import pytest
from crudgen.services.results import ABSENT
from crudgen.services.schema_validator import check_value, validate_format, validate_value


@pytest.mark.parametrize("value,schema,required,expected", [
    (None, {"type": "string"}, True, False),
    (ABSENT, {"type": "string"}, True, False),
    (None, {"type": "string"}, False, True),
    ("abc", {"type": "string"}, True, True),
    (12, {"type": "string"}, True, False),
    (3, {"type": "integer"}, True, True),
    (3.0, {"type": "integer"}, True, True),
    (3.5, {"type": "integer"}, True, False),
    (True, {"type": "integer"}, True, False),
    (3.5, {"type": "number"}, True, True),
    (3, {"type": "number"}, True, False),
    (False, {"type": "boolean"}, True, True),
    ("true", {"type": "boolean"}, True, False),
    ([1], {"type": "array"}, True, True),
    ({"a": 1}, {"type": "array"}, True, False),
    ({"a": 1}, {"type": "object"}, True, True),
    ("anything", {}, True, True),
    ("B", {"type": "string", "enum": ["A", "B"]}, True, True),
    ("C", {"type": "string", "enum": ["A", "B"]}, True, False),
    ("ab12", {"type": "string", "pattern": "^[a-z]+\\d+$"}, True, True),
    ("12ab", {"type": "string", "pattern": "^[a-z]+\\d+$"}, True, False),
    ("ab", {"type": "string", "minLength": 3}, True, False),
    ("abcdef", {"type": "string", "maxLength": 5}, True, False),
    (0, {"type": "integer", "minimum": 0, "maximum": 10}, True, True),
    (-1, {"type": "integer", "minimum": 0}, True, False),
    (11, {"type": "integer", "maximum": 10}, True, False),
    (15, {"type": "integer", "multipleOf": 5}, True, True),
    (16, {"type": "integer", "multipleOf": 5}, True, False),
    (0.75, {"type": "number", "multipleOf": 0.25}, True, True),
    (10 ** 400, {"type": "integer", "multipleOf": 5}, True, True),
    (10 ** 400 + 1, {"type": "integer", "multipleOf": 5}, True, False),
    (float("inf"), {"type": "number"}, True, False),
    (float("-inf"), {"type": "number"}, True, False),
    (float("nan"), {"type": "number"}, True, False),
    (float("inf"), {"type": "integer"}, True, False),
])
def test_validate_value(value, schema, required, expected):
    """Values are checked for presence, type, enum and constraints."""
    assert validate_value(value, schema, required) is expected


@pytest.mark.parametrize("value,format_name,expected", [
    ("2024-02-29", "date", True),
    ("2024/02/29", "date", False),
    ("2024-02-29T10:15:00Z", "date-time", True),
    ("2024-02-29T10:15:00+02:00", "date-time", True),
    ("yesterday", "date-time", False),
    ("ann@example.com", "email", True),
    ("ann@example", "email", False),
    ("ann example.com", "email", False),
    ("1b4e28ba-2fa1-11d2-883f-0016d3cca427", "uuid", True),
    ("1b4e28ba2fa111d2883f0016d3cca427", "uuid", False),
    ("https://example.com/users", "uri", True),
    ("example.com/users", "uri", False),
    ("192.168.0.1", "ipv4", True),
    ("256.1.1.1", "ipv4", False),
    ("::1", "ipv6", True),
    ("192.168.0.1", "ipv6", False),
    ("whatever", "x-custom", True),
])
def test_validate_format(value, format_name, expected):
    """Known formats are checked; unknown ones pass."""
    assert validate_format(value, format_name) is expected


def test_messages_name_the_constraint():
    """Violation messages say what was violated."""
    assert check_value(120, {"type": "integer", "maximum": 99}, True) == ["value 120 is above maximum 99"]
    assert check_value(None, {"type": "string"}, True) == ["required value is missing"]
    assert "not a valid 'email'" in check_value("nope", {"type": "string", "format": "email"}, True)[0]
    assert "expected type 'integer'" in check_value("7", {"type": "integer"}, True)[0]


def test_uncompilable_pattern_is_not_enforced():
    """Patterns Python cannot compile do not reject values."""
    assert validate_value("abc", {"type": "string", "pattern": "(?<name"}, True)


def test_huge_integers_do_not_raise():
    """Integers beyond float range are checked without overflowing."""
    schema = {"type": "integer", "minimum": 0, "maximum": 100, "multipleOf": 5}
    
    errors = check_value(10 ** 400, schema, True)
    
    assert len(errors) == 1
    assert "above maximum 100" in errors[0]
