"""
Stateless value checks against a single schema node.
"""
import ipaddress
import math
import re
from datetime import datetime
from typing import Any, Callable, Dict, List

from crudgen.services.results import ABSENT
from crudgen.services.schema_types import (
    ArraySchema,
    BaseSchema,
    BooleanSchema,
    IntegerSchema,
    NumberSchema,
    NumericSchema,
    ObjectSchema,
    StringSchema,
    schema_from_dict,
)


DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")
EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
UUID_RE = re.compile(r"^[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}$", re.IGNORECASE)
URI_SCHEME_RE = re.compile(r"^[A-Za-z][A-Za-z0-9+.\-]*:\S+$")


def is_absent(value: Any) -> bool:
    return value is None or value is ABSENT


def parse_datetime(value: str) -> datetime:
    """ISO-8601 parse accepting a trailing ``Z``."""
    text = value.strip()
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    return datetime.fromisoformat(text)


def _is_datetime(value: str) -> bool:
    try:
        parse_datetime(value)
    except ValueError:
        return False
    return True


def _is_ipv4(value: str) -> bool:
    try:
        ipaddress.IPv4Address(value)
    except ValueError:
        return False
    return True


def _is_ipv6(value: str) -> bool:
    try:
        ipaddress.IPv6Address(value)
    except ValueError:
        return False
    return True


FORMAT_VALIDATORS: Dict[str, Callable[[str], bool]] = {
    "date": lambda v: bool(DATE_RE.match(v)),
    "date-time": _is_datetime,
    "email": lambda v: bool(EMAIL_RE.match(v)),
    "uuid": lambda v: bool(UUID_RE.match(v)),
    "uri": lambda v: bool(URI_SCHEME_RE.match(v)),
    "ipv4": _is_ipv4,
    "ipv6": _is_ipv6,
}


def validate_format(value: str, format_name: str) -> bool:
    """Unknown formats are accepted."""
    validator = FORMAT_VALIDATORS.get(format_name)
    return validator(value) if validator else True


def _matches(pattern: str, value: str) -> bool:
    try:
        return re.search(pattern, value) is not None
    except re.error:
        # patterns Python cannot compile are not enforced
        return True


def _is_number(value: Any) -> bool:
    # NaN and infinities are not JSON numbers
    if isinstance(value, float):
        return math.isfinite(value)
    return isinstance(value, int) and not isinstance(value, bool)


def _is_integral(value: Any) -> bool:
    return _is_number(value) and (isinstance(value, int) or value.is_integer())


def check_type(value: Any, schema: BaseSchema) -> bool:
    if isinstance(schema, StringSchema):
        return isinstance(value, str)
    if isinstance(schema, NumberSchema):
        # integral values belong to "integer"
        return _is_number(value) and not _is_integral(value)
    if isinstance(schema, IntegerSchema):
        return _is_integral(value)
    if isinstance(schema, BooleanSchema):
        return isinstance(value, bool)
    if isinstance(schema, ArraySchema):
        return isinstance(value, list)
    if isinstance(schema, ObjectSchema):
        return isinstance(value, dict)
    return True


def _is_multiple(value: Any, step: Any) -> bool:
    if not step:
        return True
    if isinstance(value, int) and isinstance(step, int):
        return value % step == 0
    try:
        remainder = math.fmod(value, step)
    except OverflowError:
        return False
    return math.isclose(remainder, 0, abs_tol=1e-9) or math.isclose(abs(remainder), abs(step), abs_tol=1e-9)


def check_value(value: Any, schema: Any, required: bool) -> List[str]:
    """
    Return the constraint violations of ``value`` (empty when valid).

    Messages name the violated constraint, e.g. ``"below minimum 0"``.
    """
    schema = schema_from_dict(schema)

    if is_absent(value):
        return ["required value is missing"] if required else []

    if not check_type(value, schema):
        return [f"expected type '{schema.type}', got {type(value).__name__} {value!r}"]

    if schema.enum is not None and value not in schema.enum:
        return [f"value {value!r} is not one of enum {schema.enum!r}"]

    errors: List[str] = []

    if isinstance(schema, StringSchema):
        if schema.pattern and not _matches(schema.pattern, value):
            errors.append(f"value {value!r} does not match pattern {schema.pattern!r}")
        if schema.min_length is not None and len(value) < schema.min_length:
            errors.append(f"length {len(value)} is below minLength {schema.min_length}")
        if schema.max_length is not None and len(value) > schema.max_length:
            errors.append(f"length {len(value)} is above maxLength {schema.max_length}")
        if schema.format and not validate_format(value, schema.format):
            errors.append(f"value {value!r} is not a valid '{schema.format}'")

    if isinstance(schema, NumericSchema):
        if schema.minimum is not None and value < schema.minimum:
            errors.append(f"value {value!r} is below minimum {schema.minimum}")
        if schema.maximum is not None and value > schema.maximum:
            errors.append(f"value {value!r} is above maximum {schema.maximum}")
        if schema.multiple_of and not _is_multiple(value, schema.multiple_of):
            errors.append(f"value {value!r} is not a multiple of {schema.multiple_of}")

    return errors


def validate_value(value: Any, schema: Any, required: bool) -> bool:
    """True when ``value`` satisfies ``schema`` (absent optional values pass)."""
    return not check_value(value, schema, required)
