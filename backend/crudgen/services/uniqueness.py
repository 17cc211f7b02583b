"""
Deterministic derivation of per-index values from a cached base value.

Nothing here performs I/O: index ``n`` of a batch is computed from the base
value, the schema and ``n`` alone (UUIDs excepted, which are freshly drawn).
"""
import math
import uuid
from datetime import date, timedelta
from typing import Any, Optional

from crudgen.services.results import ABSENT
from crudgen.services.schema_types import NumericSchema, schema_from_dict
from crudgen.services.schema_validator import parse_datetime

MIN_SAFE_INTEGER = -(2 ** 53 - 1)
MAX_SAFE_INTEGER = 2 ** 53 - 1


def _is_empty(value: Any) -> bool:
    return value is None or value is ABSENT or (isinstance(value, (str, list, dict)) and not value)


def _derive_email(base: str, index: int) -> str:
    local, sep, domain = base.partition("@")
    return f"{local}{index + 1}{sep}{domain}"


def _derive_date(base: str, format_name: str, index: int) -> str:
    try:
        if format_name == "date":
            return (date.fromisoformat(base[:10]) + timedelta(days=index)).isoformat()
        shifted = (parse_datetime(base) + timedelta(days=index)).isoformat()
    except ValueError:
        return base
    if base.rstrip().endswith(("Z", "z")) and shifted.endswith("+00:00"):
        shifted = shifted[:-len("+00:00")] + "Z"
    return shifted


def _derive_number(base: Any, schema: Any, index: int) -> Any:
    try:
        number = base if isinstance(base, (int, float)) and not isinstance(base, bool) else float(base)
    except (TypeError, ValueError):
        return base

    minimum = schema.minimum if isinstance(schema, NumericSchema) and schema.minimum is not None else MIN_SAFE_INTEGER
    maximum = schema.maximum if isinstance(schema, NumericSchema) and schema.maximum is not None else MAX_SAFE_INTEGER
    # narrow ranges collapse to step 1 and saturate at the bounds
    step = max(1, math.floor((maximum - minimum) / 100))
    return min(maximum, max(minimum, number + step * (index + 1)))


def derive_unique_value(base_value: Any, schema_type: Optional[str], schema: Any, index: int) -> Any:
    """
    Derive the value for batch position ``index`` (>= 1) from ``base_value``.

    Args:
        base_value: Value cached for index 0
        schema_type: Declared schema type
        schema: The field's schema (typed node or dict)
        index: Batch position

    Returns:
        A value related to, and for most types distinct from, the base value.
        Empty base values and types without a rule come back unchanged.
    """
    if _is_empty(base_value):
        return base_value

    schema = schema_from_dict(schema)

    if schema_type == "string":
        if not isinstance(base_value, str):
            return base_value
        if schema.format == "uuid":
            return str(uuid.uuid4())
        if schema.format == "email":
            return _derive_email(base_value, index)
        if schema.format in ("date", "date-time"):
            return _derive_date(base_value, schema.format, index)
        if schema.enum:
            return schema.enum[index % len(schema.enum)]
        return f"{base_value}-{index + 1}"

    if schema_type in ("integer", "number"):
        return _derive_number(base_value, schema, index)

    if schema_type == "boolean":
        return index % 2 == 0

    return base_value
