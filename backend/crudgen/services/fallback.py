"""
Deterministic synthetic values used when the oracle cannot produce one.
"""
import logging
import math
from typing import Any, Optional

from faker import Faker

from crudgen.core.monitoring import fallback_values_total
from crudgen.services.results import ABSENT
from crudgen.services.schema_types import (
    BooleanSchema,
    IntegerSchema,
    NumberSchema,
    NumericSchema,
    StringSchema,
    schema_from_dict,
)

logger = logging.getLogger(__name__)

DEFAULT_MINIMUM = 0
DEFAULT_MAXIMUM = 100
DEFAULT_RANGE = 100


class FallbackValueGenerator:
    """Generate schema-valid values with Faker, no external calls."""
    
    def __init__(self, faker: Optional[Faker] = None, seed: Optional[int] = None):
        self.faker = faker or Faker()
        if seed is not None:
            self.faker.seed_instance(seed)
    
    def generate(self, field_name: str, schema: Any, required: bool) -> Any:
        """
        Get a synthetic value for one field.
        
        Optional fields are left out (``ABSENT``). Types without a rule
        (arrays, objects, untyped nodes) are left out as well.
        """
        if not required:
            return ABSENT
        
        schema = schema_from_dict(schema)
        
        if isinstance(schema, StringSchema):
            value = self._string_value(field_name, schema)
        elif isinstance(schema, (NumberSchema, IntegerSchema)):
            value = self._numeric_value(schema)
        elif isinstance(schema, BooleanSchema):
            value = schema.enum[0] if schema.enum else self.faker.boolean()
        else:
            value = ABSENT
        
        fallback_values_total.labels(type=schema.type or "untyped").inc()
        logger.info(f"Using fallback value for '{field_name}' ({schema.type}): {value!r}")
        return value
    
    def _format_value(self, format_type: Optional[str]) -> Optional[str]:
        if format_type == 'email':
            return self.faker.email()
        elif format_type == 'uuid':
            return self.faker.uuid4()
        elif format_type == 'date':
            return self.faker.date_object().isoformat()
        elif format_type == 'date-time':
            return self.faker.iso8601()
        elif format_type == 'uri':
            return self.faker.url()
        elif format_type == 'ipv4':
            return self.faker.ipv4()
        elif format_type == 'ipv6':
            return self.faker.ipv6()
        elif format_type == 'hostname':
            return self.faker.hostname()
        return None
    
    def _string_value(self, field_name: str, schema: StringSchema) -> str:
        if schema.enum:
            return schema.enum[0]
        
        formatted = self._format_value(schema.format)
        if formatted is not None:
            return formatted
        
        field_lower = (field_name or '').lower()
        if 'email' in field_lower:
            value = self.faker.email()
        elif 'name' in field_lower:
            value = self.faker.name()
        elif 'phone' in field_lower:
            value = self.faker.phone_number()
        elif 'date' in field_lower:
            value = self.faker.iso8601()
        elif 'id' in field_lower or 'uuid' in field_lower:
            value = self.faker.uuid4()
        else:
            value = self.faker.pystr(min_chars=10, max_chars=10)
        return self._fit_length(value, schema)
    
    def _fit_length(self, value: str, schema: StringSchema) -> str:
        if schema.max_length is not None and len(value) > schema.max_length:
            value = value[:schema.max_length]
        if schema.min_length is not None and len(value) < schema.min_length:
            missing = schema.min_length - len(value)
            value += self.faker.pystr(min_chars=missing, max_chars=missing)
        return value
    
    def _bounds(self, schema: NumericSchema):
        minimum, maximum = schema.minimum, schema.maximum
        if minimum is None and maximum is None:
            return DEFAULT_MINIMUM, DEFAULT_MAXIMUM
        if minimum is None:
            minimum = min(DEFAULT_MINIMUM, maximum - DEFAULT_RANGE)
        if maximum is None:
            maximum = max(DEFAULT_MAXIMUM, minimum + DEFAULT_RANGE)
        return minimum, maximum
    
    def _numeric_value(self, schema: NumericSchema) -> Any:
        if schema.enum:
            return schema.enum[0]
        
        minimum, maximum = self._bounds(schema)
        
        if isinstance(schema, IntegerSchema):
            step = int(schema.multiple_of) if schema.multiple_of and float(schema.multiple_of).is_integer() else 1
            low = math.ceil(minimum / step)
            high = math.floor(maximum / step)
            if low > high:
                return int(math.ceil(minimum))
            return self.faker.random_int(min=low, max=high) * step
        
        # "number" values must not be integral
        low, high = math.ceil(minimum), math.floor(maximum)
        if high - low >= 1:
            return self.faker.random_int(min=low, max=high - 1) + 0.5
        midpoint = (minimum + maximum) / 2
        if float(midpoint).is_integer():
            midpoint += (maximum - minimum) / 4 if maximum > minimum else 0
        return float(midpoint)
