"""
Typed schema nodes for resolved OpenAPI schemas.

Every node is one variant of a tagged union keyed by ``type``; each variant
keeps only the constraints that apply to it. Aliases follow the OpenAPI
spelling so ``to_dict()`` round-trips to the document's vocabulary.
"""
from typing import Any, Dict, List, Literal, Optional, Type, Union

from pydantic import BaseModel, ConfigDict, Field

Numeric = Union[int, float]


class BaseSchema(BaseModel):
    """Fields shared by every schema variant."""

    model_config = ConfigDict(populate_by_name=True)

    type: Optional[str] = None
    format: Optional[str] = None
    enum: Optional[List[Any]] = None
    all_of: Optional[List["SchemaNode"]] = Field(None, alias="allOf")
    any_of: Optional[List["SchemaNode"]] = Field(None, alias="anyOf")
    one_of: Optional[List["SchemaNode"]] = Field(None, alias="oneOf")

    def to_dict(self) -> Dict[str, Any]:
        """Deterministic OpenAPI-shaped serialization (None fields dropped)."""
        return self.model_dump(by_alias=True, exclude_none=True)


class StringSchema(BaseSchema):
    type: Literal["string"] = "string"
    pattern: Optional[str] = None
    min_length: Optional[int] = Field(None, alias="minLength")
    max_length: Optional[int] = Field(None, alias="maxLength")


class NumericSchema(BaseSchema):
    minimum: Optional[Numeric] = None
    maximum: Optional[Numeric] = None
    multiple_of: Optional[Numeric] = Field(None, alias="multipleOf")


class NumberSchema(NumericSchema):
    type: Literal["number"] = "number"


class IntegerSchema(NumericSchema):
    type: Literal["integer"] = "integer"


class BooleanSchema(BaseSchema):
    type: Literal["boolean"] = "boolean"


class ArraySchema(BaseSchema):
    type: Literal["array"] = "array"
    items: Optional["SchemaNode"] = None
    min_items: Optional[int] = Field(None, alias="minItems")
    max_items: Optional[int] = Field(None, alias="maxItems")


class ObjectSchema(BaseSchema):
    type: Literal["object"] = "object"
    properties: Dict[str, "SchemaNode"] = Field(default_factory=dict)
    required: List[str] = Field(default_factory=list)


class UntypedSchema(BaseSchema):
    """A node without a usable type: composition-only, unknown or unresolved."""

    ref: Optional[str] = Field(None, alias="$ref")


SchemaNode = Union[
    StringSchema,
    NumberSchema,
    IntegerSchema,
    BooleanSchema,
    ArraySchema,
    ObjectSchema,
    UntypedSchema,
]

SCHEMA_VARIANTS: Dict[str, Type[BaseSchema]] = {
    "string": StringSchema,
    "number": NumberSchema,
    "integer": IntegerSchema,
    "boolean": BooleanSchema,
    "array": ArraySchema,
    "object": ObjectSchema,
}

for _model in (BaseSchema, ArraySchema, ObjectSchema, UntypedSchema, *SCHEMA_VARIANTS.values()):
    _model.model_rebuild()


def _schema_type(raw: Dict[str, Any]) -> Optional[str]:
    schema_type = raw.get("type")
    if isinstance(schema_type, list):
        # OpenAPI 3.1 style: ["string", "null"]
        schema_type = next((t for t in schema_type if t != "null"), None)
    if schema_type is None and "properties" in raw:
        return "object"
    return schema_type


def schema_from_dict(raw: Any) -> SchemaNode:
    """Build the typed variant for a resolved schema dict."""
    if isinstance(raw, BaseSchema):
        return raw
    if not isinstance(raw, dict):
        return UntypedSchema()

    schema_type = _schema_type(raw)
    model = SCHEMA_VARIANTS.get(schema_type, UntypedSchema)

    data: Dict[str, Any] = {}
    for name, field_info in model.model_fields.items():
        key = field_info.alias or name
        if key not in raw:
            continue
        value = raw[key]
        if key == "items":
            value = schema_from_dict(value)
        elif key == "properties" and isinstance(value, dict):
            value = {prop: schema_from_dict(sub) for prop, sub in value.items()}
        elif key in ("allOf", "anyOf", "oneOf") and isinstance(value, list):
            value = [schema_from_dict(sub) for sub in value]
        data[key] = value

    if model is UntypedSchema:
        data["type"] = schema_type if isinstance(schema_type, str) else None
    elif schema_type is not None:
        data["type"] = schema_type

    return model.model_validate(data)
