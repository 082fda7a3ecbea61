"""Conversion between tool input contracts and parameter schemas.

Every tool's input contract is a pydantic model. This module renders such a
model into a vendor-neutral ToolParameters description (property types,
descriptions, enums, required fields) that each provider adapter converts
into its own declaration format. It also builds pydantic models from the
JSON Schemas advertised by remote MCP servers, so remote and local tools
share a single validation mechanism.
"""

import enum
import keyword
import logging
import types
from dataclasses import dataclass, field
from typing import Any, Literal, Optional, Union, get_args, get_origin

from pydantic import BaseModel, ConfigDict, Field, create_model

logger = logging.getLogger(__name__)


class SchemaType(str, enum.Enum):
    """JSON Schema primitive types understood by all providers."""

    STRING = "string"
    NUMBER = "number"
    INTEGER = "integer"
    BOOLEAN = "boolean"
    ARRAY = "array"
    OBJECT = "object"


@dataclass
class ToolProperty:
    """A single tool parameter.

    Attributes:
        type: The JSON type, or None when the parameter accepts anything
        description: Human-readable description shown to the model
        enum: Allowed values, if restricted
        items: Element description for array parameters
    """

    type: SchemaType | None
    description: str = ""
    enum: list[Any] | None = None
    items: "ToolProperty | None" = None

    def to_json_schema(self) -> dict[str, Any]:
        schema: dict[str, Any] = {}
        if self.type is not None:
            schema["type"] = self.type.value
        if self.description:
            schema["description"] = self.description
        if self.enum:
            schema["enum"] = list(self.enum)
        if self.type is SchemaType.ARRAY:
            schema["items"] = self.items.to_json_schema() if self.items else {}
        return schema


@dataclass
class ToolParameters:
    """The full parameter description of a tool."""

    properties: dict[str, ToolProperty] = field(default_factory=dict)
    required: list[str] = field(default_factory=list)

    def to_json_schema(self) -> dict[str, Any]:
        """Render as a JSON Schema object (OpenAI, Anthropic and Ollama format)."""
        return {
            "type": "object",
            "properties": {
                name: prop.to_json_schema() for name, prop in self.properties.items()
            },
            "required": list(self.required),
        }


_PYTHON_TYPES: list[tuple[type, SchemaType]] = [
    # bool before int: bool is a subclass of int
    (bool, SchemaType.BOOLEAN),
    (int, SchemaType.INTEGER),
    (float, SchemaType.NUMBER),
    (str, SchemaType.STRING),
]

_JSON_TYPES: dict[str, Any] = {
    "string": str,
    "number": float,
    "integer": int,
    "boolean": bool,
    "object": dict[str, Any],
}


def _unwrap_optional(annotation: Any) -> Any:
    """Strip None from Optional[X] / X | None; other unions become Any."""
    if get_origin(annotation) in (Union, types.UnionType):
        args = [arg for arg in get_args(annotation) if arg is not type(None)]
        if len(args) == 1:
            return args[0]
        return Any
    return annotation


def _annotation_to_property(annotation: Any, description: str = "") -> ToolProperty:
    annotation = _unwrap_optional(annotation)
    origin = get_origin(annotation)

    if origin is Literal:
        values = list(get_args(annotation))
        prop = _annotation_to_property(type(values[0])) if values else None
        return ToolProperty(
            type=prop.type if prop else SchemaType.STRING,
            description=description,
            enum=values,
        )

    if isinstance(annotation, type) and issubclass(annotation, enum.Enum):
        return ToolProperty(
            type=SchemaType.STRING,
            description=description,
            enum=[member.value for member in annotation],
        )

    if origin in (list, tuple, set, frozenset) or annotation in (list, tuple, set):
        args = get_args(annotation)
        items = _annotation_to_property(args[0]) if args else None
        return ToolProperty(type=SchemaType.ARRAY, description=description, items=items)

    if (
        origin is dict
        or annotation is dict
        or (isinstance(annotation, type) and issubclass(annotation, BaseModel))
    ):
        return ToolProperty(type=SchemaType.OBJECT, description=description)

    if isinstance(annotation, type):
        for python_type, schema_type in _PYTHON_TYPES:
            if issubclass(annotation, python_type):
                return ToolProperty(type=schema_type, description=description)

    return ToolProperty(type=None, description=description)


def model_to_parameters(model: type[BaseModel]) -> ToolParameters:
    """Describe a pydantic input model as a list of properties.

    Args:
        model: The tool's input contract

    Returns:
        ToolParameters keyed by the names the model expects on input (aliases)
    """
    parameters = ToolParameters()
    for field_name, field_info in model.model_fields.items():
        key = field_info.alias or field_name
        parameters.properties[key] = _annotation_to_property(
            field_info.annotation, field_info.description or ""
        )
        if field_info.is_required():
            parameters.required.append(key)
    return parameters


def _is_safe_field_name(name: str) -> bool:
    return (
        name.isidentifier()
        and not keyword.iskeyword(name)
        and not name.startswith("_")
        and not name.startswith("model_")
        and not hasattr(BaseModel, name)
    )


def _json_schema_to_annotation(schema: dict[str, Any]) -> Any:
    values = schema.get("enum")
    if values:
        try:
            return Literal[tuple(values)]
        except TypeError:
            return Any

    json_type = schema.get("type")
    if isinstance(json_type, list):
        json_type = next((t for t in json_type if t != "null"), None)

    if json_type == "array":
        items = schema.get("items")
        item_annotation = (
            _json_schema_to_annotation(items) if isinstance(items, dict) else Any
        )
        return list[item_annotation]  # type: ignore[valid-type]

    return _JSON_TYPES.get(json_type, Any)


def _synthetic_field_name(index: int, used_names: set[str]) -> str:
    field_name = f"field_{index}"
    while field_name in used_names:
        field_name = f"{field_name}_"
    return field_name


def json_schema_to_model(name: str, schema: dict[str, Any] | None) -> type[BaseModel]:
    """Build a pydantic input model from a JSON Schema object.

    Property names that cannot be used as model fields are kept through
    aliases, so validated arguments dump back under their original names
    with ``model_dump(by_alias=True)``.

    Args:
        name: Name for the generated model class
        schema: JSON Schema with "properties" and "required" (may be None)

    Returns:
        A pydantic model class
    """
    schema = schema or {}
    properties = schema.get("properties") or {}
    required = set(schema.get("required") or [])

    fields: dict[str, Any] = {}
    # Safe property names keep their own field, others get a free synthetic one
    used_names = {prop_name for prop_name in properties if _is_safe_field_name(prop_name)}
    for index, (prop_name, prop_schema) in enumerate(properties.items()):
        if not isinstance(prop_schema, dict):
            prop_schema = {}
        annotation = _json_schema_to_annotation(prop_schema)
        description = prop_schema.get("description")
        if _is_safe_field_name(prop_name):
            field_name = prop_name
        else:
            field_name = _synthetic_field_name(index, used_names)
            used_names.add(field_name)
        alias = None if field_name == prop_name else prop_name

        if prop_name in required:
            fields[field_name] = (
                annotation,
                Field(..., description=description, alias=alias),
            )
        else:
            fields[field_name] = (
                Optional[annotation],
                Field(default=None, description=description, alias=alias),
            )

    logger.debug(f"Built input model {name} with {len(fields)} fields")
    return create_model(  # type: ignore[call-overload]
        name,
        __config__=ConfigDict(populate_by_name=True),
        **fields,
    )
