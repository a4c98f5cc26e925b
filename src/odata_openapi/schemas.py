"""JSON schemas for EDM types."""

from __future__ import annotations

from typing import Any

from odata_openapi.edm.model import EntityType, StructuralProperty
from odata_openapi.openapi import APPLICATION_JSON, schema_reference

_PRIMITIVE_SCHEMAS: dict[str, dict[str, Any]] = {
    "Edm.String": {"type": "string"},
    "Edm.Boolean": {"type": "boolean"},
    "Edm.Byte": {"type": "integer", "format": "uint8"},
    "Edm.SByte": {"type": "integer", "format": "int8"},
    "Edm.Int16": {"type": "integer", "format": "int16"},
    "Edm.Int32": {"type": "integer", "format": "int32"},
    "Edm.Int64": {"type": "integer", "format": "int64"},
    "Edm.Single": {"type": "number", "format": "float"},
    "Edm.Double": {"type": "number", "format": "double"},
    "Edm.Decimal": {"type": "number", "format": "decimal"},
    "Edm.Guid": {"type": "string", "format": "uuid"},
    "Edm.Date": {"type": "string", "format": "date"},
    "Edm.DateTimeOffset": {"type": "string", "format": "date-time"},
    "Edm.TimeOfDay": {"type": "string", "format": "time"},
    "Edm.Duration": {"type": "string", "format": "duration"},
    "Edm.Binary": {"type": "string", "format": "base64url"},
    "Edm.Stream": {"type": "string", "format": "base64url"},
}


def primitive_schema(type_name: str) -> dict[str, Any]:
    """Return the JSON schema for an EDM primitive type name.

    ``Collection(Edm.X)`` becomes an array. Unknown types fall back to string.
    """
    if type_name.startswith("Collection(") and type_name.endswith(")"):
        return {"type": "array", "items": primitive_schema(type_name[len("Collection("):-1])}
    return dict(_PRIMITIVE_SCHEMAS.get(type_name, {"type": "string"}))


def property_schema(prop: StructuralProperty) -> dict[str, Any]:
    schema = primitive_schema(prop.type_name)
    if prop.nullable:
        schema["nullable"] = True
    return schema


def entity_type_schema(entity_type: EntityType) -> dict[str, Any]:
    """Build the ``components.schemas`` entry for an entity type."""
    properties: dict[str, Any] = {prop.name: property_schema(prop) for prop in entity_type.properties}
    for nav in entity_type.navigation_properties:
        target = schema_reference(nav.target_type)
        properties[nav.name] = {"type": "array", "items": target} if nav.collection else target

    return {
        "title": entity_type.name,
        "type": "object",
        "properties": properties,
    }


def error_schema() -> dict[str, Any]:
    """The OData error payload."""
    return {
        "type": "object",
        "required": ["error"],
        "properties": {
            "error": {
                "type": "object",
                "required": ["code", "message"],
                "properties": {
                    "code": {"type": "string"},
                    "message": {"type": "string"},
                    "target": {"type": "string"},
                    "details": {
                        "type": "array",
                        "items": {
                            "type": "object",
                            "required": ["code", "message"],
                            "properties": {
                                "code": {"type": "string"},
                                "message": {"type": "string"},
                                "target": {"type": "string"},
                            },
                        },
                    },
                },
            }
        },
    }


def error_response_component() -> dict[str, Any]:
    return {
        "description": "error",
        "content": {APPLICATION_JSON: {"schema": schema_reference("odata.error")}},
    }


__all__ = [
    "entity_type_schema",
    "error_response_component",
    "error_schema",
    "primitive_schema",
    "property_schema",
]
