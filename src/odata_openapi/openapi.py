"""OpenAPI output objects.

Plain dataclasses for the pieces of an OpenAPI 3.0 document the operation
handlers populate. Schemas stay plain dicts. ``to_dict()`` renders each
object the way it appears in the JSON/YAML document.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

APPLICATION_JSON = "application/json"

STATUS_OK = "200"
STATUS_CREATED = "201"
STATUS_NO_CONTENT = "204"
STATUS_DEFAULT = "default"

ERROR_RESPONSE_NAME = "error"


def schema_reference(schema_id: str) -> dict[str, Any]:
    return {"$ref": f"#/components/schemas/{schema_id}"}


class ParameterLocation(Enum):
    PATH = "path"
    QUERY = "query"
    HEADER = "header"
    COOKIE = "cookie"


@dataclass
class Parameter:
    """An OpenAPI Parameter Object.

    Attributes:
        name: Parameter name (e.g. "$top", "Id", "If-Match").
        location: Where the parameter goes.
        description: Human-readable description.
        required: Whether the parameter must be supplied.
        schema: JSON schema of the value.
        style: Serialization style (e.g. "form").
        explode: Whether arrays are exploded.
        example: Example value.
    """

    name: str
    location: ParameterLocation
    description: str | None = None
    required: bool = False
    schema: dict[str, Any] = field(default_factory=lambda: {"type": "string"})
    style: str | None = None
    explode: bool | None = None
    example: Any = None

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {"name": self.name, "in": self.location.value}
        if self.description:
            result["description"] = self.description
        # path parameters are always required
        if self.required or self.location is ParameterLocation.PATH:
            result["required"] = True
        if self.style is not None:
            result["style"] = self.style
        if self.explode is not None:
            result["explode"] = self.explode
        result["schema"] = self.schema
        if self.example is not None:
            result["example"] = self.example
        return result


@dataclass
class RequestBody:
    description: str | None = None
    required: bool = True
    content: dict[str, dict[str, Any]] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {}
        if self.description:
            result["description"] = self.description
        result["content"] = self.content
        if self.required:
            result["required"] = True
        return result


@dataclass
class Response:
    """An OpenAPI Response Object, or a reference to a shared one."""

    description: str = ""
    content: dict[str, dict[str, Any]] | None = None
    links: dict[str, Any] | None = None
    reference: str | None = None

    def to_dict(self) -> dict[str, Any]:
        if self.reference is not None:
            return {"$ref": self.reference}
        result: dict[str, Any] = {"description": self.description}
        if self.content:
            result["content"] = self.content
        if self.links:
            result["links"] = self.links
        return result


def default_error_response() -> Response:
    """The shared ``default`` response every operation ends with."""
    return Response(reference=f"#/components/responses/{ERROR_RESPONSE_NAME}")


def no_content_response() -> Response:
    return Response(description="Success")


@dataclass(frozen=True)
class Tag:
    name: str
    description: str | None = None

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {"name": self.name}
        if self.description:
            result["description"] = self.description
        return result


@dataclass
class Operation:
    """An OpenAPI Operation Object under construction.

    Responses keep insertion order; the ``default`` response is always last.
    A ``security`` of None means the operation declares no requirement.
    """

    summary: str | None = None
    operation_id: str | None = None
    description: str | None = None
    tags: list[Tag] = field(default_factory=list)
    parameters: list[Parameter] = field(default_factory=list)
    request_body: RequestBody | None = None
    responses: dict[str, Response] = field(default_factory=dict)
    security: list[dict[str, list[str]]] | None = None
    extensions: dict[str, Any] = field(default_factory=dict)

    @property
    def parameter_names(self) -> list[str]:
        return [param.name for param in self.parameters]

    def find_parameter(self, name: str) -> Parameter | None:
        for param in self.parameters:
            if param.name == name:
                return param
        return None

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {}
        if self.tags:
            result["tags"] = [tag.name for tag in self.tags]
        if self.summary:
            result["summary"] = self.summary
        if self.description:
            result["description"] = self.description
        if self.operation_id:
            result["operationId"] = self.operation_id
        if self.parameters:
            result["parameters"] = [param.to_dict() for param in self.parameters]
        if self.request_body is not None:
            result["requestBody"] = self.request_body.to_dict()
        result["responses"] = {code: response.to_dict() for code, response in self.responses.items()}
        if self.security is not None:
            result["security"] = self.security
        result.update(self.extensions)
        return result


__all__ = [
    "APPLICATION_JSON",
    "ERROR_RESPONSE_NAME",
    "Operation",
    "Parameter",
    "ParameterLocation",
    "RequestBody",
    "Response",
    "STATUS_CREATED",
    "STATUS_DEFAULT",
    "STATUS_NO_CONTENT",
    "STATUS_OK",
    "Tag",
    "default_error_response",
    "no_content_response",
    "schema_reference",
]
