"""Authorization vocabulary: security schemes and their registry.

``Org.OData.Authorization.V1.Authorizations`` on the entity container lists
the schemes the service supports. Restriction permissions refer to them by
name; the registry turns those names into OpenAPI security requirements.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator, Mapping
from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Any

from odata_openapi.capabilities.records import get_records, get_string, parse_enum_member
from odata_openapi.capabilities.terms import AUTHORIZATIONS_TERM
from odata_openapi.edm.expressions import Collection, Expression, Record
from odata_openapi.edm.model import EdmModel, ModelElement
from odata_openapi.errors import InvalidArgumentError

logger = logging.getLogger(__name__)


class AuthorizationKind(Enum):
    OPENID_CONNECT = "OpenIDConnect"
    HTTP = "Http"
    API_KEY = "ApiKey"
    OAUTH2_CLIENT_CREDENTIALS = "OAuth2ClientCredentials"
    OAUTH2_IMPLICIT = "OAuth2Implicit"
    OAUTH2_PASSWORD = "OAuth2Password"
    OAUTH2_AUTH_CODE = "OAuth2AuthCode"

    @classmethod
    def from_type_name(cls, type_name: str | None) -> AuthorizationKind | None:
        if not type_name:
            return None
        short = type_name.rsplit(".", 1)[-1]
        for kind in cls:
            if kind.value == short:
                return kind
        return None

    @property
    def is_oauth2(self) -> bool:
        return self.value.startswith("OAuth2")


_OAUTH2_FLOWS = {
    AuthorizationKind.OAUTH2_CLIENT_CREDENTIALS: "clientCredentials",
    AuthorizationKind.OAUTH2_IMPLICIT: "implicit",
    AuthorizationKind.OAUTH2_PASSWORD: "password",
    AuthorizationKind.OAUTH2_AUTH_CODE: "authorizationCode",
}

_KEY_LOCATIONS = {"Header": "header", "QueryOption": "query", "Cookie": "cookie"}


@dataclass(frozen=True)
class SecurityScheme:
    """One authorization scheme declared on the service.

    Only the attributes relevant to ``kind`` are set.
    """

    name: str
    kind: AuthorizationKind
    description: str | None = None
    scheme: str | None = None
    bearer_format: str | None = None
    issuer_url: str | None = None
    key_name: str | None = None
    location: str | None = None
    authorization_url: str | None = None
    token_url: str | None = None
    refresh_url: str | None = None
    scopes: tuple[tuple[str, str], ...] = ()

    def to_dict(self) -> dict[str, Any]:
        """Render as an OpenAPI Security Scheme Object."""
        result: dict[str, Any] = {}
        if self.kind is AuthorizationKind.OPENID_CONNECT:
            result["type"] = "openIdConnect"
            if self.issuer_url:
                result["openIdConnectUrl"] = self.issuer_url
        elif self.kind is AuthorizationKind.HTTP:
            result["type"] = "http"
            result["scheme"] = self.scheme or "bearer"
            if self.bearer_format:
                result["bearerFormat"] = self.bearer_format
        elif self.kind is AuthorizationKind.API_KEY:
            result["type"] = "apiKey"
            result["name"] = self.key_name or self.name
            result["in"] = _KEY_LOCATIONS.get(self.location or "", "header")
        else:
            flow: dict[str, Any] = {}
            if self.authorization_url:
                flow["authorizationUrl"] = self.authorization_url
            if self.token_url:
                flow["tokenUrl"] = self.token_url
            if self.refresh_url:
                flow["refreshUrl"] = self.refresh_url
            flow["scopes"] = dict(self.scopes)
            result["type"] = "oauth2"
            result["flows"] = {_OAUTH2_FLOWS[self.kind]: flow}

        if self.description:
            result["description"] = self.description
        return result


def decode_security_scheme(record: Record) -> SecurityScheme | None:
    """Decode one Authorizations record, or None if it is not usable."""
    kind = AuthorizationKind.from_type_name(record.type_name)
    name = get_string(record, "Name")
    if kind is None or not name:
        logger.debug(f"Skipping authorization record of type {record.type_name!r}")
        return None

    scopes = tuple(
        (scope, get_string(item, "Description") or "")
        for item in get_records(record, "Scopes")
        if (scope := get_string(item, "Scope"))
    )

    return SecurityScheme(
        name=name,
        kind=kind,
        description=get_string(record, "Description"),
        scheme=get_string(record, "Scheme"),
        bearer_format=get_string(record, "BearerFormat"),
        issuer_url=get_string(record, "IssuerUrl"),
        key_name=get_string(record, "KeyName"),
        location=parse_enum_member(record.get("Location")),
        authorization_url=get_string(record, "AuthorizationUrl"),
        token_url=get_string(record, "TokenUrl"),
        refresh_url=get_string(record, "RefreshUrl"),
        scopes=scopes,
    )


def decode_authorizations(value: Expression | None) -> list[SecurityScheme]:
    if not isinstance(value, Collection):
        return []
    schemes = []
    for element in value:
        if isinstance(element, Record):
            scheme = decode_security_scheme(element)
            if scheme is not None:
                schemes.append(scheme)
    return schemes


def get_authorizations(model: EdmModel, target: ModelElement) -> list[SecurityScheme]:
    """Return the security schemes declared on ``target``.

    Raises:
        InvalidArgumentError: If ``model`` or ``target`` is None.
    """
    if model is None:
        raise InvalidArgumentError("model")
    if target is None:
        raise InvalidArgumentError("target")
    return decode_authorizations(model.get_annotation(target, AUTHORIZATIONS_TERM))


class SecuritySchemeRegistry:
    """Read-only lookup of security schemes by name."""

    def __init__(self, schemes: Mapping[str, SecurityScheme] | None = None) -> None:
        self._schemes = MappingProxyType(dict(schemes or {}))

    @classmethod
    def from_schemes(cls, schemes: list[SecurityScheme]) -> SecuritySchemeRegistry:
        return cls({scheme.name: scheme for scheme in schemes})

    @classmethod
    def from_model(cls, model: EdmModel) -> SecuritySchemeRegistry:
        """Build the registry from the Authorizations on the entity container."""
        return cls.from_schemes(get_authorizations(model, model.container))

    def get(self, name: str) -> SecurityScheme | None:
        return self._schemes.get(name)

    def __contains__(self, name: object) -> bool:
        return name in self._schemes

    def __iter__(self) -> Iterator[SecurityScheme]:
        return iter(self._schemes.values())

    def __len__(self) -> int:
        return len(self._schemes)

    def to_components(self) -> dict[str, Any]:
        """Render as ``components.securitySchemes``."""
        return {name: scheme.to_dict() for name, scheme in self._schemes.items()}


__all__ = [
    "AuthorizationKind",
    "SecurityScheme",
    "SecuritySchemeRegistry",
    "decode_authorizations",
    "decode_security_scheme",
    "get_authorizations",
]
