"""Security requirement synthesis."""

from __future__ import annotations

import logging

from odata_openapi.authorization import SecuritySchemeRegistry
from odata_openapi.capabilities.restrictions import OperationRestriction, Permission

logger = logging.getLogger(__name__)


def create_security_requirements(
    permission: Permission | None,
    registry: SecuritySchemeRegistry,
) -> list[dict[str, list[str]]] | None:
    """Turn a permission into OpenAPI security requirements.

    Returns None, leaving the operation without security, when there is no
    permission or its scheme is not declared on the service.
    """
    if permission is None:
        return None

    scheme = registry.get(permission.scheme_name)
    if scheme is None:
        logger.warning(
            f"Security scheme '{permission.scheme_name}' is not declared in Authorizations; "
            f"omitting security requirement"
        )
        return None

    return [{scheme.name: permission.scope_names}]


def security_for(
    restriction: OperationRestriction | None,
    registry: SecuritySchemeRegistry,
) -> list[dict[str, list[str]]] | None:
    """Security requirements for the permission carried by ``restriction``."""
    if restriction is None:
        return None
    return create_security_requirements(restriction.permission, registry)


__all__ = ["create_security_requirements", "security_for"]
