"""Annotation resolver.

Finds the annotation that applies to a model element for a given term. The
lookup is an explicit sequence of scopes, tried in ``RESOLUTION_ORDER``:

1. the element itself (instance-level override),
2. the declared entity type of the element, for navigation sources only
   (type-level default).

The first scope that has the annotation wins outright. Values from the two
scopes are never merged.
"""

from __future__ import annotations

import logging
from enum import Enum

from odata_openapi.capabilities.terms import CapabilitiesTerm
from odata_openapi.edm.expressions import Expression
from odata_openapi.edm.model import EdmModel, ModelElement, is_navigation_source
from odata_openapi.errors import InvalidArgumentError

logger = logging.getLogger(__name__)


class LookupScope(Enum):
    ELEMENT = "element"
    DECLARED_TYPE = "declared_type"


RESOLUTION_ORDER: tuple[LookupScope, ...] = (LookupScope.ELEMENT, LookupScope.DECLARED_TYPE)


def _scope_target(model: EdmModel, element: ModelElement, scope: LookupScope) -> ModelElement | None:
    if scope is LookupScope.ELEMENT:
        return element
    if scope is LookupScope.DECLARED_TYPE and is_navigation_source(element):
        return model.get_declared_type(element)
    return None


def resolve_annotation_with_scope(
    model: EdmModel,
    element: ModelElement,
    term: CapabilitiesTerm | str,
) -> tuple[Expression | None, LookupScope | None]:
    """Resolve ``term`` on ``element`` and report which scope supplied it.

    Returns:
        ``(annotation, scope)``, or ``(None, None)`` when no scope has it.

    Raises:
        InvalidArgumentError: If ``model`` or ``element`` is None.
    """
    if model is None:
        raise InvalidArgumentError("model")
    if element is None:
        raise InvalidArgumentError("element")

    term_name = term.value if isinstance(term, CapabilitiesTerm) else term

    for scope in RESOLUTION_ORDER:
        target = _scope_target(model, element, scope)
        if target is None:
            continue
        annotation = model.get_annotation(target, term_name)
        if annotation is not None:
            if scope is not LookupScope.ELEMENT:
                logger.debug(f"{term_name} for {element.target_path} resolved from {target.target_path}")
            return annotation, scope

    return None, None


def resolve_annotation(
    model: EdmModel,
    element: ModelElement,
    term: CapabilitiesTerm | str,
) -> Expression | None:
    """Return the annotation for ``term`` that applies to ``element``, if any."""
    annotation, _ = resolve_annotation_with_scope(model, element, term)
    return annotation


__all__ = [
    "LookupScope",
    "RESOLUTION_ORDER",
    "resolve_annotation",
    "resolve_annotation_with_scope",
]
