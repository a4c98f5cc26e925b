"""Operation handlers, one per (target kind, verb).

Each handler overrides only the phases where its operation differs from the
shared defaults in :mod:`odata_openapi.operation.pipeline`. ``HANDLERS`` is
the lookup table the generator and :func:`synthesize_operation` dispatch on.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any

from odata_openapi.capabilities.restrictions import (
    DeleteRestrictions,
    InsertRestrictions,
    OperationRestriction,
    ReadRestrictions,
    UpdateRestrictions,
)
from odata_openapi.capabilities.terms import CapabilitiesTerm
from odata_openapi.errors import InvalidArgumentError, UnknownHandlerError
from odata_openapi.openapi import (
    APPLICATION_JSON,
    STATUS_CREATED,
    STATUS_NO_CONTENT,
    STATUS_OK,
    Operation,
    RequestBody,
    Response,
    no_content_response,
    schema_reference,
)
from odata_openapi.operation.context import GenerationContext
from odata_openapi.operation.parameters import (
    create_count,
    create_custom_parameters,
    create_expand,
    create_filter,
    create_if_match,
    create_orderby,
    create_search,
    create_select,
    create_skip,
    create_top,
)
from odata_openapi.operation.pipeline import (
    HandlerState,
    OperationHandler,
    OperationTarget,
    OperationType,
    Phase,
    PhaseFunction,
    TargetKind,
    default_parameters,
    default_tags,
    upper_first,
)
from odata_openapi.operation.security import security_for

logger = logging.getLogger(__name__)

PAGEABLE_EXTENSION = "x-ms-pageable"

RestrictionSelector = Callable[[HandlerState], OperationRestriction]


# Restriction selectors


def read_restrictions(state: HandlerState) -> ReadRestrictions:
    return state.restriction(CapabilitiesTerm.READ_RESTRICTIONS)


def read_by_key_restrictions(state: HandlerState) -> ReadRestrictions:
    return read_restrictions(state).for_single_entity()


def insert_restrictions(state: HandlerState) -> InsertRestrictions:
    return state.restriction(CapabilitiesTerm.INSERT_RESTRICTIONS)


def update_restrictions(state: HandlerState) -> UpdateRestrictions:
    return state.restriction(CapabilitiesTerm.UPDATE_RESTRICTIONS)


def delete_restrictions(state: HandlerState) -> DeleteRestrictions:
    return state.restriction(CapabilitiesTerm.DELETE_RESTRICTIONS)


# Phase factories


def basic_info(verb: str, summary: str, select: RestrictionSelector) -> PhaseFunction:
    """SetBasicInfo phase.

    ``summary`` is formatted with ``name`` (the path's last segment). The
    restriction's Description and LongDescription, when declared, replace
    the summary and fill the description.
    """

    def phase(state: HandlerState) -> None:
        target = state.target
        restriction = select(state)
        name = target.navigation_property.name if target.navigation_property else target.source.name

        state.operation.summary = restriction.description or summary.format(name=name, source=target.source.name)
        state.operation.description = restriction.long_description

        if state.settings.enable_operation_id:
            state.operation.operation_id = operation_id(state, verb)

    return phase


def operation_id(state: HandlerState, verb: str) -> str:
    """``{source}.{Type}.{Verb}{Type}``, or ``{source}.{Nav}.{Verb}{Nav}``."""
    target = state.target
    if target.navigation_property is not None:
        segment = upper_first(target.navigation_property.name)
    else:
        segment = state.source_type.name
    return f"{target.source.name}.{segment}.{verb}{segment}"


def security(select: RestrictionSelector) -> PhaseFunction:
    def phase(state: HandlerState) -> None:
        state.operation.security = security_for(select(state), state.context.security)

    return phase


def custom_parameters(select: RestrictionSelector) -> PhaseFunction:
    def phase(state: HandlerState) -> None:
        state.operation.parameters.extend(create_custom_parameters(select(state)))

    return phase


# Shared phase bodies


def collection_query_parameters(state: HandlerState) -> None:
    """System query options for reading a collection, in fixed order."""
    entity_type = state.entity_type
    candidates = [
        create_top(state.restriction(CapabilitiesTerm.TOP_SUPPORTED), state.settings),
        create_skip(state.restriction(CapabilitiesTerm.SKIP_SUPPORTED)),
        create_search(state.restriction(CapabilitiesTerm.SEARCH_RESTRICTIONS)),
        create_filter(state.restriction(CapabilitiesTerm.FILTER_RESTRICTIONS)),
        create_count(state.restriction(CapabilitiesTerm.COUNT_RESTRICTIONS)),
        create_orderby(state.restriction(CapabilitiesTerm.SORT_RESTRICTIONS), entity_type),
    ]
    state.operation.parameters.extend(param for param in candidates if param is not None)
    single_entity_query_parameters(state)


def single_entity_query_parameters(state: HandlerState) -> None:
    entity_type = state.entity_type
    candidates = [
        create_select(state.restriction(CapabilitiesTerm.SELECT_SUPPORT), entity_type),
        create_expand(state.restriction(CapabilitiesTerm.EXPAND_RESTRICTIONS), entity_type),
    ]
    state.operation.parameters.extend(param for param in candidates if param is not None)


def collection_response_schema(state: HandlerState) -> dict[str, Any]:
    entity_type = state.entity_type
    properties: dict[str, Any] = {
        "value": {"type": "array", "items": schema_reference(entity_type.full_name)},
    }
    if state.settings.enable_pagination:
        properties["@odata.nextLink"] = {"type": "string"}
    return {
        "title": f"Collection of {entity_type.name}",
        "type": "object",
        "properties": properties,
    }


def collection_responses(state: HandlerState) -> None:
    state.operation.responses[STATUS_OK] = Response(
        description="Retrieved entities",
        content={APPLICATION_JSON: {"schema": collection_response_schema(state)}},
    )


def entity_responses(state: HandlerState) -> None:
    state.operation.responses[STATUS_OK] = Response(
        description="Retrieved entity",
        content={APPLICATION_JSON: {"schema": schema_reference(state.entity_type.full_name)}},
    )


def created_responses(state: HandlerState) -> None:
    state.operation.responses[STATUS_CREATED] = Response(
        description="Created entity",
        content={APPLICATION_JSON: {"schema": schema_reference(state.entity_type.full_name)}},
    )


def no_content_responses(state: HandlerState) -> None:
    state.operation.responses[STATUS_NO_CONTENT] = no_content_response()


def pageable_tags(state: HandlerState) -> None:
    default_tags(state)
    if state.settings.enable_pagination:
        state.operation.extensions[PAGEABLE_EXTENSION] = {"nextLinkName": "@odata.nextLink", "operationName": "listMore"}


def entity_body(state: HandlerState, description: str, required: bool) -> RequestBody:
    return RequestBody(
        description=description,
        required=required,
        content={APPLICATION_JSON: {"schema": schema_reference(state.entity_type.full_name)}},
    )


def insert_request_body(state: HandlerState) -> None:
    state.operation.request_body = entity_body(
        state, "New entity", insert_restrictions(state).request_body_required
    )


def update_request_body(state: HandlerState) -> None:
    state.operation.request_body = entity_body(
        state, "New property values", update_restrictions(state).request_body_required
    )


# Per-combination phases


def entity_set_list_parameters(state: HandlerState) -> None:
    default_parameters(state)
    collection_query_parameters(state)


def entity_get_parameters(state: HandlerState) -> None:
    default_parameters(state)
    single_entity_query_parameters(state)


def entity_delete_parameters(state: HandlerState) -> None:
    default_parameters(state)
    state.operation.parameters.append(create_if_match())


def navigation_get_parameters(state: HandlerState) -> None:
    default_parameters(state)
    if state.target.navigation_property.collection:
        collection_query_parameters(state)
    else:
        single_entity_query_parameters(state)


def navigation_get_basic_info(state: HandlerState) -> None:
    verb = "List" if state.target.navigation_property.collection else "Get"
    basic_info(verb, "Get {name} from {source}", read_restrictions)(state)


def navigation_get_responses(state: HandlerState) -> None:
    if state.target.navigation_property.collection:
        collection_responses(state)
    else:
        entity_responses(state)


def navigation_get_tags(state: HandlerState) -> None:
    if state.target.navigation_property.collection:
        pageable_tags(state)
    else:
        default_tags(state)


def update_handler(kind: TargetKind, operation_type: OperationType, summary: str) -> OperationHandler:
    return OperationHandler(
        kind,
        operation_type,
        {
            Phase.SET_BASIC_INFO: basic_info("Update", summary, update_restrictions),
            Phase.SET_REQUEST_BODY: update_request_body,
            Phase.SET_RESPONSES: no_content_responses,
            Phase.SET_SECURITY: security(update_restrictions),
            Phase.APPEND_CUSTOM_PARAMETERS: custom_parameters(update_restrictions),
        },
    )


HANDLERS: dict[tuple[TargetKind, OperationType], OperationHandler] = {}


def register_handler(handler: OperationHandler) -> OperationHandler:
    HANDLERS[(handler.target_kind, handler.operation_type)] = handler
    return handler


register_handler(
    OperationHandler(
        TargetKind.ENTITY_SET,
        OperationType.GET,
        {
            Phase.SET_BASIC_INFO: basic_info("List", "Get entities from {name}", read_restrictions),
            Phase.SET_PARAMETERS: entity_set_list_parameters,
            Phase.SET_RESPONSES: collection_responses,
            Phase.SET_SECURITY: security(read_restrictions),
            Phase.SET_TAGS: pageable_tags,
            Phase.APPEND_CUSTOM_PARAMETERS: custom_parameters(read_restrictions),
        },
    )
)

register_handler(
    OperationHandler(
        TargetKind.ENTITY_SET,
        OperationType.POST,
        {
            Phase.SET_BASIC_INFO: basic_info("Create", "Add new entity to {name}", insert_restrictions),
            Phase.SET_REQUEST_BODY: insert_request_body,
            Phase.SET_RESPONSES: created_responses,
            Phase.SET_SECURITY: security(insert_restrictions),
            Phase.APPEND_CUSTOM_PARAMETERS: custom_parameters(insert_restrictions),
        },
    )
)

register_handler(
    OperationHandler(
        TargetKind.ENTITY,
        OperationType.GET,
        {
            Phase.SET_BASIC_INFO: basic_info("Get", "Get entity from {name} by key", read_by_key_restrictions),
            Phase.SET_PARAMETERS: entity_get_parameters,
            Phase.SET_RESPONSES: entity_responses,
            Phase.SET_SECURITY: security(read_by_key_restrictions),
            Phase.APPEND_CUSTOM_PARAMETERS: custom_parameters(read_by_key_restrictions),
        },
    )
)

register_handler(update_handler(TargetKind.ENTITY, OperationType.PATCH, "Update entity in {name}"))
register_handler(update_handler(TargetKind.ENTITY, OperationType.PUT, "Update entity in {name}"))

register_handler(
    OperationHandler(
        TargetKind.ENTITY,
        OperationType.DELETE,
        {
            Phase.SET_BASIC_INFO: basic_info("Delete", "Delete entity from {name}", delete_restrictions),
            Phase.SET_PARAMETERS: entity_delete_parameters,
            Phase.SET_RESPONSES: no_content_responses,
            Phase.SET_SECURITY: security(delete_restrictions),
            Phase.APPEND_CUSTOM_PARAMETERS: custom_parameters(delete_restrictions),
        },
    )
)

register_handler(
    OperationHandler(
        TargetKind.SINGLETON,
        OperationType.GET,
        {
            Phase.SET_BASIC_INFO: basic_info("Get", "Get {name}", read_restrictions),
            Phase.SET_PARAMETERS: single_entity_query_parameters,
            Phase.SET_RESPONSES: entity_responses,
            Phase.SET_SECURITY: security(read_restrictions),
            Phase.APPEND_CUSTOM_PARAMETERS: custom_parameters(read_restrictions),
        },
    )
)

register_handler(update_handler(TargetKind.SINGLETON, OperationType.PATCH, "Update {name}"))
register_handler(update_handler(TargetKind.SINGLETON, OperationType.PUT, "Update {name}"))

register_handler(
    OperationHandler(
        TargetKind.NAVIGATION_PROPERTY,
        OperationType.GET,
        {
            Phase.SET_BASIC_INFO: navigation_get_basic_info,
            Phase.SET_PARAMETERS: navigation_get_parameters,
            Phase.SET_RESPONSES: navigation_get_responses,
            Phase.SET_SECURITY: security(read_restrictions),
            Phase.SET_TAGS: navigation_get_tags,
            Phase.APPEND_CUSTOM_PARAMETERS: custom_parameters(read_restrictions),
        },
    )
)


def get_handler(kind: TargetKind, operation_type: OperationType) -> OperationHandler:
    """Look up the handler for a target kind and verb.

    Raises:
        UnknownHandlerError: If no handler is registered for the combination.
    """
    handler = HANDLERS.get((kind, operation_type))
    if handler is None:
        raise UnknownHandlerError(
            f"No handler for {operation_type.value.upper()} on {kind.value}",
        )
    return handler


def synthesize_operation(
    context: GenerationContext,
    target: OperationTarget,
    operation_type: OperationType,
) -> Operation:
    """Build one OpenAPI operation for ``target``.

    Args:
        context: Model, settings and declared security schemes.
        target: What the operation acts on.
        operation_type: The HTTP verb.

    Returns:
        The populated operation. Its responses always end with ``default``.

    Raises:
        InvalidArgumentError: If any argument is None.
        UnknownHandlerError: If the verb is not supported for the target kind.
        SynthesisError: If the target's entity type cannot be resolved.
    """
    if context is None:
        raise InvalidArgumentError("context")
    if target is None:
        raise InvalidArgumentError("target")
    if operation_type is None:
        raise InvalidArgumentError("operation_type")

    handler = get_handler(target.kind, operation_type)
    logger.debug(f"Synthesizing {operation_type.value.upper()} {target}")
    return handler.synthesize(context, target)


__all__ = [
    "HANDLERS",
    "PAGEABLE_EXTENSION",
    "get_handler",
    "register_handler",
    "synthesize_operation",
]
