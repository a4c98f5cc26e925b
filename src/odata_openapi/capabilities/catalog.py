"""Decoder table for capability restrictions.

Every capability term has exactly one decode function, registered with
:func:`decoder`. A decode function takes the resolved annotation value (or
None) and always returns a restriction: absent or malformed values give the
term's defaults.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import replace
from types import MappingProxyType
from typing import Any

from odata_openapi.capabilities.records import (
    as_record,
    get_boolean,
    get_boolean_or,
    get_flags,
    get_integer,
    get_path,
    get_paths,
    get_record,
    get_records,
    get_string,
    parse_enum_member,
)
from odata_openapi.capabilities.resolver import resolve_annotation
from odata_openapi.capabilities.restrictions import (
    CountRestrictions,
    CustomParameter,
    DeepInsertSupport,
    DeepUpdateSupport,
    DeleteRestrictions,
    ExpandRestrictions,
    FilterRestrictions,
    HttpMethod,
    InsertRestrictions,
    KeyAsSegmentSupported,
    NavigationPropertyRestriction,
    NavigationRestrictions,
    NavigationType,
    Permission,
    ReadRestrictions,
    Restriction,
    Scope,
    SearchExpressions,
    SearchRestrictions,
    SelectSupport,
    SkipSupported,
    SortRestrictions,
    TopSupported,
    UpdateRestrictions,
)
from odata_openapi.capabilities.terms import CapabilitiesTerm
from odata_openapi.edm.expressions import BoolConstant, Expression, Record
from odata_openapi.edm.model import EdmModel, ModelElement

logger = logging.getLogger(__name__)

Decoder = Callable[[Expression | None], Any]

DECODERS: dict[CapabilitiesTerm, Decoder] = {}


def decoder(term: CapabilitiesTerm) -> Callable[[Decoder], Decoder]:
    """Register ``func`` as the decode function for ``term``."""

    def register(func: Decoder) -> Decoder:
        if term in DECODERS:
            raise ValueError(f"Decoder for {term.short_name} already registered")
        DECODERS[term] = func
        return func

    return register


def decode(term: CapabilitiesTerm, value: Expression | None) -> Any:
    """Decode ``value`` with the function registered for ``term``."""
    return DECODERS[term](value)


def get_restriction(model: EdmModel, element: ModelElement, term: CapabilitiesTerm) -> Restriction:
    """Resolve ``term`` on ``element`` and decode it into a restriction."""
    return decode(term, resolve_annotation(model, element, term))


# ---------------------------------------------------------------------------
# Shared sub-records
# ---------------------------------------------------------------------------


def decode_permission(record: Record | None) -> Permission | None:
    """Decode the first permission of a restriction record.

    Reads ``Permissions`` (a collection, of which only the first record is
    used) and falls back to a single ``Permission`` record.
    """
    permissions = get_records(record, "Permissions")
    permission = permissions[0] if permissions else get_record(record, "Permission")
    if permission is None:
        return None

    scheme_name = get_string(permission, "SchemeName")
    if not scheme_name:
        return None

    scopes = []
    for scope in get_records(permission, "Scopes"):
        name = get_string(scope, "Scope")
        if name:
            scopes.append(Scope(scope=name, restricted_properties=get_string(scope, "RestrictedProperties")))

    return Permission(scheme_name=scheme_name, scopes=tuple(scopes))


def decode_custom_parameters(record: Record | None, name: str) -> tuple[CustomParameter, ...]:
    parameters = []
    for item in get_records(record, name):
        param_name = get_string(item, "Name")
        if not param_name:
            continue
        examples = tuple(
            example_value
            for example in get_records(item, "ExampleValues")
            if (example_value := get_string(example, "Value")) is not None
        )
        parameters.append(
            CustomParameter(
                name=param_name,
                required=get_boolean_or(item, "Required", False),
                description=get_string(item, "Description"),
                documentation_url=get_string(item, "DocumentationURL"),
                example_values=examples,
            )
        )
    return tuple(parameters)


def _operation_fields(record: Record) -> dict[str, Any]:
    return {
        "description": get_string(record, "Description"),
        "long_description": get_string(record, "LongDescription"),
        "permission": decode_permission(record),
        "custom_headers": decode_custom_parameters(record, "CustomHeaders"),
        "custom_query_options": decode_custom_parameters(record, "CustomQueryOptions"),
    }


def _max_levels(record: Record) -> int:
    value = get_integer(record, "MaxLevels")
    return -1 if value is None else value


# ---------------------------------------------------------------------------
# Term decoders
# ---------------------------------------------------------------------------


def _decode_read_record(record: Record) -> ReadRestrictions:
    return ReadRestrictions(
        declared=True,
        readable=get_boolean_or(record, "Readable", True),
        **_operation_fields(record),
    )


@decoder(CapabilitiesTerm.READ_RESTRICTIONS)
def decode_read_restrictions(value: Expression | None) -> ReadRestrictions:
    record = as_record(value)
    if record is None:
        return ReadRestrictions()

    read = _decode_read_record(record)
    by_key = get_record(record, "ReadByKeyRestrictions")
    if by_key is None:
        return read
    return replace(read, read_by_key_restrictions=_decode_read_record(by_key))


@decoder(CapabilitiesTerm.INSERT_RESTRICTIONS)
def decode_insert_restrictions(value: Expression | None) -> InsertRestrictions:
    record = as_record(value)
    if record is None:
        return InsertRestrictions()
    return InsertRestrictions(
        declared=True,
        insertable=get_boolean_or(record, "Insertable", True),
        non_insertable_navigation_properties=get_paths(record, "NonInsertableNavigationProperties"),
        max_levels=_max_levels(record),
        typecast_segment_supported=get_boolean_or(record, "TypecastSegmentSupported", True),
        request_body_required=get_boolean_or(record, "RequestBodyRequired", True),
        **_operation_fields(record),
    )


@decoder(CapabilitiesTerm.UPDATE_RESTRICTIONS)
def decode_update_restrictions(value: Expression | None) -> UpdateRestrictions:
    record = as_record(value)
    if record is None:
        return UpdateRestrictions()
    return UpdateRestrictions(
        declared=True,
        updatable=get_boolean_or(record, "Updatable", True),
        upsertable=get_boolean_or(record, "Upsertable", False),
        delta_update_supported=get_boolean_or(record, "DeltaUpdateSupported", False),
        update_method=get_flags(record, "UpdateMethod", HttpMethod),
        filter_segment_supported=get_boolean_or(record, "FilterSegmentSupported", True),
        typecast_segment_supported=get_boolean_or(record, "TypecastSegmentSupported", True),
        non_updatable_navigation_properties=get_paths(record, "NonUpdatableNavigationProperties"),
        max_levels=_max_levels(record),
        request_body_required=get_boolean_or(record, "RequestBodyRequired", True),
        **_operation_fields(record),
    )


@decoder(CapabilitiesTerm.DELETE_RESTRICTIONS)
def decode_delete_restrictions(value: Expression | None) -> DeleteRestrictions:
    record = as_record(value)
    if record is None:
        return DeleteRestrictions()
    return DeleteRestrictions(
        declared=True,
        deletable=get_boolean_or(record, "Deletable", True),
        non_deletable_navigation_properties=get_paths(record, "NonDeletableNavigationProperties"),
        max_levels=_max_levels(record),
        filter_segment_supported=get_boolean_or(record, "FilterSegmentSupported", True),
        typecast_segment_supported=get_boolean_or(record, "TypecastSegmentSupported", True),
        **_operation_fields(record),
    )


@decoder(CapabilitiesTerm.SEARCH_RESTRICTIONS)
def decode_search_restrictions(value: Expression | None) -> SearchRestrictions:
    record = as_record(value)
    if record is None:
        return SearchRestrictions()
    return SearchRestrictions(
        declared=True,
        searchable=get_boolean_or(record, "Searchable", True),
        unsupported_expressions=get_flags(record, "UnsupportedExpressions", SearchExpressions),
    )


@decoder(CapabilitiesTerm.FILTER_RESTRICTIONS)
def decode_filter_restrictions(value: Expression | None) -> FilterRestrictions:
    record = as_record(value)
    if record is None:
        return FilterRestrictions()
    return FilterRestrictions(
        declared=True,
        filterable=get_boolean_or(record, "Filterable", True),
        requires_filter=get_boolean_or(record, "RequiresFilter", False),
        required_properties=get_paths(record, "RequiredProperties"),
        non_filterable_properties=get_paths(record, "NonFilterableProperties"),
        max_levels=_max_levels(record),
    )


@decoder(CapabilitiesTerm.SORT_RESTRICTIONS)
def decode_sort_restrictions(value: Expression | None) -> SortRestrictions:
    record = as_record(value)
    if record is None:
        return SortRestrictions()
    return SortRestrictions(
        declared=True,
        sortable=get_boolean_or(record, "Sortable", True),
        ascending_only_properties=get_paths(record, "AscendingOnlyProperties"),
        descending_only_properties=get_paths(record, "DescendingOnlyProperties"),
        non_sortable_properties=get_paths(record, "NonSortableProperties"),
    )


@decoder(CapabilitiesTerm.TOP_SUPPORTED)
def decode_top_supported(value: Expression | None) -> TopSupported:
    if not isinstance(value, BoolConstant):
        return TopSupported()
    return TopSupported(declared=True, supported=value.value)


@decoder(CapabilitiesTerm.SKIP_SUPPORTED)
def decode_skip_supported(value: Expression | None) -> SkipSupported:
    if not isinstance(value, BoolConstant):
        return SkipSupported()
    return SkipSupported(declared=True, supported=value.value)


@decoder(CapabilitiesTerm.COUNT_RESTRICTIONS)
def decode_count_restrictions(value: Expression | None) -> CountRestrictions:
    record = as_record(value)
    if record is None:
        return CountRestrictions()
    return CountRestrictions(
        declared=True,
        countable=get_boolean_or(record, "Countable", True),
        non_countable_properties=get_paths(record, "NonCountableProperties"),
        non_countable_navigation_properties=get_paths(record, "NonCountableNavigationProperties"),
    )


@decoder(CapabilitiesTerm.EXPAND_RESTRICTIONS)
def decode_expand_restrictions(value: Expression | None) -> ExpandRestrictions:
    record = as_record(value)
    if record is None:
        return ExpandRestrictions()
    return ExpandRestrictions(
        declared=True,
        expandable=get_boolean_or(record, "Expandable", True),
        streams_expandable=get_boolean_or(record, "StreamsExpandable", False),
        non_expandable_properties=get_paths(record, "NonExpandableProperties"),
        non_expandable_stream_properties=get_paths(record, "NonExpandableStreamProperties"),
        max_levels=_max_levels(record),
    )


@decoder(CapabilitiesTerm.SELECT_SUPPORT)
def decode_select_support(value: Expression | None) -> SelectSupport:
    record = as_record(value)
    if record is None:
        return SelectSupport()
    return SelectSupport(
        declared=True,
        supported=get_boolean_or(record, "Supported", True),
        instance_annotations_supported=get_boolean_or(record, "InstanceAnnotationsSupported", False),
        expandable=get_boolean_or(record, "Expandable", False),
        filterable=get_boolean_or(record, "Filterable", False),
        searchable=get_boolean_or(record, "Searchable", False),
        top_supported=get_boolean_or(record, "TopSupported", False),
        skip_supported=get_boolean_or(record, "SkipSupported", False),
        sortable=get_boolean_or(record, "Sortable", False),
        countable=get_boolean_or(record, "Countable", False),
    )


# Terms that may appear nested inside a NavigationPropertyRestriction record.
NESTED_NAVIGATION_TERMS: tuple[CapabilitiesTerm, ...] = (
    CapabilitiesTerm.READ_RESTRICTIONS,
    CapabilitiesTerm.INSERT_RESTRICTIONS,
    CapabilitiesTerm.UPDATE_RESTRICTIONS,
    CapabilitiesTerm.DELETE_RESTRICTIONS,
    CapabilitiesTerm.SEARCH_RESTRICTIONS,
    CapabilitiesTerm.FILTER_RESTRICTIONS,
    CapabilitiesTerm.SORT_RESTRICTIONS,
    CapabilitiesTerm.TOP_SUPPORTED,
    CapabilitiesTerm.SKIP_SUPPORTED,
    CapabilitiesTerm.SELECT_SUPPORT,
    CapabilitiesTerm.COUNT_RESTRICTIONS,
    CapabilitiesTerm.EXPAND_RESTRICTIONS,
)


def _decode_restricted_property(record: Record) -> NavigationPropertyRestriction | None:
    name = get_path(record, "NavigationProperty")
    if not name:
        return None

    nested = {}
    for term in NESTED_NAVIGATION_TERMS:
        value = record.get(term.short_name)
        if value is None:
            continue
        restriction = decode(term, value)
        # malformed entries count as absent
        if restriction.declared:
            nested[term] = restriction

    return NavigationPropertyRestriction(
        navigation_property=name,
        navigability=NavigationType.from_member(parse_enum_member(record.get("Navigability"))),
        restrictions=MappingProxyType(nested),
    )


@decoder(CapabilitiesTerm.NAVIGATION_RESTRICTIONS)
def decode_navigation_restrictions(value: Expression | None) -> NavigationRestrictions:
    record = as_record(value)
    if record is None:
        return NavigationRestrictions()

    restricted = []
    for item in get_records(record, "RestrictedProperties"):
        decoded = _decode_restricted_property(item)
        if decoded is None:
            logger.debug("Skipping restricted navigation property without a NavigationProperty path")
            continue
        restricted.append(decoded)

    return NavigationRestrictions(
        declared=True,
        navigability=NavigationType.from_member(parse_enum_member(record.get("Navigability"))),
        restricted_properties=tuple(restricted),
    )


@decoder(CapabilitiesTerm.DEEP_INSERT_SUPPORT)
def decode_deep_insert_support(value: Expression | None) -> DeepInsertSupport:
    record = as_record(value)
    if record is None:
        return DeepInsertSupport()
    return DeepInsertSupport(
        declared=True,
        supported=get_boolean(record, "Supported"),
        content_id_supported=get_boolean(record, "ContentIDSupported"),
    )


@decoder(CapabilitiesTerm.DEEP_UPDATE_SUPPORT)
def decode_deep_update_support(value: Expression | None) -> DeepUpdateSupport:
    record = as_record(value)
    if record is None:
        return DeepUpdateSupport()
    return DeepUpdateSupport(
        declared=True,
        supported=get_boolean(record, "Supported"),
        content_id_supported=get_boolean(record, "ContentIDSupported"),
    )


@decoder(CapabilitiesTerm.KEY_AS_SEGMENT_SUPPORTED)
def decode_key_as_segment_supported(value: Expression | None) -> KeyAsSegmentSupported:
    if not isinstance(value, BoolConstant):
        return KeyAsSegmentSupported()
    return KeyAsSegmentSupported(declared=True, supported=value.value)


__all__ = [
    "DECODERS",
    "NESTED_NAVIGATION_TERMS",
    "decode",
    "decode_custom_parameters",
    "decode_permission",
    "decoder",
    "get_restriction",
]
