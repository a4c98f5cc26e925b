"""Parameter synthesis helpers.

Pure functions from a restriction (and the entity type it applies to) to an
OpenAPI parameter. A system query option parameter is produced unless its
restriction explicitly disables the feature; an undeclared restriction
carries the permissive defaults, so it always produces the parameter.
"""

from __future__ import annotations

from odata_openapi.capabilities.restrictions import (
    CountRestrictions,
    CustomParameter,
    ExpandRestrictions,
    FilterRestrictions,
    OperationRestriction,
    SearchRestrictions,
    SelectSupport,
    SkipSupported,
    SortRestrictions,
    TopSupported,
)
from odata_openapi.edm.model import EdmModel, EntityType
from odata_openapi.openapi import Parameter, ParameterLocation
from odata_openapi.schemas import primitive_schema
from odata_openapi.settings import GeneratorSettings


def create_key_parameters(model: EdmModel, entity_type: EntityType) -> list[Parameter]:
    """Path parameters for the key properties of ``entity_type``."""
    return [
        Parameter(
            name=prop.name,
            location=ParameterLocation.PATH,
            description=f"key: {prop.name} of {entity_type.name}",
            required=True,
            schema=primitive_schema(prop.type_name),
        )
        for prop in model.get_key(entity_type)
    ]


def create_top(top: TopSupported, settings: GeneratorSettings) -> Parameter | None:
    if not top.supported:
        return None
    return Parameter(
        name="$top",
        location=ParameterLocation.QUERY,
        description="Show only the first n items",
        schema={"type": "integer", "minimum": 0},
        example=settings.top_example,
    )


def create_skip(skip: SkipSupported) -> Parameter | None:
    if not skip.supported:
        return None
    return Parameter(
        name="$skip",
        location=ParameterLocation.QUERY,
        description="Skip the first n items",
        schema={"type": "integer", "minimum": 0},
    )


def create_search(search: SearchRestrictions) -> Parameter | None:
    if not search.searchable:
        return None
    return Parameter(
        name="$search",
        location=ParameterLocation.QUERY,
        description="Search items by search phrases",
        schema={"type": "string"},
    )


def create_filter(filter_restrictions: FilterRestrictions) -> Parameter | None:
    if not filter_restrictions.filterable:
        return None
    return Parameter(
        name="$filter",
        location=ParameterLocation.QUERY,
        description="Filter items by property values",
        required=filter_restrictions.requires_filter,
        schema={"type": "string"},
    )


def create_count(count: CountRestrictions) -> Parameter | None:
    if not count.countable:
        return None
    return Parameter(
        name="$count",
        location=ParameterLocation.QUERY,
        description="Include count of items",
        schema={"type": "boolean"},
    )


def _array_of(values: list[str]) -> dict[str, object]:
    items: dict[str, object] = {"type": "string"}
    if values:
        items["enum"] = values
    return {"type": "array", "uniqueItems": True, "items": items}


def create_orderby(sort: SortRestrictions, entity_type: EntityType) -> Parameter | None:
    if not sort.sortable:
        return None

    values: list[str] = []
    for prop in entity_type.properties:
        if sort.is_non_sortable_property(prop.name):
            continue
        if not sort.is_descending_only_property(prop.name):
            values.append(prop.name)
        if not sort.is_ascending_only_property(prop.name):
            values.append(f"{prop.name} desc")

    return Parameter(
        name="$orderby",
        location=ParameterLocation.QUERY,
        description="Order items by property values",
        schema=_array_of(values),
        style="form",
        explode=False,
    )


def create_select(select: SelectSupport, entity_type: EntityType) -> Parameter | None:
    if not select.supported:
        return None

    values = [prop.name for prop in entity_type.properties]
    values.extend(nav.name for nav in entity_type.navigation_properties)

    return Parameter(
        name="$select",
        location=ParameterLocation.QUERY,
        description="Select properties to be returned",
        schema=_array_of(values),
        style="form",
        explode=False,
    )


def create_expand(expand: ExpandRestrictions, entity_type: EntityType) -> Parameter | None:
    if not expand.expandable:
        return None

    values = ["*"]
    values.extend(
        nav.name
        for nav in entity_type.navigation_properties
        if not expand.is_non_expandable_property(nav.name)
    )

    return Parameter(
        name="$expand",
        location=ParameterLocation.QUERY,
        description="Expand related entities",
        schema=_array_of(values),
        style="form",
        explode=False,
    )


def create_if_match() -> Parameter:
    return Parameter(
        name="If-Match",
        location=ParameterLocation.HEADER,
        description="ETag",
        schema={"type": "string"},
    )


def _custom_parameter(custom: CustomParameter, location: ParameterLocation) -> Parameter:
    return Parameter(
        name=custom.name,
        location=location,
        description=custom.description,
        required=custom.required,
        schema={"type": "string"},
        example=custom.example_values[0] if custom.example_values else None,
    )


def create_custom_parameters(restriction: OperationRestriction | None) -> list[Parameter]:
    """Custom query options, then custom headers, in declaration order."""
    if restriction is None:
        return []
    parameters = [
        _custom_parameter(option, ParameterLocation.QUERY) for option in restriction.custom_query_options
    ]
    parameters.extend(
        _custom_parameter(header, ParameterLocation.HEADER) for header in restriction.custom_headers
    )
    return parameters


__all__ = [
    "create_count",
    "create_custom_parameters",
    "create_expand",
    "create_filter",
    "create_if_match",
    "create_key_parameters",
    "create_orderby",
    "create_search",
    "create_select",
    "create_skip",
    "create_top",
]
