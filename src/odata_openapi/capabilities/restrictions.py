"""Typed capability restrictions.

One frozen dataclass per capability term. Field defaults are the values the
vocabulary documents for an unannotated element, so a restriction built from
nothing already says what the service supports. ``declared`` records whether
a well-formed annotation was actually found.

Defaults are per term and per property. Most features default to supported,
but deep insert/update support defaults to ``None`` (absent, unsupported)
and ``KeyAsSegmentSupported`` defaults to False.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum, Flag
from types import MappingProxyType
from typing import TYPE_CHECKING, Any, Union

if TYPE_CHECKING:
    from odata_openapi.capabilities.terms import CapabilitiesTerm


class SearchExpressions(Flag):
    """Org.OData.Capabilities.V1.SearchExpressions"""

    none = 0
    AND = 1
    OR = 2
    NOT = 4
    phrase = 8
    group = 16


class HttpMethod(Flag):
    """Org.OData.Capabilities.V1.HttpMethod"""

    GET = 1
    PATCH = 2
    PUT = 4
    POST = 8
    DELETE = 16
    OPTIONS = 32
    HEAD = 64


class NavigationType(Enum):
    """Org.OData.Capabilities.V1.NavigationType"""

    RECURSIVE = "Recursive"
    SINGLE = "Single"
    NONE = "None"

    @classmethod
    def from_member(cls, member: str | None) -> NavigationType | None:
        if member is None:
            return None
        for value in cls:
            if value.value == member:
                return value
        return None


@dataclass(frozen=True)
class Scope:
    scope: str
    restricted_properties: str | None = None


@dataclass(frozen=True)
class Permission:
    """A reference to an authorization scheme plus the scopes it needs.

    The vocabulary allows several permissions per restriction. Only the
    first one is modeled.
    """

    scheme_name: str
    scopes: tuple[Scope, ...] = ()

    @property
    def scope_names(self) -> list[str]:
        return [scope.scope for scope in self.scopes]


@dataclass(frozen=True)
class CustomParameter:
    """A custom query option or custom header declared on a restriction."""

    name: str
    required: bool = False
    description: str | None = None
    documentation_url: str | None = None
    example_values: tuple[str, ...] = ()


@dataclass(frozen=True)
class ReadRestrictions:
    declared: bool = False
    readable: bool = True
    description: str | None = None
    long_description: str | None = None
    permission: Permission | None = None
    custom_headers: tuple[CustomParameter, ...] = ()
    custom_query_options: tuple[CustomParameter, ...] = ()
    read_by_key_restrictions: ReadRestrictions | None = None

    def for_single_entity(self) -> ReadRestrictions:
        """Restrictions that apply when reading one entity by key."""
        return self.read_by_key_restrictions or self


@dataclass(frozen=True)
class InsertRestrictions:
    declared: bool = False
    insertable: bool = True
    non_insertable_navigation_properties: tuple[str, ...] = ()
    max_levels: int = -1
    typecast_segment_supported: bool = True
    request_body_required: bool = True
    description: str | None = None
    long_description: str | None = None
    permission: Permission | None = None
    custom_headers: tuple[CustomParameter, ...] = ()
    custom_query_options: tuple[CustomParameter, ...] = ()


@dataclass(frozen=True)
class UpdateRestrictions:
    declared: bool = False
    updatable: bool = True
    upsertable: bool = False
    delta_update_supported: bool = False
    update_method: HttpMethod | None = None
    filter_segment_supported: bool = True
    typecast_segment_supported: bool = True
    non_updatable_navigation_properties: tuple[str, ...] = ()
    max_levels: int = -1
    request_body_required: bool = True
    description: str | None = None
    long_description: str | None = None
    permission: Permission | None = None
    custom_headers: tuple[CustomParameter, ...] = ()
    custom_query_options: tuple[CustomParameter, ...] = ()

    @property
    def is_update_method_put(self) -> bool:
        return self.update_method is not None and HttpMethod.PUT in self.update_method


@dataclass(frozen=True)
class DeleteRestrictions:
    declared: bool = False
    deletable: bool = True
    non_deletable_navigation_properties: tuple[str, ...] = ()
    max_levels: int = -1
    filter_segment_supported: bool = True
    typecast_segment_supported: bool = True
    description: str | None = None
    long_description: str | None = None
    permission: Permission | None = None
    custom_headers: tuple[CustomParameter, ...] = ()
    custom_query_options: tuple[CustomParameter, ...] = ()


@dataclass(frozen=True)
class SearchRestrictions:
    declared: bool = False
    searchable: bool = True
    unsupported_expressions: SearchExpressions | None = None

    def is_unsupported_expression(self, expression: SearchExpressions) -> bool:
        """True if every member of ``expression`` is listed as unsupported."""
        if self.unsupported_expressions is None or not expression:
            return False
        return expression in self.unsupported_expressions

    def is_supported_expression(self, expression: SearchExpressions) -> bool:
        return not self.is_unsupported_expression(expression)


@dataclass(frozen=True)
class FilterRestrictions:
    declared: bool = False
    filterable: bool = True
    requires_filter: bool = False
    required_properties: tuple[str, ...] = ()
    non_filterable_properties: tuple[str, ...] = ()
    max_levels: int = -1

    def is_non_filterable_property(self, name: str) -> bool:
        return name in self.non_filterable_properties


@dataclass(frozen=True)
class SortRestrictions:
    declared: bool = False
    sortable: bool = True
    ascending_only_properties: tuple[str, ...] = ()
    descending_only_properties: tuple[str, ...] = ()
    non_sortable_properties: tuple[str, ...] = ()

    def is_non_sortable_property(self, name: str) -> bool:
        return name in self.non_sortable_properties

    def is_ascending_only_property(self, name: str) -> bool:
        return name in self.ascending_only_properties

    def is_descending_only_property(self, name: str) -> bool:
        return name in self.descending_only_properties


@dataclass(frozen=True)
class TopSupported:
    declared: bool = False
    supported: bool = True


@dataclass(frozen=True)
class SkipSupported:
    declared: bool = False
    supported: bool = True


@dataclass(frozen=True)
class CountRestrictions:
    declared: bool = False
    countable: bool = True
    non_countable_properties: tuple[str, ...] = ()
    non_countable_navigation_properties: tuple[str, ...] = ()


@dataclass(frozen=True)
class ExpandRestrictions:
    declared: bool = False
    expandable: bool = True
    streams_expandable: bool = False
    non_expandable_properties: tuple[str, ...] = ()
    non_expandable_stream_properties: tuple[str, ...] = ()
    max_levels: int = -1

    def is_non_expandable_property(self, name: str) -> bool:
        return name in self.non_expandable_properties


@dataclass(frozen=True)
class SelectSupport:
    declared: bool = False
    supported: bool = True
    instance_annotations_supported: bool = False
    expandable: bool = False
    filterable: bool = False
    searchable: bool = False
    top_supported: bool = False
    skip_supported: bool = False
    sortable: bool = False
    countable: bool = False


@dataclass(frozen=True)
class DeepInsertSupport:
    declared: bool = False
    supported: bool | None = None
    content_id_supported: bool | None = None

    @property
    def is_supported(self) -> bool:
        return bool(self.supported)


@dataclass(frozen=True)
class DeepUpdateSupport:
    declared: bool = False
    supported: bool | None = None
    content_id_supported: bool | None = None

    @property
    def is_supported(self) -> bool:
        return bool(self.supported)


@dataclass(frozen=True)
class KeyAsSegmentSupported:
    declared: bool = False
    supported: bool = False


@dataclass(frozen=True)
class NavigationPropertyRestriction:
    """Restrictions for one navigation property, nested in NavigationRestrictions.

    ``restrictions`` holds the nested capability records that were present,
    keyed by term and decoded with the same decoders as top-level terms.
    """

    navigation_property: str
    navigability: NavigationType | None = None
    restrictions: Mapping[CapabilitiesTerm, Any] = field(default_factory=lambda: MappingProxyType({}))

    def get(self, term: CapabilitiesTerm) -> Any | None:
        return self.restrictions.get(term)


@dataclass(frozen=True)
class NavigationRestrictions:
    declared: bool = False
    navigability: NavigationType | None = None
    restricted_properties: tuple[NavigationPropertyRestriction, ...] = ()

    def find_restricted_property(self, name: str) -> NavigationPropertyRestriction | None:
        for restricted in self.restricted_properties:
            if restricted.navigation_property == name:
                return restricted
        return None

    def is_navigable(self, name: str) -> bool:
        """True unless the property, or the source as a whole, disallows navigation."""
        restricted = self.find_restricted_property(name)
        if restricted is not None and restricted.navigability is not None:
            return restricted.navigability is not NavigationType.NONE
        return self.navigability is not NavigationType.NONE


Restriction = Union[
    ReadRestrictions,
    InsertRestrictions,
    UpdateRestrictions,
    DeleteRestrictions,
    SearchRestrictions,
    FilterRestrictions,
    SortRestrictions,
    TopSupported,
    SkipSupported,
    CountRestrictions,
    ExpandRestrictions,
    SelectSupport,
    NavigationRestrictions,
    DeepInsertSupport,
    DeepUpdateSupport,
    KeyAsSegmentSupported,
]

OperationRestriction = Union[ReadRestrictions, InsertRestrictions, UpdateRestrictions, DeleteRestrictions]


__all__ = [
    "CountRestrictions",
    "CustomParameter",
    "DeepInsertSupport",
    "DeepUpdateSupport",
    "DeleteRestrictions",
    "ExpandRestrictions",
    "FilterRestrictions",
    "HttpMethod",
    "InsertRestrictions",
    "KeyAsSegmentSupported",
    "NavigationPropertyRestriction",
    "NavigationRestrictions",
    "NavigationType",
    "OperationRestriction",
    "Permission",
    "ReadRestrictions",
    "Restriction",
    "Scope",
    "SearchExpressions",
    "SearchRestrictions",
    "SelectSupport",
    "SkipSupported",
    "SortRestrictions",
    "TopSupported",
    "UpdateRestrictions",
]
