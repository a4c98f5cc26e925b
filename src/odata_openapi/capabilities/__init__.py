"""Capability resolution.

Resolves ``Org.OData.Capabilities.V1`` annotations on model elements (with
the element -> declared type fallback) and decodes them into typed,
immutable restriction records.
"""

from odata_openapi.capabilities.catalog import (
    DECODERS,
    decode,
    decode_custom_parameters,
    decode_permission,
    decoder,
    get_restriction,
)
from odata_openapi.capabilities.records import parse_flags
from odata_openapi.capabilities.resolver import (
    RESOLUTION_ORDER,
    LookupScope,
    resolve_annotation,
    resolve_annotation_with_scope,
)
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
    OperationRestriction,
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
from odata_openapi.capabilities.terms import AUTHORIZATIONS_TERM, CapabilitiesTerm

__all__ = [
    # Terms
    "AUTHORIZATIONS_TERM",
    "CapabilitiesTerm",
    # Resolution
    "LookupScope",
    "RESOLUTION_ORDER",
    "resolve_annotation",
    "resolve_annotation_with_scope",
    # Decoding
    "DECODERS",
    "decode",
    "decode_custom_parameters",
    "decode_permission",
    "decoder",
    "get_restriction",
    "parse_flags",
    # Restrictions
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
