"""Qualified names of the vocabulary terms the generator understands."""

from __future__ import annotations

from enum import Enum

CAPABILITIES_NAMESPACE = "Org.OData.Capabilities.V1"
AUTHORIZATION_NAMESPACE = "Org.OData.Authorization.V1"


class CapabilitiesTerm(Enum):
    """Capability terms, valued by their fully-qualified term name."""

    READ_RESTRICTIONS = f"{CAPABILITIES_NAMESPACE}.ReadRestrictions"
    INSERT_RESTRICTIONS = f"{CAPABILITIES_NAMESPACE}.InsertRestrictions"
    UPDATE_RESTRICTIONS = f"{CAPABILITIES_NAMESPACE}.UpdateRestrictions"
    DELETE_RESTRICTIONS = f"{CAPABILITIES_NAMESPACE}.DeleteRestrictions"
    SEARCH_RESTRICTIONS = f"{CAPABILITIES_NAMESPACE}.SearchRestrictions"
    FILTER_RESTRICTIONS = f"{CAPABILITIES_NAMESPACE}.FilterRestrictions"
    SORT_RESTRICTIONS = f"{CAPABILITIES_NAMESPACE}.SortRestrictions"
    TOP_SUPPORTED = f"{CAPABILITIES_NAMESPACE}.TopSupported"
    SKIP_SUPPORTED = f"{CAPABILITIES_NAMESPACE}.SkipSupported"
    COUNT_RESTRICTIONS = f"{CAPABILITIES_NAMESPACE}.CountRestrictions"
    EXPAND_RESTRICTIONS = f"{CAPABILITIES_NAMESPACE}.ExpandRestrictions"
    SELECT_SUPPORT = f"{CAPABILITIES_NAMESPACE}.SelectSupport"
    NAVIGATION_RESTRICTIONS = f"{CAPABILITIES_NAMESPACE}.NavigationRestrictions"
    DEEP_INSERT_SUPPORT = f"{CAPABILITIES_NAMESPACE}.DeepInsertSupport"
    DEEP_UPDATE_SUPPORT = f"{CAPABILITIES_NAMESPACE}.DeepUpdateSupport"
    KEY_AS_SEGMENT_SUPPORTED = f"{CAPABILITIES_NAMESPACE}.KeyAsSegmentSupported"

    @property
    def qualified_name(self) -> str:
        return self.value

    @property
    def short_name(self) -> str:
        return self.value.rsplit(".", 1)[-1]

    @classmethod
    def from_name(cls, name: str) -> CapabilitiesTerm | None:
        """Look up a term by qualified or short name."""
        for term in cls:
            if name in (term.value, term.short_name):
                return term
        return None


AUTHORIZATIONS_TERM = f"{AUTHORIZATION_NAMESPACE}.Authorizations"


__all__ = [
    "AUTHORIZATIONS_TERM",
    "AUTHORIZATION_NAMESPACE",
    "CAPABILITIES_NAMESPACE",
    "CapabilitiesTerm",
]
