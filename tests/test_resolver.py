"""Tests for annotation resolution with declared-type fallback."""

from __future__ import annotations

import pytest

from odata_openapi.capabilities import (
    RESOLUTION_ORDER,
    CapabilitiesTerm,
    LookupScope,
    get_restriction,
    resolve_annotation,
    resolve_annotation_with_scope,
)
from odata_openapi.edm import Record
from odata_openapi.errors import InvalidArgumentError
from tests.conftest import ENTITIES_PATH, ENTITY_TYPE_PATH, build_model

SEARCH = CapabilitiesTerm.SEARCH_RESTRICTIONS


class TestResolutionOrder:
    def test_element_comes_before_declared_type(self) -> None:
        assert RESOLUTION_ORDER == (LookupScope.ELEMENT, LookupScope.DECLARED_TYPE)


class TestResolveAnnotation:
    """Lookup precedence for navigation sources and other elements."""

    def test_no_annotation_anywhere(self, sample_model) -> None:
        entities = sample_model.container.find_entity_set("Entities")
        assert resolve_annotation_with_scope(sample_model, entities, SEARCH) == (None, None)

    def test_annotation_on_element(self) -> None:
        model = build_model({ENTITIES_PATH: {"Capabilities.SearchRestrictions": {"Searchable": False}}})
        entities = model.container.find_entity_set("Entities")

        value, scope = resolve_annotation_with_scope(model, entities, SEARCH)

        assert isinstance(value, Record)
        assert scope is LookupScope.ELEMENT

    def test_falls_back_to_declared_type(self) -> None:
        model = build_model({ENTITY_TYPE_PATH: {"Capabilities.SearchRestrictions": {"Searchable": False}}})
        entities = model.container.find_entity_set("Entities")

        value, scope = resolve_annotation_with_scope(model, entities, SEARCH)

        assert value is not None
        assert scope is LookupScope.DECLARED_TYPE

    def test_type_annotation_applies_to_every_set_of_that_type(self) -> None:
        model = build_model({ENTITY_TYPE_PATH: {"Capabilities.SearchRestrictions": {"Searchable": False}}})

        for name in ("Entities", "Archive"):
            entity_set = model.container.find_entity_set(name)
            assert get_restriction(model, entity_set, SEARCH).searchable is False

        orders = model.container.find_entity_set("Orders")
        assert get_restriction(model, orders, SEARCH).searchable is True

    def test_element_annotation_replaces_type_annotation_without_merging(self) -> None:
        model = build_model(
            {
                ENTITY_TYPE_PATH: {
                    "Capabilities.SearchRestrictions": {
                        "Searchable": False,
                        "UnsupportedExpressions": {"$EnumMember": "Org.OData.Capabilities.V1.SearchExpressions/AND"},
                    }
                },
                ENTITIES_PATH: {"Capabilities.SearchRestrictions": {"Searchable": True}},
            }
        )
        entities = model.container.find_entity_set("Entities")

        search = get_restriction(model, entities, SEARCH)

        assert search.searchable is True
        assert search.unsupported_expressions is None

    def test_singleton_falls_back_to_declared_type(self) -> None:
        model = build_model({"NS.Person": {"Capabilities.TopSupported": False}})
        me = model.container.find_singleton("Me")

        _, scope = resolve_annotation_with_scope(model, me, CapabilitiesTerm.TOP_SUPPORTED)

        assert scope is LookupScope.DECLARED_TYPE

    def test_navigation_property_has_no_type_fallback(self) -> None:
        model = build_model({"NS.Order": {"Capabilities.SearchRestrictions": {"Searchable": False}}})
        orders_nav = model.find_entity_type("NS.Entity").find_navigation_property("Orders")

        assert resolve_annotation(model, orders_nav, SEARCH) is None

    def test_accepts_qualified_term_name(self) -> None:
        model = build_model({ENTITIES_PATH: {"Capabilities.TopSupported": False}})
        entities = model.container.find_entity_set("Entities")

        assert resolve_annotation(model, entities, "Org.OData.Capabilities.V1.TopSupported") is not None

    def test_unknown_term_resolves_to_none(self, sample_model) -> None:
        entities = sample_model.container.find_entity_set("Entities")
        assert resolve_annotation(sample_model, entities, "Org.Example.V1.Unknown") is None

    def test_none_model_raises(self, sample_model) -> None:
        entities = sample_model.container.find_entity_set("Entities")
        with pytest.raises(InvalidArgumentError) as exc_info:
            resolve_annotation(None, entities, SEARCH)
        assert exc_info.value.argument == "model"

    def test_none_element_raises(self, sample_model) -> None:
        with pytest.raises(InvalidArgumentError) as exc_info:
            resolve_annotation(sample_model, None, SEARCH)
        assert exc_info.value.argument == "element"
