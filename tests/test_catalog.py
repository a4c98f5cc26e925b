"""Tests for decoding capability annotations into restrictions."""

from __future__ import annotations

import pytest

from odata_openapi.capabilities import (
    DECODERS,
    CapabilitiesTerm,
    HttpMethod,
    NavigationType,
    ReadRestrictions,
    SearchExpressions,
    SearchRestrictions,
    TopSupported,
    decode,
    decode_permission,
    decoder,
    get_restriction,
    parse_flags,
)
from odata_openapi.edm import EnumMember, IntConstant, StringConstant
from odata_openapi.edm.loader import to_expression
from tests.conftest import ENTITIES_PATH, build_model, permission

SEARCH_NS = "Org.OData.Capabilities.V1.SearchExpressions"


def enum(*members: str, namespace: str = SEARCH_NS) -> EnumMember:
    return EnumMember(" ".join(f"{namespace}/{member}" for member in members))


class TestDecoderTable:
    def test_every_term_has_a_decoder(self) -> None:
        assert set(DECODERS) == set(CapabilitiesTerm)

    def test_registering_twice_is_rejected(self) -> None:
        with pytest.raises(ValueError):
            decoder(CapabilitiesTerm.TOP_SUPPORTED)(lambda value: TopSupported())

    @pytest.mark.parametrize("term", list(CapabilitiesTerm))
    def test_absent_annotation_decodes_to_undeclared_defaults(self, term: CapabilitiesTerm) -> None:
        restriction = decode(term, None)
        assert restriction.declared is False
        assert restriction == decode(term, None)

    @pytest.mark.parametrize("term", list(CapabilitiesTerm))
    def test_malformed_annotation_decodes_to_defaults(self, term: CapabilitiesTerm) -> None:
        assert decode(term, StringConstant("not a record")) == decode(term, None)


class TestDefaults:
    """Per-term defaults for unannotated elements."""

    def test_operation_restrictions_default_to_allowed(self) -> None:
        assert decode(CapabilitiesTerm.READ_RESTRICTIONS, None).readable is True
        assert decode(CapabilitiesTerm.INSERT_RESTRICTIONS, None).insertable is True
        assert decode(CapabilitiesTerm.UPDATE_RESTRICTIONS, None).updatable is True
        assert decode(CapabilitiesTerm.DELETE_RESTRICTIONS, None).deletable is True

    def test_query_options_default_to_supported(self) -> None:
        assert decode(CapabilitiesTerm.SEARCH_RESTRICTIONS, None).searchable is True
        assert decode(CapabilitiesTerm.FILTER_RESTRICTIONS, None).filterable is True
        assert decode(CapabilitiesTerm.FILTER_RESTRICTIONS, None).requires_filter is False
        assert decode(CapabilitiesTerm.SORT_RESTRICTIONS, None).sortable is True
        assert decode(CapabilitiesTerm.TOP_SUPPORTED, None).supported is True
        assert decode(CapabilitiesTerm.SKIP_SUPPORTED, None).supported is True
        assert decode(CapabilitiesTerm.COUNT_RESTRICTIONS, None).countable is True
        assert decode(CapabilitiesTerm.EXPAND_RESTRICTIONS, None).expandable is True
        assert decode(CapabilitiesTerm.SELECT_SUPPORT, None).supported is True

    def test_deep_support_and_key_as_segment_default_off(self) -> None:
        assert decode(CapabilitiesTerm.DEEP_INSERT_SUPPORT, None).supported is None
        assert decode(CapabilitiesTerm.DEEP_INSERT_SUPPORT, None).is_supported is False
        assert decode(CapabilitiesTerm.DEEP_UPDATE_SUPPORT, None).supported is None
        assert decode(CapabilitiesTerm.KEY_AS_SEGMENT_SUPPORTED, None).supported is False

    def test_max_levels_default(self) -> None:
        assert decode(CapabilitiesTerm.EXPAND_RESTRICTIONS, None).max_levels == -1
        expand = decode(CapabilitiesTerm.EXPAND_RESTRICTIONS, to_expression({"MaxLevels": 3}))
        assert expand.max_levels == 3


class TestSearchRestrictions:
    """UnsupportedExpressions flag decoding."""

    def test_searchable_false(self) -> None:
        search = decode(CapabilitiesTerm.SEARCH_RESTRICTIONS, to_expression({"Searchable": False}))
        assert search.declared is True
        assert search.searchable is False
        assert search.unsupported_expressions is None

    def test_wrong_kind_for_searchable_uses_default(self) -> None:
        search = decode(CapabilitiesTerm.SEARCH_RESTRICTIONS, to_expression({"Searchable": "no"}))
        assert search.declared is True
        assert search.searchable is True

    def test_multiple_unsupported_expressions(self) -> None:
        value = to_expression(
            {"Searchable": True, "UnsupportedExpressions": {"$EnumMember": enum("AND", "OR").value}}
        )
        search = decode(CapabilitiesTerm.SEARCH_RESTRICTIONS, value)

        assert search.unsupported_expressions == SearchExpressions.AND | SearchExpressions.OR
        assert search.is_unsupported_expression(SearchExpressions.AND)
        assert search.is_unsupported_expression(SearchExpressions.OR)
        assert search.is_unsupported_expression(SearchExpressions.AND | SearchExpressions.OR)
        assert not search.is_unsupported_expression(SearchExpressions.NOT)
        assert search.is_supported_expression(SearchExpressions.phrase)

    def test_token_order_does_not_matter(self) -> None:
        def unsupported(*members: str) -> SearchRestrictions:
            value = to_expression({"UnsupportedExpressions": {"$EnumMember": enum(*members).value}})
            return decode(CapabilitiesTerm.SEARCH_RESTRICTIONS, value)

        or_and = unsupported("OR", "AND")
        and_or = unsupported("AND", "OR")

        assert or_and.unsupported_expressions == and_or.unsupported_expressions
        assert or_and.unsupported_expressions == SearchExpressions.OR | SearchExpressions.AND
        assert or_and == and_or

    def test_none_member_is_an_empty_set(self) -> None:
        flags = parse_flags(enum("none"), SearchExpressions)
        assert flags is SearchExpressions.none
        assert not SearchRestrictions(unsupported_expressions=flags).is_unsupported_expression(SearchExpressions.AND)

    def test_unknown_members_are_dropped(self) -> None:
        assert parse_flags(enum("AND", "bogus"), SearchExpressions) == SearchExpressions.AND

    def test_nothing_recognised_reads_as_unset(self) -> None:
        assert parse_flags(enum("bogus"), SearchExpressions) is None
        assert parse_flags(StringConstant("AND"), SearchExpressions) is None
        assert parse_flags(None, SearchExpressions) is None

    def test_default_supports_everything(self) -> None:
        search = SearchRestrictions()
        for member in (SearchExpressions.AND, SearchExpressions.group, SearchExpressions.phrase):
            assert search.is_supported_expression(member)


class TestOperationRestrictions:
    def test_read_restrictions_with_by_key(self) -> None:
        value = to_expression(
            {
                "Readable": True,
                "Description": "List entities",
                **permission("Delegated", "Entity.Read"),
                "ReadByKeyRestrictions": {
                    "Description": "Get one entity",
                    **permission("Delegated", "Entity.ReadOne"),
                },
            }
        )
        read = decode(CapabilitiesTerm.READ_RESTRICTIONS, value)

        assert read.description == "List entities"
        assert read.permission.scope_names == ["Entity.Read"]
        single = read.for_single_entity()
        assert single.description == "Get one entity"
        assert single.permission.scope_names == ["Entity.ReadOne"]

    def test_for_single_entity_without_by_key(self) -> None:
        read = ReadRestrictions(declared=True, description="List")
        assert read.for_single_entity() is read

    def test_update_method_put(self) -> None:
        value = to_expression(
            {"UpdateMethod": {"$EnumMember": "Org.OData.Capabilities.V1.HttpMethod/PUT"}}
        )
        update = decode(CapabilitiesTerm.UPDATE_RESTRICTIONS, value)

        assert update.update_method == HttpMethod.PUT
        assert update.is_update_method_put is True

    def test_update_method_default_is_not_put(self) -> None:
        assert decode(CapabilitiesTerm.UPDATE_RESTRICTIONS, None).is_update_method_put is False

    def test_request_body_required(self) -> None:
        insert = decode(CapabilitiesTerm.INSERT_RESTRICTIONS, to_expression({"RequestBodyRequired": False}))
        assert insert.request_body_required is False
        assert decode(CapabilitiesTerm.INSERT_RESTRICTIONS, None).request_body_required is True

    def test_non_insertable_navigation_properties(self) -> None:
        value = to_expression(
            {
                "Insertable": True,
                "NonInsertableNavigationProperties": [
                    {"$NavigationPropertyPath": "Orders"},
                    "not a path",
                ],
            }
        )
        insert = decode(CapabilitiesTerm.INSERT_RESTRICTIONS, value)
        assert insert.non_insertable_navigation_properties == ("Orders",)

    def test_custom_parameters(self) -> None:
        value = to_expression(
            {
                "CustomQueryOptions": [
                    {
                        "Name": "odata-debug",
                        "Description": "Debug support",
                        "Required": False,
                        "ExampleValues": [{"Value": "html"}, {"Value": "json"}],
                    },
                    {"Description": "no name, skipped"},
                ],
                "CustomHeaders": [{"Name": "X-Trace", "Required": True}],
            }
        )
        read = decode(CapabilitiesTerm.READ_RESTRICTIONS, value)

        assert [p.name for p in read.custom_query_options] == ["odata-debug"]
        assert read.custom_query_options[0].example_values == ("html", "json")
        assert read.custom_headers[0].name == "X-Trace"
        assert read.custom_headers[0].required is True


class TestPermission:
    def test_only_first_permission_is_kept(self) -> None:
        value = to_expression(
            {
                "Permissions": [
                    {"SchemeName": "First", "Scopes": [{"Scope": "a"}, {"Scope": "b"}]},
                    {"SchemeName": "Second", "Scopes": [{"Scope": "c"}]},
                ]
            }
        )
        result = decode_permission(value)
        assert result.scheme_name == "First"
        assert result.scope_names == ["a", "b"]

    def test_single_permission_record(self) -> None:
        value = to_expression({"Permission": {"SchemeName": "Only"}})
        result = decode_permission(value)
        assert result.scheme_name == "Only"
        assert result.scopes == ()

    def test_missing_scheme_name(self) -> None:
        assert decode_permission(to_expression({"Permissions": [{"Scopes": [{"Scope": "a"}]}]})) is None

    def test_no_permission(self) -> None:
        assert decode_permission(to_expression({"Readable": True})) is None
        assert decode_permission(None) is None


class TestNavigationRestrictions:
    def test_restricted_properties_with_nested_restrictions(self) -> None:
        value = to_expression(
            {
                "Navigability": {"$EnumMember": "Org.OData.Capabilities.V1.NavigationType/Recursive"},
                "RestrictedProperties": [
                    {
                        "NavigationProperty": {"$NavigationPropertyPath": "Orders"},
                        "SearchRestrictions": {"Searchable": False},
                        "TopSupported": False,
                    },
                    {
                        "NavigationProperty": {"$NavigationPropertyPath": "Owner"},
                        "Navigability": {"$EnumMember": "Org.OData.Capabilities.V1.NavigationType/None"},
                    },
                    {"SearchRestrictions": {"Searchable": False}},
                ],
            }
        )
        navigation = decode(CapabilitiesTerm.NAVIGATION_RESTRICTIONS, value)

        assert navigation.navigability is NavigationType.RECURSIVE
        assert len(navigation.restricted_properties) == 2

        orders = navigation.find_restricted_property("Orders")
        assert orders.get(CapabilitiesTerm.SEARCH_RESTRICTIONS).searchable is False
        assert orders.get(CapabilitiesTerm.TOP_SUPPORTED).supported is False
        assert orders.get(CapabilitiesTerm.FILTER_RESTRICTIONS) is None

        assert navigation.is_navigable("Orders") is True
        assert navigation.is_navigable("Owner") is False
        assert navigation.find_restricted_property("Missing") is None

    def test_malformed_nested_restriction_is_absent(self) -> None:
        value = to_expression(
            {
                "RestrictedProperties": [
                    {
                        "NavigationProperty": {"$NavigationPropertyPath": "Orders"},
                        "TopSupported": "junk",
                        "SkipSupported": False,
                    }
                ]
            }
        )
        orders = decode(CapabilitiesTerm.NAVIGATION_RESTRICTIONS, value).find_restricted_property("Orders")

        assert orders.get(CapabilitiesTerm.TOP_SUPPORTED) is None
        assert orders.get(CapabilitiesTerm.SKIP_SUPPORTED).supported is False

    def test_source_wide_navigability_none(self) -> None:
        value = to_expression({"Navigability": {"$EnumMember": "Org.OData.Capabilities.V1.NavigationType/None"}})
        navigation = decode(CapabilitiesTerm.NAVIGATION_RESTRICTIONS, value)
        assert navigation.is_navigable("Orders") is False


class TestGetRestriction:
    def test_decodes_resolved_annotation(self) -> None:
        model = build_model({ENTITIES_PATH: {"Capabilities.TopSupported": False}})
        entities = model.container.find_entity_set("Entities")

        top = get_restriction(model, entities, CapabilitiesTerm.TOP_SUPPORTED)

        assert top == TopSupported(declared=True, supported=False)

    def test_top_supported_expects_a_boolean(self) -> None:
        assert decode(CapabilitiesTerm.TOP_SUPPORTED, IntConstant(0)) == TopSupported()
