"""Tests for parameter synthesis helpers."""

from __future__ import annotations

from odata_openapi.capabilities import (
    CountRestrictions,
    CustomParameter,
    ExpandRestrictions,
    FilterRestrictions,
    ReadRestrictions,
    SearchRestrictions,
    SelectSupport,
    SkipSupported,
    SortRestrictions,
    TopSupported,
)
from odata_openapi.openapi import ParameterLocation
from odata_openapi.operation.parameters import (
    create_count,
    create_custom_parameters,
    create_expand,
    create_filter,
    create_if_match,
    create_key_parameters,
    create_orderby,
    create_search,
    create_select,
    create_skip,
    create_top,
)
from odata_openapi.settings import GeneratorSettings


class TestSystemQueryOptions:
    def test_top_uses_configured_example(self) -> None:
        param = create_top(TopSupported(), GeneratorSettings(top_example=10))
        assert param.name == "$top"
        assert param.location is ParameterLocation.QUERY
        assert param.example == 10
        assert param.schema == {"type": "integer", "minimum": 0}

    def test_unsupported_options_produce_nothing(self) -> None:
        settings = GeneratorSettings()
        assert create_top(TopSupported(declared=True, supported=False), settings) is None
        assert create_skip(SkipSupported(declared=True, supported=False)) is None
        assert create_search(SearchRestrictions(declared=True, searchable=False)) is None
        assert create_filter(FilterRestrictions(declared=True, filterable=False)) is None
        assert create_count(CountRestrictions(declared=True, countable=False)) is None

    def test_defaults_produce_parameters(self) -> None:
        assert create_skip(SkipSupported()).name == "$skip"
        assert create_search(SearchRestrictions()).name == "$search"
        assert create_count(CountRestrictions()).schema == {"type": "boolean"}

    def test_filter_required_when_restriction_requires_it(self) -> None:
        assert create_filter(FilterRestrictions()).required is False
        assert create_filter(FilterRestrictions(declared=True, requires_filter=True)).required is True

    def test_equal_inputs_give_equal_outputs(self) -> None:
        assert create_search(SearchRestrictions()) == create_search(SearchRestrictions())
        assert create_filter(FilterRestrictions()) == create_filter(FilterRestrictions())


class TestProjectionParameters:
    def test_orderby_values(self, sample_model) -> None:
        entity = sample_model.find_entity_type("NS.Entity")
        sort = SortRestrictions(
            declared=True,
            ascending_only_properties=("Name",),
            descending_only_properties=("Price",),
            non_sortable_properties=("Id",),
        )

        param = create_orderby(sort, entity)

        assert param.schema["items"]["enum"] == ["Name", "Price desc"]
        assert param.style == "form"
        assert param.explode is False

    def test_orderby_defaults_to_both_directions(self, sample_model) -> None:
        entity = sample_model.find_entity_type("NS.Entity")
        values = create_orderby(SortRestrictions(), entity).schema["items"]["enum"]
        assert values == ["Id", "Id desc", "Name", "Name desc", "Price", "Price desc"]

    def test_orderby_not_sortable(self, sample_model) -> None:
        entity = sample_model.find_entity_type("NS.Entity")
        assert create_orderby(SortRestrictions(declared=True, sortable=False), entity) is None

    def test_select_lists_properties_and_navigation(self, sample_model) -> None:
        entity = sample_model.find_entity_type("NS.Entity")
        param = create_select(SelectSupport(), entity)
        assert param.schema["items"]["enum"] == ["Id", "Name", "Price", "Orders", "Owner"]
        assert create_select(SelectSupport(declared=True, supported=False), entity) is None

    def test_expand_skips_non_expandable(self, sample_model) -> None:
        entity = sample_model.find_entity_type("NS.Entity")
        expand = ExpandRestrictions(declared=True, non_expandable_properties=("Owner",))
        param = create_expand(expand, entity)
        assert param.schema["items"]["enum"] == ["*", "Orders"]


class TestKeyAndHeaderParameters:
    def test_key_parameters(self, sample_model) -> None:
        entity = sample_model.find_entity_type("NS.Entity")
        params = create_key_parameters(sample_model, entity)

        assert len(params) == 1
        assert params[0].name == "Id"
        assert params[0].location is ParameterLocation.PATH
        assert params[0].description == "key: Id of Entity"
        assert params[0].schema == {"type": "integer", "format": "int32"}
        assert params[0].to_dict()["required"] is True

    def test_if_match(self) -> None:
        param = create_if_match()
        assert param.name == "If-Match"
        assert param.location is ParameterLocation.HEADER


class TestCustomParameters:
    def test_query_options_before_headers(self) -> None:
        read = ReadRestrictions(
            declared=True,
            custom_headers=(CustomParameter(name="X-Trace", required=True),),
            custom_query_options=(
                CustomParameter(name="debug", example_values=("html",)),
                CustomParameter(name="trace"),
            ),
        )

        params = create_custom_parameters(read)

        assert [p.name for p in params] == ["debug", "trace", "X-Trace"]
        assert [p.location for p in params] == [
            ParameterLocation.QUERY,
            ParameterLocation.QUERY,
            ParameterLocation.HEADER,
        ]
        assert params[0].example == "html"
        assert params[2].required is True

    def test_no_restriction(self) -> None:
        assert create_custom_parameters(None) == []
        assert create_custom_parameters(ReadRestrictions()) == []
