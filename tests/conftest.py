"""Pytest fixtures for odata-openapi tests."""

from __future__ import annotations

import copy
from pathlib import Path
from typing import Any

import pytest
import yaml

from odata_openapi.edm import EdmModel, model_from_dict
from odata_openapi.operation import GenerationContext
from odata_openapi.settings import GeneratorSettings

ENTITIES_PATH = "NS.Default/Entities"
ARCHIVE_PATH = "NS.Default/Archive"
ENTITY_TYPE_PATH = "NS.Entity"
ORDERS_NAV_PATH = "NS.Entity/Orders"
CONTAINER_PATH = "NS.Default"

SAMPLE_MODEL: dict[str, Any] = {
    "namespace": "NS",
    "entity_types": {
        "Entity": {
            "key": ["Id"],
            "properties": {
                "Id": "Edm.Int32",
                "Name": "Edm.String",
                "Price": {"type": "Edm.Decimal", "nullable": False},
            },
            "navigation_properties": {
                "Orders": {"type": "Order", "collection": True},
                "Owner": "Person",
            },
        },
        "Order": {
            "key": ["OrderId"],
            "properties": {"OrderId": "Edm.Guid", "Total": "Edm.Double"},
        },
        "Person": {
            "key": ["UserName"],
            "properties": {"UserName": "Edm.String"},
        },
    },
    "container": {
        "name": "Default",
        "entity_sets": {
            "Entities": "Entity",
            "Archive": "Entity",
            "Orders": "Order",
        },
        "singletons": {"Me": "Person"},
    },
}

SECURED_ANNOTATIONS: dict[str, Any] = {
    CONTAINER_PATH: {
        "Authorization.Authorizations": [
            {
                "@type": "Org.OData.Authorization.V1.OAuth2ClientCredentials",
                "Name": "Delegated",
                "TokenUrl": "https://login.example.com/token",
                "Scopes": [
                    {"Scope": "Entity.Read", "Description": "Read entities"},
                    {"Scope": "Entity.Write", "Description": "Write entities"},
                ],
            },
            {
                "@type": "Org.OData.Authorization.V1.ApiKey",
                "Name": "Key",
                "KeyName": "x-api-key",
                "Location": {"$EnumMember": "Org.OData.Authorization.V1.KeyLocation/Header"},
            },
        ]
    },
}


def build_model(annotations: dict[str, Any] | None = None, **overrides: Any) -> EdmModel:
    """Sample model with out-of-line ``annotations`` keyed by target path."""
    data = copy.deepcopy(SAMPLE_MODEL)
    data.update(copy.deepcopy(overrides))
    if annotations:
        data["annotations"] = copy.deepcopy(annotations)
    return model_from_dict(data)


def permission(scheme: str, *scopes: str) -> dict[str, Any]:
    return {"Permissions": [{"SchemeName": scheme, "Scopes": [{"Scope": scope} for scope in scopes]}]}


@pytest.fixture
def sample_model() -> EdmModel:
    """Sample model without any capability annotations."""
    return build_model()


@pytest.fixture
def secured_model() -> EdmModel:
    """Sample model whose container declares two security schemes."""
    return build_model(SECURED_ANNOTATIONS)


@pytest.fixture
def settings() -> GeneratorSettings:
    return GeneratorSettings()


@pytest.fixture
def context(sample_model: EdmModel, settings: GeneratorSettings) -> GenerationContext:
    return GenerationContext.create(sample_model, settings)


@pytest.fixture
def sample_model_file(tmp_path: Path) -> Path:
    """Sample model written as YAML, with a few annotations."""
    data = copy.deepcopy(SAMPLE_MODEL)
    data["annotations"] = {
        ENTITIES_PATH: {"Capabilities.SearchRestrictions": {"Searchable": False}},
        ENTITY_TYPE_PATH: {"Capabilities.TopSupported": False},
    }
    path = tmp_path / "service.yaml"
    path.write_text(yaml.safe_dump(data, sort_keys=False), encoding="utf-8")
    return path
