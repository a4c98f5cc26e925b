"""Load an :class:`EdmModel` from a YAML or JSON description.

The description is a compact, CSDL-like document::

    namespace: NS
    entity_types:
      Entity:
        key: [Id]
        properties:
          Id: Edm.Int32
          Name: {type: Edm.String, nullable: false}
        navigation_properties:
          Orders: {type: NS.Order, collection: true}
    container:
      name: Default
      entity_sets:
        Entities:
          type: NS.Entity
          annotations:
            Capabilities.SearchRestrictions:
              Searchable: false
      singletons:
        Me: {type: Entity}
    annotations:
      NS.Default/Entities:
        Capabilities.TopSupported: false

Annotation values map onto expressions: booleans, numbers, strings and null
become constants, lists become collections, mappings become records (``@type`` names
the record type). Mappings with a single ``$EnumMember``, ``$PropertyPath`` or
``$NavigationPropertyPath`` key become the matching expression.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

import yaml

from odata_openapi.edm.expressions import (
    BoolConstant,
    Collection,
    EnumMember,
    Expression,
    FloatConstant,
    IntConstant,
    NavigationPropertyPath,
    NullConstant,
    PropertyPath,
    PropertyValue,
    Record,
    StringConstant,
)
from odata_openapi.edm.model import (
    EdmModel,
    EntityContainer,
    EntitySet,
    EntityType,
    NavigationProperty,
    Singleton,
    StructuralProperty,
)
from odata_openapi.errors import ModelLoadError

logger = logging.getLogger(__name__)

# Short vocabulary aliases accepted in term names.
VOCABULARY_ALIASES: dict[str, str] = {
    "Capabilities.": "Org.OData.Capabilities.V1.",
    "Authorization.": "Org.OData.Authorization.V1.",
    "Core.": "Org.OData.Core.V1.",
}

_SPECIAL_KEYS = {
    "$EnumMember": EnumMember,
    "$PropertyPath": PropertyPath,
    "$NavigationPropertyPath": NavigationPropertyPath,
}


def expand_term(term: str) -> str:
    """Expand a vocabulary alias (``Capabilities.X``) to its qualified name."""
    for alias, namespace in VOCABULARY_ALIASES.items():
        if term.startswith(alias):
            return namespace + term[len(alias):]
    return term


def to_expression(value: Any, where: str = "") -> Expression:
    """Convert a plain YAML/JSON value into an annotation expression."""
    # bool is a subclass of int, so it has to be checked first
    if isinstance(value, bool):
        return BoolConstant(value)
    if isinstance(value, int):
        return IntConstant(value)
    if isinstance(value, float):
        return FloatConstant(value)
    if isinstance(value, str):
        return StringConstant(value)
    if value is None:
        return NullConstant()
    if isinstance(value, list):
        return Collection(tuple(to_expression(item, where) for item in value))
    if isinstance(value, dict):
        if len(value) == 1:
            key, inner = next(iter(value.items()))
            if key in _SPECIAL_KEYS:
                return _SPECIAL_KEYS[key](str(inner))
        type_name = value.get("@type")
        properties = tuple(
            PropertyValue(name, to_expression(inner, f"{where}/{name}"))
            for name, inner in value.items()
            if name != "@type"
        )
        return Record(properties=properties, type_name=type_name)
    logger.warning(f"Ignoring unsupported annotation value {value!r} at {where or '<root>'}")
    return NullConstant()


def _qualify(type_name: str, namespace: str) -> str:
    return type_name if "." in type_name else f"{namespace}.{type_name}"


def _parse_annotations(
    raw: dict[str, Any] | None,
    target: str,
    annotations: dict[str, dict[str, Expression]],
) -> None:
    if not raw:
        return
    if not isinstance(raw, dict):
        raise ModelLoadError(f"Annotations of '{target}' must be a mapping")
    terms = annotations.setdefault(target, {})
    for term, value in raw.items():
        qualified = expand_term(term)
        if qualified in terms:
            logger.warning(f"Duplicate annotation {qualified} on {target}; keeping the last one")
        terms[qualified] = to_expression(value, f"{target}@{qualified}")


def _parse_property(name: str, raw: Any, key: tuple[str, ...]) -> StructuralProperty:
    if isinstance(raw, str):
        return StructuralProperty(name=name, type_name=raw, nullable=name not in key)
    if isinstance(raw, dict):
        return StructuralProperty(
            name=name,
            type_name=raw.get("type", "Edm.String"),
            nullable=bool(raw.get("nullable", name not in key)),
        )
    raise ModelLoadError(f"Property '{name}' must be a type name or a mapping")


def _parse_entity_type(
    name: str,
    raw: dict[str, Any],
    namespace: str,
    annotations: dict[str, dict[str, Expression]],
) -> EntityType:
    full_name = f"{namespace}.{name}"
    key = raw.get("key", ())
    if isinstance(key, str):
        key = (key,)
    elif not isinstance(key, (list, tuple)):
        raise ModelLoadError(f"Key of '{full_name}' must be a property name or a list")
    key = tuple(key)
    properties = tuple(
        _parse_property(prop_name, prop, key)
        for prop_name, prop in (raw.get("properties") or {}).items()
    )

    navigation_properties: list[NavigationProperty] = []
    for nav_name, nav in (raw.get("navigation_properties") or {}).items():
        if isinstance(nav, str):
            nav = {"type": nav}
        if "type" not in nav:
            raise ModelLoadError(f"Navigation property '{full_name}/{nav_name}' has no type")
        nav_property = NavigationProperty(
            name=nav_name,
            target_type=_qualify(nav["type"], namespace),
            collection=bool(nav.get("collection", False)),
            contains_target=bool(nav.get("contains_target", False)),
            declaring_type=full_name,
        )
        navigation_properties.append(nav_property)
        _parse_annotations(nav.get("annotations"), nav_property.target_path, annotations)

    _parse_annotations(raw.get("annotations"), full_name, annotations)

    return EntityType(
        namespace=namespace,
        name=name,
        key=key,
        properties=properties,
        navigation_properties=tuple(navigation_properties),
    )


def model_from_dict(data: dict[str, Any]) -> EdmModel:
    """Build an :class:`EdmModel` from a parsed description.

    Raises:
        ModelLoadError: If required sections are missing or malformed.
    """
    if not isinstance(data, dict):
        raise ModelLoadError("Model description must be a mapping")

    namespace = data.get("namespace")
    if not namespace:
        raise ModelLoadError("Model description has no 'namespace'")

    annotations: dict[str, dict[str, Expression]] = {}

    entity_types: dict[str, EntityType] = {}
    for name, raw in (data.get("entity_types") or {}).items():
        entity_type = _parse_entity_type(name, raw or {}, namespace, annotations)
        entity_types[entity_type.full_name] = entity_type

    raw_container = data.get("container")
    if not isinstance(raw_container, dict) or not raw_container.get("name"):
        raise ModelLoadError("Model description has no named 'container'")

    container_name = f"{namespace}.{raw_container['name']}"

    entity_sets: list[EntitySet] = []
    for name, raw in (raw_container.get("entity_sets") or {}).items():
        raw = raw if isinstance(raw, dict) else {"type": raw}
        entity_set = EntitySet(
            name=name,
            entity_type=_qualify(raw.get("type", ""), namespace),
            container=container_name,
        )
        entity_sets.append(entity_set)
        _parse_annotations(raw.get("annotations"), entity_set.target_path, annotations)

    singletons: list[Singleton] = []
    for name, raw in (raw_container.get("singletons") or {}).items():
        raw = raw if isinstance(raw, dict) else {"type": raw}
        singleton = Singleton(
            name=name,
            entity_type=_qualify(raw.get("type", ""), namespace),
            container=container_name,
        )
        singletons.append(singleton)
        _parse_annotations(raw.get("annotations"), singleton.target_path, annotations)

    container = EntityContainer(
        namespace=namespace,
        name=raw_container["name"],
        entity_sets=tuple(entity_sets),
        singletons=tuple(singletons),
    )
    _parse_annotations(raw_container.get("annotations"), container.full_name, annotations)

    # Out-of-line annotations, keyed by target path
    for target, raw in (data.get("annotations") or {}).items():
        _parse_annotations(raw, target, annotations)

    logger.debug(
        f"Loaded model {container.full_name}: {len(entity_types)} entity types, "
        f"{len(entity_sets)} entity sets, {len(singletons)} singletons"
    )

    return EdmModel(container=container, entity_types=entity_types, annotations=annotations)


def load_model(path: str | Path) -> EdmModel:
    """Load a model description from a YAML or JSON file.

    Raises:
        ModelLoadError: If the file is missing or cannot be parsed.
    """
    path = Path(path)
    if not path.exists():
        raise ModelLoadError(f"Model file not found: {path}", path=str(path))

    content = path.read_text(encoding="utf-8")
    if path.suffix == ".json":
        try:
            data = json.loads(content)
        except json.JSONDecodeError as e:
            raise ModelLoadError(f"JSON parsing error: {e}", path=str(path)) from e
    else:
        try:
            data = yaml.safe_load(content)
        except yaml.YAMLError as e:
            raise ModelLoadError(f"YAML parsing error: {e}", path=str(path)) from e

    return model_from_dict(data)


__all__ = ["VOCABULARY_ALIASES", "expand_term", "load_model", "model_from_dict", "to_expression"]
