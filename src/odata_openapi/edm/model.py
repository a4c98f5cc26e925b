"""In-memory entity data model.

The model is a read-only graph: entity types, an entity container holding
entity sets and singletons, and vocabulary annotations keyed by the target
path of the element they are attached to.

Target paths follow CSDL conventions:

- ``NS.Entity`` for an entity type,
- ``NS.Entity/Orders`` for a navigation property declared on it,
- ``NS.Default`` for the entity container,
- ``NS.Default/Entities`` for an entity set or singleton inside it.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Union

from odata_openapi.edm.expressions import Expression


@dataclass(frozen=True)
class StructuralProperty:
    """A primitive-typed property of an entity type."""

    name: str
    type_name: str = "Edm.String"
    nullable: bool = True


@dataclass(frozen=True)
class NavigationProperty:
    """A relationship from one entity type to another.

    Attributes:
        name: Property name.
        target_type: Fully-qualified name of the related entity type.
        collection: True for a to-many relationship.
        contains_target: True for a containment relationship.
        declaring_type: Fully-qualified name of the declaring entity type.
    """

    name: str
    target_type: str
    collection: bool = False
    contains_target: bool = False
    declaring_type: str = ""

    @property
    def target_path(self) -> str:
        return f"{self.declaring_type}/{self.name}"


@dataclass(frozen=True)
class EntityType:
    namespace: str
    name: str
    key: tuple[str, ...] = ()
    properties: tuple[StructuralProperty, ...] = ()
    navigation_properties: tuple[NavigationProperty, ...] = ()

    @property
    def full_name(self) -> str:
        return f"{self.namespace}.{self.name}"

    @property
    def target_path(self) -> str:
        return self.full_name

    def find_property(self, name: str) -> StructuralProperty | None:
        for prop in self.properties:
            if prop.name == name:
                return prop
        return None

    def find_navigation_property(self, name: str) -> NavigationProperty | None:
        for nav in self.navigation_properties:
            if nav.name == name:
                return nav
        return None


@dataclass(frozen=True)
class EntitySet:
    """A collection of entities of one entity type inside a container."""

    name: str
    entity_type: str
    container: str = ""

    @property
    def target_path(self) -> str:
        return f"{self.container}/{self.name}"


@dataclass(frozen=True)
class Singleton:
    """A single named entity inside a container."""

    name: str
    entity_type: str
    container: str = ""

    @property
    def target_path(self) -> str:
        return f"{self.container}/{self.name}"


NavigationSource = Union[EntitySet, Singleton]
ModelElement = Union[EntityType, NavigationProperty, EntitySet, Singleton, "EntityContainer"]


@dataclass(frozen=True)
class EntityContainer:
    namespace: str
    name: str
    entity_sets: tuple[EntitySet, ...] = ()
    singletons: tuple[Singleton, ...] = ()

    @property
    def full_name(self) -> str:
        return f"{self.namespace}.{self.name}"

    @property
    def target_path(self) -> str:
        return self.full_name

    def find_entity_set(self, name: str) -> EntitySet | None:
        for entity_set in self.entity_sets:
            if entity_set.name == name:
                return entity_set
        return None

    def find_singleton(self, name: str) -> Singleton | None:
        for singleton in self.singletons:
            if singleton.name == name:
                return singleton
        return None

    def find_navigation_source(self, name: str) -> NavigationSource | None:
        return self.find_entity_set(name) or self.find_singleton(name)


def is_navigation_source(element: object) -> bool:
    """True for entity sets and singletons."""
    return isinstance(element, (EntitySet, Singleton))


@dataclass(frozen=True)
class EdmModel:
    """A fully loaded entity data model.

    Annotations are stored per target path, then per qualified term name.
    At most one annotation per (target, term) is kept.
    """

    container: EntityContainer
    entity_types: Mapping[str, EntityType] = field(default_factory=dict)
    annotations: Mapping[str, Mapping[str, Expression]] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "entity_types", MappingProxyType(dict(self.entity_types)))
        object.__setattr__(
            self,
            "annotations",
            MappingProxyType(
                {target: MappingProxyType(dict(terms)) for target, terms in self.annotations.items()}
            ),
        )

    def get_annotation(self, element: ModelElement, term: str) -> Expression | None:
        """Return the annotation value for ``term`` directly on ``element``."""
        terms = self.annotations.get(element.target_path)
        if terms is None:
            return None
        return terms.get(term)

    def find_entity_type(self, full_name: str) -> EntityType | None:
        return self.entity_types.get(full_name)

    def get_declared_type(self, source: NavigationSource | NavigationProperty) -> EntityType | None:
        """Return the entity type a navigation source or property refers to."""
        if isinstance(source, NavigationProperty):
            return self.entity_types.get(source.target_type)
        return self.entity_types.get(source.entity_type)

    def get_key(self, entity_type: EntityType) -> list[StructuralProperty]:
        """Return the key properties of ``entity_type`` in declaration order."""
        keys: list[StructuralProperty] = []
        for name in entity_type.key:
            prop = entity_type.find_property(name)
            keys.append(prop if prop is not None else StructuralProperty(name, nullable=False))
        return keys


__all__ = [
    "EdmModel",
    "EntityContainer",
    "EntitySet",
    "EntityType",
    "ModelElement",
    "NavigationProperty",
    "NavigationSource",
    "Singleton",
    "StructuralProperty",
    "is_navigation_source",
]
