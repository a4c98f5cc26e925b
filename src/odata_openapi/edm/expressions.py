"""Annotation expression values.

These mirror the CSDL expression kinds a capability annotation can hold.
Every expression is immutable so a loaded model can be shared read-only
between independent synthesis calls.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union


@dataclass(frozen=True)
class BoolConstant:
    value: bool


@dataclass(frozen=True)
class StringConstant:
    value: str


@dataclass(frozen=True)
class IntConstant:
    value: int


@dataclass(frozen=True)
class FloatConstant:
    value: float


@dataclass(frozen=True)
class NullConstant:
    """An explicit null. Readers treat it like a missing value."""


@dataclass(frozen=True)
class PropertyPath:
    path: str


@dataclass(frozen=True)
class NavigationPropertyPath:
    path: str


@dataclass(frozen=True)
class EnumMember:
    """One or more enumeration members as written in the annotation.

    ``value`` is the raw, whitespace-delimited text, for example
    ``"Org.OData.Capabilities.V1.SearchExpressions/AND
    Org.OData.Capabilities.V1.SearchExpressions/OR"``.
    """

    value: str

    @property
    def tokens(self) -> tuple[str, ...]:
        return tuple(self.value.split())


@dataclass(frozen=True)
class PropertyValue:
    name: str
    value: Expression


@dataclass(frozen=True)
class Record:
    """A structured value: an ordered set of named property values."""

    properties: tuple[PropertyValue, ...] = ()
    type_name: str | None = None

    def get(self, name: str) -> Expression | None:
        """Return the value of the first property called ``name``."""
        for prop in self.properties:
            if prop.name == name:
                return prop.value
        return None

    def __contains__(self, name: object) -> bool:
        return any(prop.name == name for prop in self.properties)


@dataclass(frozen=True)
class Collection:
    elements: tuple[Expression, ...] = ()

    def __iter__(self):
        return iter(self.elements)

    def __len__(self) -> int:
        return len(self.elements)


Expression = Union[
    BoolConstant,
    StringConstant,
    IntConstant,
    FloatConstant,
    NullConstant,
    PropertyPath,
    NavigationPropertyPath,
    EnumMember,
    Record,
    Collection,
]


def record(type_name: str | None = None, **properties: Expression) -> Record:
    """Build a :class:`Record` from keyword arguments, keeping their order."""
    return Record(
        properties=tuple(PropertyValue(name, value) for name, value in properties.items()),
        type_name=type_name,
    )


__all__ = [
    "BoolConstant",
    "Collection",
    "EnumMember",
    "Expression",
    "FloatConstant",
    "IntConstant",
    "NavigationPropertyPath",
    "NullConstant",
    "PropertyPath",
    "PropertyValue",
    "Record",
    "StringConstant",
    "record",
]
