"""Defensive readers for annotation records.

Each helper pulls one typed value out of a :class:`Record`. A missing record,
a missing property, or a property of the wrong expression kind reads as
"not set" and never raises.
"""

from __future__ import annotations

from enum import Flag
from typing import TypeVar

from odata_openapi.edm.expressions import (
    BoolConstant,
    Collection,
    EnumMember,
    Expression,
    IntConstant,
    NavigationPropertyPath,
    PropertyPath,
    Record,
    StringConstant,
)

F = TypeVar("F", bound=Flag)


def as_record(value: Expression | None) -> Record | None:
    return value if isinstance(value, Record) else None


def get_boolean(record: Record | None, name: str) -> bool | None:
    if record is None:
        return None
    value = record.get(name)
    return value.value if isinstance(value, BoolConstant) else None


def get_boolean_or(record: Record | None, name: str, default: bool) -> bool:
    value = get_boolean(record, name)
    return default if value is None else value


def get_string(record: Record | None, name: str) -> str | None:
    if record is None:
        return None
    value = record.get(name)
    return value.value if isinstance(value, StringConstant) else None


def get_integer(record: Record | None, name: str) -> int | None:
    if record is None:
        return None
    value = record.get(name)
    return value.value if isinstance(value, IntConstant) else None


def get_paths(record: Record | None, name: str) -> tuple[str, ...]:
    """Read a collection of property or navigation property paths.

    Elements that are not paths are skipped. A missing collection reads as
    an empty tuple.
    """
    if record is None:
        return ()
    value = record.get(name)
    if not isinstance(value, Collection):
        return ()
    return tuple(
        element.path
        for element in value
        if isinstance(element, (PropertyPath, NavigationPropertyPath))
    )


def get_strings(record: Record | None, name: str) -> tuple[str, ...]:
    if record is None:
        return ()
    value = record.get(name)
    if not isinstance(value, Collection):
        return ()
    return tuple(element.value for element in value if isinstance(element, StringConstant))


def get_path(record: Record | None, name: str) -> str | None:
    if record is None:
        return None
    value = record.get(name)
    if isinstance(value, (PropertyPath, NavigationPropertyPath)):
        return value.path
    return None


def get_record(record: Record | None, name: str) -> Record | None:
    if record is None:
        return None
    return as_record(record.get(name))


def get_records(record: Record | None, name: str) -> tuple[Record, ...]:
    """Read a collection of records, skipping anything that is not a record."""
    if record is None:
        return ()
    value = record.get(name)
    if not isinstance(value, Collection):
        return ()
    return tuple(element for element in value if isinstance(element, Record))


def parse_flags(value: Expression | None, flag_type: type[F]) -> F | None:
    """Decode enum member tokens into a combined flag value.

    Tokens look like ``Namespace.EnumType/member``. Unknown members are
    dropped. Returns None when nothing could be decoded, so "not restricted"
    stays distinct from an explicit empty set (the ``none`` member).
    """
    if not isinstance(value, EnumMember):
        return None

    members = flag_type.__members__
    result: F | None = None
    for token in value.tokens:
        member_name = token.rsplit("/", 1)[-1]
        member = members.get(member_name)
        if member is None:
            continue
        result = member if result is None else result | member
    return result


def get_flags(record: Record | None, name: str, flag_type: type[F]) -> F | None:
    if record is None:
        return None
    return parse_flags(record.get(name), flag_type)


def parse_enum_member(value: Expression | None) -> str | None:
    """Return the member name of a single enum member expression."""
    if not isinstance(value, EnumMember) or not value.tokens:
        return None
    return value.tokens[0].rsplit("/", 1)[-1]


__all__ = [
    "as_record",
    "get_boolean",
    "get_boolean_or",
    "get_flags",
    "get_integer",
    "get_path",
    "get_paths",
    "get_record",
    "get_records",
    "get_string",
    "get_strings",
    "parse_enum_member",
    "parse_flags",
]
