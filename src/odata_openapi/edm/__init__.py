"""Entity data model: expressions, model elements and the model loader."""

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
    record,
)
from odata_openapi.edm.loader import expand_term, load_model, model_from_dict
from odata_openapi.edm.model import (
    EdmModel,
    EntityContainer,
    EntitySet,
    EntityType,
    ModelElement,
    NavigationProperty,
    NavigationSource,
    Singleton,
    StructuralProperty,
    is_navigation_source,
)

__all__ = [
    # Expressions
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
    # Model
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
    # Loading
    "expand_term",
    "load_model",
    "model_from_dict",
]
