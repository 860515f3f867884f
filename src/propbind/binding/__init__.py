"""Property binding engine exports."""

from .builder import PropertyBindingBuilder, bind_properties, bind_property, build
from .engine import PropertyBinder
from .exceptions import (
    AmbiguousReferenceError,
    ClassResolutionError,
    ConstructionError,
    InvalidPropertyPathError,
    NoCompatibleMutatorError,
    PropertyBindingError,
    TypeConversionError,
    UnresolvedPlaceholderError,
    UnresolvedReferenceError,
)
from .members import MemberBinder
from .placeholders import PlaceholderResolver, PropertiesSource
from .references import ReferenceResolver

__all__ = [
    "AmbiguousReferenceError",
    "ClassResolutionError",
    "ConstructionError",
    "InvalidPropertyPathError",
    "MemberBinder",
    "NoCompatibleMutatorError",
    "PlaceholderResolver",
    "PropertiesSource",
    "PropertyBinder",
    "PropertyBindingBuilder",
    "PropertyBindingError",
    "ReferenceResolver",
    "TypeConversionError",
    "UnresolvedPlaceholderError",
    "UnresolvedReferenceError",
    "bind_properties",
    "bind_property",
    "build",
]
