"""Reflective property-path binding for arbitrary object graphs."""

from propbind.binding import (
    PropertyBinder,
    PropertyBindingBuilder,
    PropertyBindingError,
    bind_properties,
    bind_property,
    build,
)
from propbind.container import BindingContext, build_context

__all__ = [
    "BindingContext",
    "PropertyBinder",
    "PropertyBindingBuilder",
    "PropertyBindingError",
    "bind_properties",
    "bind_property",
    "build",
    "build_context",
]
