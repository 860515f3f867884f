"""Registry and construction services."""

from .beans import BeanRegistry
from .injector import ClassNotFoundError, DefaultInjector, Injector, resolve_class

__all__ = [
    "BeanRegistry",
    "ClassNotFoundError",
    "DefaultInjector",
    "Injector",
    "resolve_class",
]
