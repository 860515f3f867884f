"""Resolution of ``#bean:``, ``#type:``, ``#class:``, ``#autowired`` and ``#property:`` values."""

from __future__ import annotations

import logging
from typing import Any, Final

from propbind.registry import BeanRegistry, ClassNotFoundError, Injector, resolve_class

from .exceptions import (
    AmbiguousReferenceError,
    ClassResolutionError,
    ConstructionError,
    PropertyBindingError,
    UnresolvedReferenceError,
)
from .placeholders import PlaceholderResolver

BEAN_PREFIX = "#bean:"
TYPE_PREFIX = "#type:"
CLASS_PREFIX = "#class:"
AUTOWIRED = "#autowired"
PROPERTY_PREFIX = "#property:"

logger = logging.getLogger(__name__)


class _Autowired:
    """Marker standing in for ``#autowired`` until the member type is known."""

    def __repr__(self) -> str:
        return AUTOWIRED


AUTOWIRED_MARKER: Final = _Autowired()


def is_reference(value: Any) -> bool:
    return isinstance(value, str) and value.startswith(
        (BEAN_PREFIX, TYPE_PREFIX, CLASS_PREFIX, AUTOWIRED, PROPERTY_PREFIX)
    )


class ReferenceResolver:
    """Turn reference directives into objects from the registry or injector."""

    def __init__(
        self,
        registry: BeanRegistry,
        injector: Injector,
        placeholders: PlaceholderResolver,
    ) -> None:
        self._registry = registry
        self._injector = injector
        self._placeholders = placeholders

    def resolve(self, value: Any) -> Any:
        """Resolve ``value`` if it is a directive, otherwise return it unchanged.

        ``#autowired`` yields :data:`AUTOWIRED_MARKER`; call :meth:`autowire`
        once the declared type of the target member is known.
        """

        if not is_reference(value):
            return value
        if value.startswith(BEAN_PREFIX):
            return self.lookup_bean(value[len(BEAN_PREFIX) :])
        if value.startswith(TYPE_PREFIX):
            type_ = self.load_class(value[len(TYPE_PREFIX) :])
            return self.lookup_single(type_)
        if value.startswith(CLASS_PREFIX):
            type_ = self.load_class(value[len(CLASS_PREFIX) :])
            return self.create(type_)
        if value == AUTOWIRED:
            return AUTOWIRED_MARKER
        if value.startswith(PROPERTY_PREFIX):
            return self._placeholders.lookup(value[len(PROPERTY_PREFIX) :])
        return value

    def autowire(self, type_: Any) -> Any:
        if not isinstance(type_, type) or type_ is Any:
            msg = f"Cannot autowire a member without a declared class type ({type_!r})"
            raise UnresolvedReferenceError(msg, value=AUTOWIRED)
        return self.lookup_single(type_)

    def lookup_bean(self, name: str) -> Any:
        bean = self._registry.lookup_by_name(name)
        if bean is None:
            msg = f"No bean could be found in the registry with name {name}"
            raise UnresolvedReferenceError(msg, value=f"{BEAN_PREFIX}{name}")
        return bean

    def lookup_single(self, type_: type) -> Any:
        matches = self._registry.lookup_by_type(type_)
        if not matches:
            msg = f"No bean could be found in the registry of type {type_.__qualname__}"
            raise UnresolvedReferenceError(msg)
        if len(matches) > 1:
            names = ", ".join(matches)
            msg = f"Found {len(matches)} beans of type {type_.__qualname__} ({names}), expected one"
            raise AmbiguousReferenceError(msg)
        name, bean = next(iter(matches.items()))
        logger.debug("Resolved bean %s for type %s", name, type_.__qualname__)
        return bean

    def load_class(self, name: str) -> type:
        try:
            return resolve_class(name)
        except ClassNotFoundError as exc:
            msg = f"Cannot resolve class {name}"
            raise ClassResolutionError(msg, value=name) from exc

    def create(self, type_: type) -> Any:
        """Create a new instance of ``type_`` through the injector."""

        try:
            instance = self._injector.new_instance(type_)
        except PropertyBindingError:
            raise
        except Exception as exc:
            msg = f"Cannot create instance of class {type_.__qualname__}"
            raise ConstructionError(msg) from exc
        if instance is None:
            cause = RuntimeError(f"Injector returned no instance of {type_.__qualname__}")
            msg = f"Cannot create instance of class {type_.__qualname__}"
            raise ConstructionError(msg) from cause
        return instance


__all__ = [
    "AUTOWIRED",
    "AUTOWIRED_MARKER",
    "BEAN_PREFIX",
    "CLASS_PREFIX",
    "PROPERTY_PREFIX",
    "TYPE_PREFIX",
    "ReferenceResolver",
    "is_reference",
]
